"""Country shapes drawn once, re-colored per year through fill transitions."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from html import escape
from typing import Callable

import geopandas as gpd
import numpy as np
from matplotlib.colors import to_hex, to_rgb

from .config import MapConfig
from .projection import svg_paths
from .scale import ColorScale
from .year_index import YearIndex

LOGGER = logging.getLogger(__name__)


def ease_cubic_in_out(t: float) -> float:
    if t < 0.5:
        return 4 * t**3
    return 1 - (-2 * t + 2) ** 3 / 2


def interpolate_rgb(start: str, end: str, t: float) -> str:
    a, b = np.array(to_rgb(start)), np.array(to_rgb(end))
    return to_hex(a + (b - a) * t)


@dataclass(frozen=True)
class Shape:
    key: str
    country_code: str | None
    name: str
    path: str


@dataclass(frozen=True)
class Transition:
    start: str
    end: str
    started_at: float
    duration: float

    def progress(self, now: float) -> float:
        if self.duration <= 0:
            return 1.0
        return min(max((now - self.started_at) / self.duration, 0.0), 1.0)

    def finished(self, now: float) -> bool:
        return self.progress(now) >= 1.0

    def color_at(self, now: float) -> str:
        t = self.progress(now)
        if t >= 1.0:
            return self.end
        return interpolate_rgb(self.start, self.end, ease_cubic_in_out(t))


class MapRenderer:
    """Owns the drawn shapes and their per-shape fill transitions.

    Geometry is fixed by :meth:`draw`; :meth:`update` only moves fills.
    A shape with no fill yet takes its first color immediately, later updates
    animate from whatever color the shape shows at that moment, so an update
    arriving mid-transition retargets it instead of queueing behind it.
    """

    def __init__(
        self,
        scale: ColorScale,
        config: MapConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.scale = scale
        self.config = config or MapConfig()
        self._clock = clock
        self._shapes: tuple[Shape, ...] = ()
        self._by_key: dict[str, Shape] = {}
        self._drawn = False
        self._fills: dict[str, str | None] = {}
        self._targets: dict[str, str] = {}
        self._transitions: dict[str, Transition] = {}

    @property
    def shapes(self) -> tuple[Shape, ...]:
        return self._shapes

    @property
    def drawn(self) -> bool:
        return self._drawn

    def draw(self, features: gpd.GeoDataFrame) -> tuple[Shape, ...]:
        if self._drawn:
            raise RuntimeError("map shapes are already drawn")
        cfg = self.config
        paths = svg_paths(features, width=cfg.width, height=cfg.height, scale=cfg.projection_scale)
        self._shapes = tuple(
            Shape(
                key=f"shape-{i}",
                country_code=code if isinstance(code, str) else None,
                name=name if isinstance(name, str) and name else (code if isinstance(code, str) else ""),
                path=d,
            )
            for i, (code, name, d) in enumerate(zip(features["id"], features["name"], paths))
        )
        self._by_key = {s.key: s for s in self._shapes}
        self._fills = {s.key: None for s in self._shapes}
        self._drawn = True
        LOGGER.info("Drew %d country shapes", len(self._shapes))
        return self._shapes

    def target_color(self, code: str | None, index: YearIndex) -> str:
        value = index.value(code)
        if value is None:
            return self.config.no_data_color
        return self.scale(value)

    def update(self, index: YearIndex) -> int:
        """Retarget every shape to its color in ``index``; returns how many changed."""
        now = self._clock()
        duration = self.config.transition_ms / 1000.0
        changed = 0
        for shape in self._shapes:
            target = self.target_color(shape.country_code, index)
            if self._targets.get(shape.key) == target:
                continue
            current = self.fill_at(shape.key, now)
            self._targets[shape.key] = target
            changed += 1
            if current is None or current == target:
                self._transitions.pop(shape.key, None)
                self._fills[shape.key] = target
            else:
                self._transitions[shape.key] = Transition(current, target, now, duration)
        LOGGER.debug("Year %d: %d of %d shapes retargeted", index.year, changed, len(self._shapes))
        return changed

    def fill_at(self, key: str, now: float | None = None) -> str | None:
        now = self._clock() if now is None else now
        tr = self._transitions.get(key)
        if tr is None:
            return self._fills.get(key)
        if tr.finished(now):
            del self._transitions[key]
            self._fills[key] = tr.end
            return tr.end
        return tr.color_at(now)

    def fills(self, now: float | None = None) -> dict[str, str | None]:
        now = self._clock() if now is None else now
        return {s.key: self.fill_at(s.key, now) for s in self._shapes}

    @property
    def targets(self) -> dict[str, str]:
        return dict(self._targets)

    def in_flight(self, now: float | None = None) -> set[str]:
        now = self._clock() if now is None else now
        return {k for k, tr in self._transitions.items() if not tr.finished(now)}

    def shape(self, key: str) -> Shape:
        return self._by_key[key]

    def to_svg(self, now: float | None = None) -> str:
        """Markup for the country group with the fills visible at ``now``."""
        fills = self.fills(now)
        out = ['<g id="countries">']
        for s in self._shapes:
            fill = fills[s.key]
            out.append(
                f'<path class="country" data-key="{s.key}" data-id="{escape(s.country_code or "")}"'
                f' data-name="{escape(s.name)}" d="{s.path}" stroke="{self.config.stroke_color}"'
                + (f' fill="{fill}"' if fill else ' fill="none"')
                + "/>"
            )
        out.append("</g>")
        return "\n".join(out)
