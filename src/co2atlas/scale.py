"""Global, percentile-clamped sequential color scale."""

from __future__ import annotations

import logging
import math
from typing import Iterable

import matplotlib
import numpy as np
import pandas as pd
from matplotlib.colors import to_hex
from matplotlib.ticker import MaxNLocator

from .config import CLIP_PERCENTILE, COLORMAP
from .errors import NoDataError

LOGGER = logging.getLogger(__name__)


def _missing(value) -> bool:
    return value is None or math.isnan(float(value))


class ColorScale:
    """Maps a value in ``[lower, upper]`` onto a sequential colormap.

    Values outside the domain are clamped, so everything at or above
    ``upper`` shares the most saturated color. Missing values map to ``None``.
    """

    def __init__(self, upper: float, lower: float = 0.0, cmap: str = COLORMAP) -> None:
        self.lower = float(lower)
        self.upper = float(upper)
        self.cmap_name = cmap
        self._cmap = matplotlib.colormaps[cmap]

    @classmethod
    def from_totals(
        cls, totals: Iterable[float], percentile: float = CLIP_PERCENTILE, cmap: str = COLORMAP
    ) -> "ColorScale":
        values = pd.Series(list(totals), dtype=float).dropna()
        if values.empty:
            raise NoDataError("no numeric totals to build a color scale from")
        # pandas' default "linear" quantile interpolates between order statistics
        upper = float(values.quantile(percentile))
        LOGGER.info("Color scale domain [0, %.4f] from %d values (q=%.2f)", upper, len(values), percentile)
        return cls(upper, cmap=cmap)

    @property
    def domain(self) -> tuple[float, float]:
        return (self.lower, self.upper)

    def normalized(self, value: float) -> float:
        span = self.upper - self.lower
        if span <= 0:
            return 0.0
        return float(np.clip((value - self.lower) / span, 0.0, 1.0))

    def __call__(self, value: float | None) -> str | None:
        if _missing(value):
            return None
        return to_hex(self._cmap(self.normalized(float(value))))

    color_of = __call__

    def stops(self, count: int = 11) -> list[tuple[float, str]]:
        """Evenly spaced ``(offset, color)`` pairs across the whole domain."""
        return [(float(t), self(self.lower + t * (self.upper - self.lower))) for t in np.linspace(0, 1, count)]

    def ticks(self, count: int = 5) -> list[float]:
        if self.upper <= self.lower:
            return [self.lower]
        locs = MaxNLocator(nbins=count, steps=[1, 2, 2.5, 5, 10]).tick_values(self.lower, self.upper)
        eps = (self.upper - self.lower) * 1e-9
        return [float(t) for t in locs if self.lower - eps <= t <= self.upper + eps]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ColorScale):
            return NotImplemented
        return (self.lower, self.upper, self.cmap_name) == (other.lower, other.upper, other.cmap_name)

    def __hash__(self) -> int:
        return hash((self.lower, self.upper, self.cmap_name))

    def __repr__(self) -> str:
        return f"ColorScale(domain=[{self.lower:g}, {self.upper:g}], cmap={self.cmap_name!r})"
