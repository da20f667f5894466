"""Year selection and hover handling on top of the map renderer."""

from __future__ import annotations

import bisect
import logging
from dataclasses import dataclass, field
from html import escape

from .config import TOOLTIP_OFFSET, UNIT_LABEL
from .renderer import MapRenderer
from .year_index import YearIndex, YearIndexer

LOGGER = logging.getLogger(__name__)

NO_DATA_TEXT = "No data"


@dataclass(frozen=True)
class YearChanged:
    year: int


@dataclass(frozen=True)
class PointerEntered:
    shape_key: str


@dataclass(frozen=True)
class PointerMoved:
    shape_key: str
    x: float
    y: float


@dataclass(frozen=True)
class PointerLeft:
    shape_key: str


@dataclass
class ViewState:
    selected_year: int
    active_index: YearIndex | None = None


@dataclass
class Tooltip:
    visible: bool = False
    lines: tuple[str, ...] = field(default_factory=tuple)
    left: float = 0.0
    top: float = 0.0

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    @property
    def html(self) -> str:
        if not self.lines:
            return ""
        head, *rest = (escape(line) for line in self.lines)
        return "<br/>".join([f"<strong>{head}</strong>", *rest])


def format_value(value: float | None) -> str:
    if value is None:
        return NO_DATA_TEXT
    return f"{value:.2f} {UNIT_LABEL}"


def tooltip_lines(name: str, year: int, value: float | None) -> tuple[str, ...]:
    return (name, f"Year: {year}", format_value(value))


class InteractionController:
    """Single owner of ``ViewState``; one handler per event type.

    A year change updates the view before the renderer runs, so any pointer
    event handled afterwards reads the new year and index.
    """

    def __init__(
        self,
        years: tuple[int, ...],
        indexer: YearIndexer,
        renderer: MapRenderer,
        offset: tuple[float, float] = TOOLTIP_OFFSET,
    ) -> None:
        if not years:
            raise ValueError("controller needs at least one year")
        self.years = tuple(years)
        self.indexer = indexer
        self.renderer = renderer
        self.offset = offset
        self.view = ViewState(selected_year=self.years[-1])
        self.tooltip = Tooltip()
        self.year_label = str(self.view.selected_year)
        self._handlers = {
            YearChanged: self._on_year_changed,
            PointerEntered: self._on_pointer_entered,
            PointerMoved: self._on_pointer_moved,
            PointerLeft: self._on_pointer_left,
        }

    @property
    def bounds(self) -> tuple[int, int]:
        return self.years[0], self.years[-1]

    def dispatch(self, event) -> None:
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"unhandled event: {event!r}")
        handler(event)

    def start(self) -> int:
        """Initial paint at the latest year."""
        return self.select_year(self.years[-1])

    def snap(self, year: int) -> int:
        year = int(year)
        i = bisect.bisect_left(self.years, year)
        if i < len(self.years) and self.years[i] == year:
            return year
        candidates = self.years[max(i - 1, 0) : i + 1]
        return min(candidates, key=lambda y: (abs(y - year), y))

    def select_year(self, year: int) -> int:
        snapped = self.snap(year)
        if snapped != year:
            LOGGER.debug("Year %s not in data, using %d", year, snapped)
        self.view.selected_year = snapped
        self.view.active_index = self.indexer.index_for(snapped)
        self.year_label = str(snapped)
        LOGGER.debug("Updating map for year %d", snapped)
        self.renderer.update(self.view.active_index)
        return snapped

    def value_for(self, shape_key: str) -> float | None:
        index = self.view.active_index
        if index is None:
            return None
        return index.value(self.renderer.shape(shape_key).country_code)

    def _on_year_changed(self, event: YearChanged) -> None:
        self.select_year(event.year)

    def _on_pointer_entered(self, event: PointerEntered) -> None:
        self.tooltip.visible = True

    def _on_pointer_moved(self, event: PointerMoved) -> None:
        try:
            shape = self.renderer.shape(event.shape_key)
        except KeyError:
            LOGGER.debug("Pointer over unknown shape %s", event.shape_key)
            return
        name = shape.name or shape.country_code or ""
        self.tooltip.lines = tooltip_lines(name, self.view.selected_year, self.value_for(event.shape_key))
        self.tooltip.left = event.x + self.offset[0]
        self.tooltip.top = event.y + self.offset[1]

    def _on_pointer_left(self, event: PointerLeft) -> None:
        self.tooltip.visible = False
