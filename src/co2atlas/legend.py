"""Static gradient legend with a numeric axis over the scale domain."""

from __future__ import annotations

from html import escape

from .config import HEIGHT, LEGEND_TITLE, WIDTH
from .scale import ColorScale

LEGEND_WIDTH = 300
LEGEND_HEIGHT = 20


def format_tick(value: float) -> str:
    return f"{value:g}"


class LegendRenderer:
    """Draws the legend once; the scale never changes so neither does this."""

    def __init__(
        self,
        scale: ColorScale,
        canvas: tuple[int, int] = (WIDTH, HEIGHT),
        size: tuple[int, int] = (LEGEND_WIDTH, LEGEND_HEIGHT),
        title: str = LEGEND_TITLE,
    ) -> None:
        self.scale = scale
        self.canvas = canvas
        self.size = size
        self.title = title
        self._markup: str | None = None

    def x_of(self, value: float) -> float:
        return self.scale.normalized(value) * self.size[0]

    def render(self) -> str:
        if self._markup is None:
            self._markup = self._build()
        return self._markup

    def _build(self) -> str:
        cw, ch = self.canvas
        lw, lh = self.size
        stops = "".join(
            f'<stop offset="{offset * 100:g}%" stop-color="{color}"/>' for offset, color in self.scale.stops(11)
        )
        ticks = []
        for t in self.scale.ticks(5):
            x = self.x_of(t)
            ticks.append(
                f'<g class="tick" transform="translate({x:.2f},0)">'
                f'<line y2="6" stroke="currentColor"/>'
                f'<text y="9" dy="0.71em" text-anchor="middle">{format_tick(t)}</text></g>'
            )
        return (
            '<defs><linearGradient id="legend-gradient" x1="0%" x2="100%" y1="0%" y2="0%">'
            f"{stops}</linearGradient></defs>"
            f'<g id="legend" transform="translate({(cw - lw) / 2:g},{ch - 40:g})">'
            f'<rect width="{lw}" height="{lh}" style="fill: url(#legend-gradient)"/>'
            f'<g class="axis" transform="translate(0,{lh})" font-size="10">'
            f'<path d="M0.5,6V0.5H{lw + 0.5}V6" stroke="currentColor" fill="none"/>'
            f'{"".join(ticks)}</g>'
            f'<text x="{lw / 2:g}" y="-6" text-anchor="middle" font-size="12">{escape(self.title)}</text>'
            "</g>"
        )
