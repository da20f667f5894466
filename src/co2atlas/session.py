"""Explicit owner of everything built after a successful load."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from .config import MapConfig
from .controller import InteractionController
from .data import EmissionData, load_sources, normalize
from .legend import LegendRenderer
from .renderer import MapRenderer
from .scale import ColorScale
from .year_index import YearIndexer

LOGGER = logging.getLogger(__name__)


@dataclass
class Session:
    config: MapConfig
    data: EmissionData
    scale: ColorScale
    indexer: YearIndexer
    legend: LegendRenderer
    renderer: MapRenderer
    controller: InteractionController

    @classmethod
    def load(cls, config: MapConfig | None = None, clock: Callable[[], float] = time.monotonic) -> "Session":
        """Run the whole pipeline; raises before drawing anything if loading fails."""
        config = config or MapConfig.from_env()
        raw = load_sources(config.csv_source, config.geo_source, config.fetch_timeout)
        data = normalize(raw, config.min_year)
        return cls.from_data(data, config, clock)

    @classmethod
    def from_data(
        cls,
        data: EmissionData,
        config: MapConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> "Session":
        config = config or MapConfig()
        scale = ColorScale.from_totals(data.totals, config.clip_percentile, config.colormap)
        legend = LegendRenderer(scale, canvas=(config.width, config.height))
        legend.render()
        renderer = MapRenderer(scale, config, clock)
        renderer.draw(data.features)
        indexer = YearIndexer(data.records)
        controller = InteractionController(data.years, indexer, renderer, config.tooltip_offset)
        year = controller.start()
        LOGGER.info("Session ready: %d shapes, initial year %d", len(renderer.shapes), year)
        return cls(
            config=config,
            data=data,
            scale=scale,
            indexer=indexer,
            legend=legend,
            renderer=renderer,
            controller=controller,
        )

    @property
    def selected_year(self) -> int:
        return self.controller.view.selected_year
