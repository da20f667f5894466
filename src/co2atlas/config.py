from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path

DATA_DIR = Path("data")
DATA_CSV = DATA_DIR / "GCB2022v27_percapita_flat.csv"
DATA_GEOJSON = DATA_DIR / "world.geojson"

WIDTH, HEIGHT = 1000, 650
PROJECTION_SCALE = 160
TRANSITION_MS = 500
MIN_YEAR = 1900
CLIP_PERCENTILE = 0.99
COLORMAP = "Reds"
NO_DATA_COLOR = "#eeeeee"
STROKE_COLOR = "#999999"
TOOLTIP_OFFSET = (10, 10)
FETCH_TIMEOUT = 30.0

CODE_COLUMN = "ISO 3166-1 alpha-3"
NAME_COLUMN = "Country"
YEAR_COLUMN = "Year"
TOTAL_COLUMN = "Total"
CATEGORY_COLUMNS = ("Coal", "Oil", "Gas", "Cement", "Flaring", "Other")

UNIT_LABEL = "t CO₂ per person"
LEGEND_TITLE = "Per-capita CO₂ emissions (t / person)"


@dataclass(frozen=True)
class MapConfig:
    csv_source: str | Path = DATA_CSV
    geo_source: str | Path = DATA_GEOJSON
    width: int = WIDTH
    height: int = HEIGHT
    projection_scale: float = PROJECTION_SCALE
    transition_ms: int = TRANSITION_MS
    min_year: int = MIN_YEAR
    clip_percentile: float = CLIP_PERCENTILE
    colormap: str = COLORMAP
    no_data_color: str = NO_DATA_COLOR
    stroke_color: str = STROKE_COLOR
    tooltip_offset: tuple[int, int] = TOOLTIP_OFFSET
    fetch_timeout: float = FETCH_TIMEOUT

    @classmethod
    def from_env(cls, **overrides) -> "MapConfig":
        """Build a config, letting ``CO2ATLAS_CSV``/``CO2ATLAS_GEOJSON`` pick the sources."""
        cfg = cls()
        env = {}
        if os.environ.get("CO2ATLAS_CSV"):
            env["csv_source"] = os.environ["CO2ATLAS_CSV"]
        if os.environ.get("CO2ATLAS_GEOJSON"):
            env["geo_source"] = os.environ["CO2ATLAS_GEOJSON"]
        return replace(cfg, **{**env, **overrides})
