from __future__ import annotations

import json
from pathlib import Path

import geopandas as gpd
import pytest
from shapely.geometry import box, mapping

HEADER = "Country,ISO 3166-1 alpha-3,Year,Total,Coal,Oil,Gas,Cement,Flaring,Other"


class FakeClock:
    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


def _csv_rows() -> list[str]:
    rows = [HEADER, "Afghanistan,AFG,1899,0.5,,,,,,"]
    for year in range(1900, 2022):
        usa = 5 + (year - 1900) * 0.1
        rows.append(f"United States,USA,{year},{usa:.3f},1,2,1,0.1,0,0.1")
        if year < 2021:
            rows.append(f"Afghanistan,AFG,{year},{0.01 * (year - 1899):.3f},,,,,,")
        else:
            rows.append(f"Afghanistan,AFG,{year},,,,,,,")
        rows.append(f"Qatar,QAT,{year},{'60.0' if year == 2021 else 'NaN'},,,,,,")
    return rows


def _features() -> dict:
    feats = [
        {"type": "Feature", "id": "AFG", "properties": {"name": "Afghanistan"},
         "geometry": mapping(box(60, 29, 75, 38))},
        {"type": "Feature", "id": "USA", "properties": {"name": "United States of America"},
         "geometry": mapping(box(-125, 25, -67, 49))},
        {"type": "Feature", "id": "QAT", "properties": {"name": "Qatar"},
         "geometry": mapping(box(50.7, 24.5, 51.6, 26.2))},
        {"type": "Feature", "properties": {"ISO_A3": "FRA", "NAME": "France"},
         "geometry": mapping(box(-5, 42, 8, 51))},
        {"type": "Feature", "properties": {"name": "Somaliland"},
         "geometry": mapping(box(43, 8, 49, 11))},
    ]
    return {"type": "FeatureCollection", "features": feats}


@pytest.fixture()
def csv_path(tmp_path: Path) -> Path:
    p = tmp_path / "percapita.csv"
    p.write_text("\n".join(_csv_rows()) + "\n", encoding="utf-8")
    return p


@pytest.fixture()
def geo_path(tmp_path: Path) -> Path:
    p = tmp_path / "world.geojson"
    p.write_text(json.dumps(_features()), encoding="utf-8")
    return p


@pytest.fixture()
def features() -> gpd.GeoDataFrame:
    return gpd.GeoDataFrame(
        {"id": ["AAA", "BBB", None], "name": ["Aland", "Bland", "Nowhere"], "properties": [{}, {}, {}]},
        geometry=[box(0, 0, 10, 10), box(20, 20, 30, 30), box(-10, -10, -5, -5)],
        crs="EPSG:4326",
    )
