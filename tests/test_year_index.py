import math

import pandas as pd
import pytest

from co2atlas.data import load_sources, normalize
from co2atlas.year_index import YearIndex, YearIndexer, build_index


@pytest.fixture()
def data(csv_path, geo_path):
    return normalize(load_sources(csv_path, geo_path))


def test_every_year_has_clean_index(data):
    indexer = YearIndexer(data.records)
    for year in data.years:
        index = indexer.index_for(year)
        codes = set(data.records.loc[data.records["year"] == year, "country_code"])
        assert all(not math.isnan(v) for v in index.values())
        assert set(index) <= codes


def test_missing_totals_are_absent(data):
    index = YearIndexer(data.records).index_for(2021)
    assert "AFG" not in index
    assert index.value("AFG") is None
    assert index["USA"] == pytest.approx(17.1)
    assert "QAT" not in YearIndexer(data.records).index_for(1900)


def test_unknown_year_gives_empty_index(data):
    index = YearIndexer(data.records).index_for(1500)
    assert len(index) == 0
    assert index.value("USA") is None


def test_cached_by_year(data):
    indexer = YearIndexer(data.records)
    assert indexer.index_for(2000) is indexer.index_for(2000)


def test_last_row_wins_and_blank_codes_skipped():
    records = pd.DataFrame({
        "country_code": ["AAA", "AAA", None],
        "year": [2000, 2000, 2000],
        "total": [1.0, 2.0, 3.0],
    })
    index = build_index(records, 2000)
    assert dict(index) == {"AAA": 2.0}
    assert isinstance(index, YearIndex) and index.year == 2000
