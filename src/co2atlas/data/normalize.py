"""Numeric coercion, year filtering and the distinct year set."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator

import geopandas as gpd
import numpy as np
import pandas as pd

from ..config import (
    CATEGORY_COLUMNS,
    CODE_COLUMN,
    MIN_YEAR,
    NAME_COLUMN,
    TOTAL_COLUMN,
    YEAR_COLUMN,
)
from ..errors import NoDataError
from .loader import RawData

LOGGER = logging.getLogger(__name__)

CATEGORIES = tuple(c.lower() for c in CATEGORY_COLUMNS)


@dataclass(frozen=True)
class EmissionRecord:
    country_code: str
    country: str
    year: int
    total: float
    coal: float = np.nan
    oil: float = np.nan
    gas: float = np.nan
    cement: float = np.nan
    flaring: float = np.nan
    other: float = np.nan


@dataclass(frozen=True)
class EmissionData:
    records: pd.DataFrame
    features: gpd.GeoDataFrame
    years: tuple[int, ...]

    @property
    def latest_year(self) -> int:
        return self.years[-1]

    @property
    def totals(self) -> pd.Series:
        return self.records["total"].dropna()

    def iter_records(self) -> Iterator[EmissionRecord]:
        cols = ["country_code", "country", "year", "total", *CATEGORIES]
        for row in self.records[cols].itertuples(index=False):
            yield EmissionRecord(*row)


def _to_number(s: pd.Series) -> pd.Series:
    return pd.to_numeric(s.astype(str).str.strip(), errors="coerce").astype(float)


def normalize_records(raw: pd.DataFrame, min_year: int = MIN_YEAR) -> pd.DataFrame:
    df = pd.DataFrame({
        "country_code": raw[CODE_COLUMN].str.strip(),
        "country": raw[NAME_COLUMN].str.strip() if NAME_COLUMN in raw else raw[CODE_COLUMN].str.strip(),
        "year": _to_number(raw[YEAR_COLUMN]),
        "total": _to_number(raw[TOTAL_COLUMN]),
    })
    for col, key in zip(CATEGORY_COLUMNS, CATEGORIES):
        df[key] = _to_number(raw[col]) if col in raw else np.nan

    # only finite whole years survive; NaN fails every comparison
    year = df["year"]
    keep = np.isfinite(year) & (year % 1 == 0) & (year >= min_year)
    df = df[keep].copy()
    df["year"] = df["year"].astype(int)
    df["country_code"] = df["country_code"].replace("", np.nan)
    return df.reset_index(drop=True)


def distinct_years(records: pd.DataFrame) -> tuple[int, ...]:
    return tuple(sorted(int(y) for y in records["year"].unique()))


def normalize(raw: RawData, min_year: int = MIN_YEAR) -> EmissionData:
    """Coerce numbers, keep ``year >= min_year`` and collect the year set.

    Raises ``NoDataError`` when no year survives the filter.
    """
    records = normalize_records(raw.records, min_year)
    years = distinct_years(records)
    if not years:
        raise NoDataError(f"no records with year >= {min_year}")
    LOGGER.info(
        "Normalized %d of %d rows; years %d-%d", len(records), len(raw.records), years[0], years[-1]
    )
    return EmissionData(records=records, features=raw.features, years=years)
