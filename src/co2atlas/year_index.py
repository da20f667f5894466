"""Per-year country code -> per-capita total lookup."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from types import MappingProxyType
from typing import Iterator

import pandas as pd

LOGGER = logging.getLogger(__name__)


class YearIndex(Mapping):
    """Read-only mapping for one year; codes without a numeric total are absent."""

    def __init__(self, year: int, values: dict[str, float]) -> None:
        self.year = int(year)
        self._values = MappingProxyType(dict(values))

    def __getitem__(self, code: str) -> float:
        return self._values[code]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def value(self, code: str | None) -> float | None:
        if code is None:
            return None
        v = self._values.get(code)
        return None if v is None or math.isnan(v) else v

    def __repr__(self) -> str:
        return f"YearIndex(year={self.year}, countries={len(self)})"


def build_index(records: pd.DataFrame, year: int) -> YearIndex:
    sub = records[(records["year"] == year) & records["total"].notna() & records["country_code"].notna()]
    # later rows win on duplicate codes
    values = {str(c): float(v) for c, v in zip(sub["country_code"], sub["total"])}
    return YearIndex(year, values)


class YearIndexer:
    """Builds ``YearIndex`` objects on demand, cached by year."""

    def __init__(self, records: pd.DataFrame) -> None:
        self._records = records
        self._cache: dict[int, YearIndex] = {}

    def index_for(self, year: int) -> YearIndex:
        year = int(year)
        idx = self._cache.get(year)
        if idx is None:
            idx = self._cache[year] = build_index(self._records, year)
            if not idx:
                LOGGER.debug("No records for year %d", year)
        return idx
