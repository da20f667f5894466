"""Fetch and parse the tabular and geographic sources."""

from __future__ import annotations

import io
import json
import logging
from dataclasses import dataclass
from pathlib import Path

import geopandas as gpd
import pandas as pd
import requests
from shapely.errors import ShapelyError
from shapely.geometry import shape

from ..config import CODE_COLUMN, FETCH_TIMEOUT, TOTAL_COLUMN, YEAR_COLUMN
from ..errors import DataLoadError

LOGGER = logging.getLogger(__name__)

REQUIRED_COLUMNS = (CODE_COLUMN, YEAR_COLUMN, TOTAL_COLUMN)
ID_PROPERTIES = ("ISO_A3", "iso_a3")
NAME_PROPERTIES = ("name", "NAME", "ADMIN")


@dataclass(frozen=True)
class RawData:
    records: pd.DataFrame
    features: gpd.GeoDataFrame


def _is_remote(source: str | Path) -> bool:
    return isinstance(source, str) and source.lower().startswith(("http://", "https://"))


def read_source(source: str | Path, timeout: float = FETCH_TIMEOUT) -> str:
    if _is_remote(source):
        try:
            resp = requests.get(source, timeout=timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise DataLoadError(source, f"fetch failed: {exc}") from exc
        try:
            return resp.content.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise DataLoadError(source, f"not UTF-8: {exc}") from exc
    try:
        return Path(source).read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise DataLoadError(source, f"read failed: {exc}") from exc


def load_table(source: str | Path, timeout: float = FETCH_TIMEOUT) -> pd.DataFrame:
    """Parse the CSV source; every column is kept as text for the normalizer."""
    text = read_source(source, timeout)
    try:
        df = pd.read_csv(io.StringIO(text), dtype=str)
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise DataLoadError(source, f"unparseable CSV: {exc}") from exc
    df.columns = [str(c).strip() for c in df.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise DataLoadError(source, f"missing columns: {missing}")
    LOGGER.info("Loaded %d rows from %s", len(df), source)
    return df


def _feature_id(feature: dict) -> str | None:
    fid = feature.get("id")
    if fid is None:
        props = feature.get("properties") or {}
        fid = next((props[k] for k in ID_PROPERTIES if props.get(k)), None)
    return None if fid is None else str(fid).strip() or None


def _feature_name(props: dict, fid: str | None) -> str:
    for k in NAME_PROPERTIES:
        if props.get(k):
            return str(props[k])
    return fid or ""


def load_features(source: str | Path, timeout: float = FETCH_TIMEOUT) -> gpd.GeoDataFrame:
    text = read_source(source, timeout)
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DataLoadError(source, f"invalid JSON: {exc}") from exc
    if not isinstance(doc, dict) or doc.get("type") != "FeatureCollection":
        raise DataLoadError(source, "not a GeoJSON FeatureCollection")
    features = doc.get("features")
    if not isinstance(features, list):
        raise DataLoadError(source, "FeatureCollection has no feature list")

    rows, geoms = [], []
    for i, feat in enumerate(features):
        if not isinstance(feat, dict):
            raise DataLoadError(source, f"feature {i} is not an object")
        props = feat.get("properties") or {}
        fid = _feature_id(feat)
        try:
            geom = shape(feat["geometry"]) if feat.get("geometry") else None
        except (ShapelyError, ValueError, TypeError, KeyError, AttributeError) as exc:
            raise DataLoadError(source, f"feature {i} ({fid}): bad geometry: {exc}") from exc
        rows.append({"id": fid, "name": _feature_name(props, fid), "properties": dict(props)})
        geoms.append(geom)

    gdf = gpd.GeoDataFrame(
        pd.DataFrame(rows, columns=["id", "name", "properties"]),
        geometry=gpd.GeoSeries(geoms, crs="EPSG:4326"),
    )
    LOGGER.info("Loaded %d features from %s", len(gdf), source)
    return gdf


def load_sources(
    csv_source: str | Path,
    geo_source: str | Path,
    timeout: float = FETCH_TIMEOUT,
) -> RawData:
    """Load both sources; either one failing aborts with ``DataLoadError``."""
    features = load_features(geo_source, timeout)
    records = load_table(csv_source, timeout)
    return RawData(records=records, features=features)
