#!/usr/bin/env python
# -*- coding: utf-8 -*-
from __future__ import annotations

import argparse, json
from datetime import datetime, timezone
from pathlib import Path
import pandas as pd

from co2atlas.config import DATA_CSV, DATA_GEOJSON, MIN_YEAR
from co2atlas.data import load_sources, normalize
from co2atlas.errors import Co2AtlasError


def coverage(records: pd.DataFrame, feature_ids: pd.Series) -> pd.DataFrame:
    table_codes = set(records["country_code"].dropna())
    geo_codes = set(feature_ids.dropna())
    rows = [{"code": c, "in_table": c in table_codes, "in_geometry": c in geo_codes}
            for c in sorted(table_codes | geo_codes)]
    df = pd.DataFrame(rows, columns=["code", "in_table", "in_geometry"])
    last_year = (records.dropna(subset=["total"]).groupby("country_code")["year"].max()
                 .rename("last_year_with_total"))
    return df.merge(last_year, left_on="code", right_index=True, how="left")


def main():
    ap = argparse.ArgumentParser(description="Report how well the CSV country codes join against the GeoJSON feature ids.")
    ap.add_argument("--csv", default=str(DATA_CSV), help="per-capita CSV (path or URL)")
    ap.add_argument("--geojson", default=str(DATA_GEOJSON), help="world GeoJSON (path or URL)")
    ap.add_argument("--min_year", type=int, default=MIN_YEAR)
    ap.add_argument("--report_csv", required=True, help="Output CSV with one row per code")
    ap.add_argument("--report_json", required=True, help="Output JSON with the overlap summary")
    args = ap.parse_args()

    try:
        data = normalize(load_sources(args.csv, args.geojson), args.min_year)
    except Co2AtlasError as e:
        print(f"[ERROR] {e}")
        raise SystemExit(1)

    per_code = coverage(data.records, data.features["id"])
    out_csv = Path(args.report_csv)
    out_csv.parent.mkdir(parents=True, exist_ok=True)
    per_code.to_csv(out_csv, index=False)

    both = per_code["in_table"] & per_code["in_geometry"]
    n_geo = int(per_code["in_geometry"].sum())
    meta = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "csv": args.csv,
        "geojson": args.geojson,
        "years": [data.years[0], data.years[-1]],
        "codes_in_table": int(per_code["in_table"].sum()),
        "codes_in_geometry": n_geo,
        "codes_joined": int(both.sum()),
        "share_shapes_joined": float(both.sum() / n_geo) if n_geo else 0.0,
        "table_only": per_code.loc[per_code["in_table"] & ~per_code["in_geometry"], "code"].tolist(),
        "geometry_only": per_code.loc[~per_code["in_table"] & per_code["in_geometry"], "code"].tolist(),
    }
    if not both.any():
        print("[WARN] no country code joins; every shape will render as 'no data'")
    with open(args.report_json, "w", encoding="utf-8") as f:
        json.dump(meta, f, indent=2)

    print("[OK] join coverage written:", str(out_csv))
    print(json.dumps({k: v for k, v in meta.items() if not isinstance(v, list) or k == "years"}, indent=2))


if __name__ == "__main__":
    main()
