import importlib.util
import json
import sys
from pathlib import Path

import pytest

from co2atlas.data import load_sources, normalize

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "check_join_coverage.py"


@pytest.fixture(scope="module")
def script():
    spec = importlib.util.spec_from_file_location("check_join_coverage", SCRIPT)
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)
    return mod


def test_coverage_table(script, csv_path, geo_path):
    data = normalize(load_sources(csv_path, geo_path))
    df = script.coverage(data.records, data.features["id"]).set_index("code")
    assert set(df.index) == {"AFG", "USA", "QAT", "FRA"}
    assert bool(df.loc["FRA", "in_geometry"]) and not bool(df.loc["FRA", "in_table"])
    assert df.loc["AFG", "last_year_with_total"] == 2020


def test_main_writes_reports(script, csv_path, geo_path, tmp_path, monkeypatch, capsys):
    out_csv, out_json = tmp_path / "r" / "join.csv", tmp_path / "join.json"
    monkeypatch.setattr(sys, "argv", [
        "check_join_coverage.py", "--csv", str(csv_path), "--geojson", str(geo_path),
        "--report_csv", str(out_csv), "--report_json", str(out_json),
    ])
    script.main()
    meta = json.loads(out_json.read_text(encoding="utf-8"))
    assert meta["codes_joined"] == 3
    assert meta["geometry_only"] == ["FRA"]
    assert out_csv.exists()
    assert "[OK]" in capsys.readouterr().out
