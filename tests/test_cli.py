"""Tests for the command-line interface."""

import csv
import json

import pytest

from cb_geofence.cli import build_parser, main

GEOMETRIES = "circle|12.34,56.78|500;polygon|0,0|0,1|1,1|1,0"


def test_check_inside(capsys):
    assert main(["check", "--geometries", GEOMETRIES, "--point", "0.5,0.5"]) == 0
    out = capsys.readouterr().out
    assert "0\tcircle\tcontains=False" in out
    assert "1\tpolygon\tcontains=True" in out
    assert "inside=True" in out


def test_check_outside_negative_point(capsys):
    assert main(["check", "--geometries", GEOMETRIES, "--point=-5,-5"]) == 0
    assert "inside=False" in capsys.readouterr().out


def test_check_json(capsys):
    assert main(["check", "--geometries", GEOMETRIES, "--point", "12.34,56.78", "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["inside"] is True
    assert payload["point"] == {"lat": 12.34, "lng": 56.78}
    assert [g["kind"] for g in payload["geometries"]] == ["circle", "polygon"]
    assert [g["contains"] for g in payload["geometries"]] == [True, False]
    assert payload["geometries"][0]["encoded"] == "circle|12.34,56.78|500.0"


def test_check_bad_point_reports_error(capsys):
    assert main(["check", "--geometries", GEOMETRIES, "--point", "somewhere"]) == 2
    assert "somewhere" in capsys.readouterr().err


def test_strict_rejects_malformed_segment(capsys):
    assert main(["normalize", "--geometries", "polygon|0,0|1,1", "--strict"]) == 2
    assert capsys.readouterr().err


def test_normalize_skips_bad_segments(capsys):
    text = "triangle|1,2|3,4; circle | 1,2 | 3 ;polygon|0,0|1,1"
    assert main(["normalize", "--geometries", text]) == 0
    assert capsys.readouterr().out.strip() == "circle|1.0,2.0|3.0"


def test_check_csv(tmp_path, capsys):
    src = tmp_path / "points.csv"
    src.write_text("id,latitude,longitude\na,0.5,0.5\nb,5,5\nc,bad,1\n", encoding="utf-8")
    out = tmp_path / "results.csv"

    assert main(["check-csv", "--geometries", GEOMETRIES, "--csv", str(src), "--out", str(out)]) == 0
    printed = capsys.readouterr().out
    assert "total_rows=3, parsed=2, skipped=1" in printed

    with out.open("r", encoding="utf-8", newline="") as f:
        rows = list(csv.DictReader(f))
    assert [(r["id"], r["inside"], r["matched_geometries"]) for r in rows] == [("a", "1", "1"), ("b", "0", "")]


def test_verbose_flag_is_counted():
    args = build_parser().parse_args(["-vv", "normalize", "--geometries", GEOMETRIES])
    assert args.verbose == 2


def test_subcommand_required():
    with pytest.raises(SystemExit):
        main([])
