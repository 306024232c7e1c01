"""Tests for batch CSV loading and result export."""

import csv
import logging

import pytest

from cb_geofence.csv_io import classify_points, load_track_points, results_csv_text, write_results_csv
from cb_geofence.models import LatLng, TrackPoint
from cb_geofence.shapes import Circle, Polygon

FENCES = [
    Polygon((LatLng(0, 0), LatLng(0, 1), LatLng(1, 1), LatLng(1, 0))),
    Circle(LatLng(0.5, 0.5), 1000.0),
]


def _write(path, text):
    path.write_text(text, encoding="utf-8")
    return path


def test_load_points_with_ids(tmp_path):
    p = _write(tmp_path / "points.csv", "id,latitude,longitude\na,0.5,0.5\nb,2,2\n")
    points, summary = load_track_points(p)
    assert points == [TrackPoint("a", 0.5, 0.5), TrackPoint("b", 2.0, 2.0)]
    assert summary.rows_total == 2
    assert summary.rows_skipped == 0
    assert list(summary.fieldnames) == ["id", "latitude", "longitude"]


def test_load_points_row_number_as_id(tmp_path):
    p = _write(tmp_path / "points.csv", "latitude,longitude\n1,2\n3,4\n")
    points, _ = load_track_points(p)
    assert [pt.point_id for pt in points] == ["1", "2"]


def test_bad_rows_are_skipped(tmp_path, caplog):
    p = _write(tmp_path / "points.csv", "id,latitude,longitude\na,0.5,0.5\nb,oops,1\nc\nd, 0.25 , 0.75 \n")
    with caplog.at_level(logging.WARNING, logger="cb_geofence.csv_io"):
        points, summary = load_track_points(p)
    assert [pt.point_id for pt in points] == ["a", "d"]
    assert points[1].latlng == LatLng(0.25, 0.75)
    assert summary.rows_total == 4
    assert summary.rows_skipped == 2
    assert caplog.records


def test_missing_column_raises(tmp_path):
    p = _write(tmp_path / "points.csv", "id,lat,lon\na,1,2\n")
    with pytest.raises(KeyError):
        load_track_points(p)


def test_empty_file(tmp_path):
    p = _write(tmp_path / "points.csv", "")
    points, summary = load_track_points(p)
    assert points == []
    assert summary.rows_total == 0


def test_classify_points():
    points = [
        TrackPoint("in-both", 0.5, 0.5),
        TrackPoint("edge", 0.0, 0.25),
        TrackPoint("out", 5.0, 5.0),
    ]
    results = classify_points(points, FENCES)
    assert [r.inside for r in results] == [True, True, False]
    assert results[0].matched == (0, 1)
    assert results[1].matched == (0,)
    assert results[2].matched == ()


def test_write_results_csv(tmp_path):
    results = classify_points([TrackPoint("x", 0.5, 0.5), TrackPoint("y", 5.0, 5.0)], FENCES)
    out = tmp_path / "results.csv"
    write_results_csv(results, out)

    with out.open("r", encoding="utf-8", newline="") as f:
        rows = list(csv.DictReader(f))
    assert rows == [
        {"id": "x", "latitude": "0.5", "longitude": "0.5", "inside": "1", "matched_geometries": "0|1"},
        {"id": "y", "latitude": "5.0", "longitude": "5.0", "inside": "0", "matched_geometries": ""},
    ]
    assert out.read_bytes().decode("utf-8") == results_csv_text(results)
