"""CSV input/output for checking many device locations at once."""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence, TextIO

from cb_geofence.models import TrackPoint
from cb_geofence.shapes import Geometry

logger = logging.getLogger(__name__)

RESULT_FIELDS = ["id", "latitude", "longitude", "inside", "matched_geometries"]


@dataclass(frozen=True, slots=True)
class CsvSummary:
    """Quick summary of CSV parsing."""

    rows_total: int
    rows_parsed: int
    rows_skipped: int
    fieldnames: Sequence[str]


@dataclass(frozen=True, slots=True)
class PointResult:
    """Containment result of one point.

    Attributes:
        point: The checked point.
        inside: True if any geometry contains the point.
        matched: Indices of the geometries containing the point.
    """

    point: TrackPoint
    inside: bool
    matched: tuple[int, ...]


def _parse_float(value: str) -> float:
    return float(value.strip())


def load_track_points(csv_path: str | Path) -> tuple[list[TrackPoint], CsvSummary]:
    """Load all points into memory.

    The CSV needs ``latitude`` and ``longitude`` columns. An ``id`` column is
    optional; the 1-based row number is used when it is missing or empty.

    Args:
        csv_path: Path to the CSV.

    Returns:
        (points, summary)

    Raises:
        KeyError: If a required column is missing.
    """

    p = Path(csv_path)
    rows_total = 0
    parsed: list[TrackPoint] = []
    fieldnames: Sequence[str] = ()

    with p.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        fieldnames = reader.fieldnames or ()
        missing = [c for c in ("latitude", "longitude") if c not in fieldnames]
        if missing and fieldnames:
            raise KeyError(f"CSV缺少必要字段：{missing}. 实际字段：{list(fieldnames)}")

        for row in reader:
            rows_total += 1
            try:
                parsed.append(
                    TrackPoint(
                        point_id=(row.get("id") or "").strip() or str(rows_total),
                        latitude=_parse_float(row["latitude"]),
                        longitude=_parse_float(row["longitude"]),
                    )
                )
            except (ValueError, TypeError, AttributeError):
                # 损坏行/空行直接跳过
                continue

    summary = CsvSummary(
        rows_total=rows_total,
        rows_parsed=len(parsed),
        rows_skipped=rows_total - len(parsed),
        fieldnames=fieldnames,
    )
    if summary.rows_skipped > 0:
        logger.warning("CSV中有 %s 行解析失败已跳过", summary.rows_skipped)
    return parsed, summary


def classify_points(points: Sequence[TrackPoint], geometries: Sequence[Geometry]) -> list[PointResult]:
    """Check every point against every geometry."""

    results: list[PointResult] = []
    for pt in points:
        latlng = pt.latlng
        matched = tuple(i for i, g in enumerate(geometries) if g.contains(latlng))
        results.append(PointResult(point=pt, inside=bool(matched), matched=matched))
    return results


def write_results_csv(results: Sequence[PointResult], out_path: str | Path) -> None:
    """Write containment results to CSV.

    Output columns:
        - id, latitude, longitude
        - inside: 1 if any geometry contains the point, else 0
        - matched_geometries: indices of the containing geometries joined by ``|``
    """

    p = Path(out_path)
    with p.open("w", encoding="utf-8", newline="") as f:
        _write_results(f, results)


def results_csv_text(results: Sequence[PointResult]) -> str:
    """Render containment results as CSV text (same columns as write_results_csv)."""

    buf = io.StringIO(newline="")
    _write_results(buf, results)
    return buf.getvalue()


def _write_results(f: TextIO, results: Sequence[PointResult]) -> None:
    w = csv.DictWriter(f, fieldnames=RESULT_FIELDS)
    w.writeheader()
    for r in results:
        w.writerow(
            {
                "id": r.point.point_id,
                "latitude": r.point.latitude,
                "longitude": r.point.longitude,
                "inside": int(r.inside),
                "matched_geometries": "|".join(str(i) for i in r.matched),
            }
        )
