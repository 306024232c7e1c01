"""Command-line interface for cb_geofence.

Run:
    python -m cb_geofence check --geometries "circle|12.34,56.78|500" --point 12.34,56.78
"""

from __future__ import annotations

import argparse
import logging
import sys

from cb_geofence.codec import encode_geometries, encode_geometry, parse_geometries, parse_latlng
from cb_geofence.csv_io import classify_points, load_track_points, write_results_csv
from cb_geofence.models import (
    CIRCLE_SYMBOL,
    DEFAULT_POINTS_CSV,
    DEFAULT_RESULTS_CSV,
    POLYGON_SYMBOL,
    InvalidGeometry,
)
from cb_geofence.shapes import Circle, Geometry, contains_any


def _kind(geometry: Geometry) -> str:
    return CIRCLE_SYMBOL if isinstance(geometry, Circle) else POLYGON_SYMBOL


def _cmd_check(args: argparse.Namespace) -> int:
    geometries = parse_geometries(args.geometries, strict=args.strict)
    point = parse_latlng(args.point)
    inside = contains_any(geometries, point)

    if args.json:
        import json

        payload = {
            "point": {"lat": point.lat, "lng": point.lng},
            "inside": inside,
            "geometries": [
                {"index": i, "kind": _kind(g), "encoded": encode_geometry(g), "contains": g.contains(point)}
                for i, g in enumerate(geometries)
            ],
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0

    print(f"### 围栏数量：{len(geometries)}")
    for i, g in enumerate(geometries):
        print(f"{i}\t{_kind(g)}\tcontains={g.contains(point)}")
    print()
    print(f"point={point.lat},{point.lng} inside={inside}")
    return 0


def _cmd_check_csv(args: argparse.Namespace) -> int:
    geometries = parse_geometries(args.geometries, strict=args.strict)
    points, summary = load_track_points(args.csv)
    results = classify_points(points, geometries)
    write_results_csv(results, args.out)

    inside_n = sum(1 for r in results if r.inside)
    print(f"total_rows={summary.rows_total}, parsed={summary.rows_parsed}, skipped={summary.rows_skipped}")
    print(f"围栏={len(geometries)}，围栏内={inside_n}，围栏外={len(results) - inside_n}")
    print(f"已导出：{args.out}")
    return 0


def _cmd_normalize(args: argparse.Namespace) -> int:
    geometries = parse_geometries(args.geometries, strict=args.strict)
    print(encode_geometries(geometries))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""

    p = argparse.ArgumentParser(prog="cb_geofence")
    p.add_argument("-v", "--verbose", action="count", default=0, help="输出日志（-vv 输出调试日志）")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_chk = sub.add_parser("check", help="判断单个坐标是否在广播围栏内")
    p_chk.add_argument("--geometries", type=str, required=True, help="围栏编码，例如 circle|12.34,56.78|500")
    p_chk.add_argument("--point", type=str, required=True, help="待判断坐标 lat,lng（负纬度请写成 --point=-33.86,151.2）")
    p_chk.add_argument("--strict", action="store_true", help="围栏编码有错误时直接报错（默认跳过该段）")
    p_chk.add_argument("--json", action="store_true", help="以JSON输出（便于后处理）")
    p_chk.set_defaults(func=_cmd_check)

    p_csv = sub.add_parser("check-csv", help="批量判断CSV中的坐标并导出结果CSV")
    p_csv.add_argument("--geometries", type=str, required=True, help="围栏编码")
    p_csv.add_argument("--csv", type=str, default=DEFAULT_POINTS_CSV, help="输入CSV路径（需含 latitude/longitude 列）")
    p_csv.add_argument("--out", type=str, default=DEFAULT_RESULTS_CSV, help="输出CSV路径")
    p_csv.add_argument("--strict", action="store_true", help="围栏编码有错误时直接报错（默认跳过该段）")
    p_csv.set_defaults(func=_cmd_check_csv)

    p_norm = sub.add_parser("normalize", help="解析围栏编码并输出规范化后的编码")
    p_norm.add_argument("--geometries", type=str, required=True, help="围栏编码")
    p_norm.add_argument("--strict", action="store_true", help="围栏编码有错误时直接报错（默认跳过该段）")
    p_norm.set_defaults(func=_cmd_normalize)

    return p


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""

    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG if args.verbose > 1 else logging.INFO,
            format="%(levelname)s %(name)s: %(message)s",
        )
    try:
        return int(args.func(args))
    except InvalidGeometry as exc:
        print(f"围栏编码错误：{exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
