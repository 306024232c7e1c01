from __future__ import annotations

from pathlib import Path

import streamlit as st

from cb_geofence.codec import encode_geometries, encode_geometry, parse_geometries
from cb_geofence.csv_io import PointResult, classify_points, load_track_points, results_csv_text
from cb_geofence.models import CIRCLE_SYMBOL, DEFAULT_POINTS_CSV, POLYGON_SYMBOL, InvalidGeometry, LatLng
from cb_geofence.shapes import Circle, Geometry, contains_any

_SAMPLE_GEOMETRIES = "circle|30.7456421,103.9284974|80;polygon|30.744,103.927|30.744,103.930|30.747,103.930|30.747,103.927"


@st.cache_data(show_spinner=False)
def _load_points(points_csv: str, mtime: float):
    _ = mtime  # part of cache key so updated files reload automatically
    return load_track_points(points_csv)


def _geometry_rows(geometries: list[Geometry], point: LatLng) -> list[dict[str, object]]:
    rows: list[dict[str, object]] = []
    for i, g in enumerate(geometries):
        rows.append(
            {
                "index": i,
                "kind": CIRCLE_SYMBOL if isinstance(g, Circle) else POLYGON_SYMBOL,
                "contains": g.contains(point),
                "encoded": encode_geometry(g),
            }
        )
    return rows


def _result_rows(results: list[PointResult]) -> list[dict[str, object]]:
    return [
        {
            "id": r.point.point_id,
            "latitude": r.point.latitude,
            "longitude": r.point.longitude,
            "inside": r.inside,
            "matched_geometries": "|".join(str(i) for i in r.matched),
        }
        for r in results
    ]


def main() -> None:
    st.set_page_config(page_title="广播围栏检查", layout="wide")
    st.title("小区广播地理围栏：坐标是否在围栏内")

    with st.sidebar:
        st.subheader("围栏编码")
        text = st.text_area("geometries（circle|lat,lng|radius;polygon|lat,lng|...）", value=_SAMPLE_GEOMETRIES)
        strict = st.checkbox("严格模式（有错误的段直接报错）", value=False)

        st.subheader("单点检查")
        lat = st.number_input("纬度 lat", value=30.7456421, format="%.7f")
        lng = st.number_input("经度 lng", value=103.9284974, format="%.7f")

        st.subheader("批量检查（可选）")
        points_csv = st.text_input("坐标CSV路径（需含 latitude/longitude 列）", value=DEFAULT_POINTS_CSV)

    try:
        geometries = parse_geometries(text, strict=strict)
    except InvalidGeometry as exc:
        st.error(f"围栏编码错误：{exc}")
        return

    if not geometries:
        st.warning("没有解析到任何围栏。")
        return

    st.subheader("规范化编码")
    st.code(encode_geometries(geometries))

    point = LatLng(float(lat), float(lng))
    c1, c2 = st.columns(2)
    c1.metric("围栏数量", str(len(geometries)))
    c2.metric("坐标在围栏内", "是" if contains_any(geometries, point) else "否")
    st.dataframe(_geometry_rows(geometries, point), use_container_width=True)

    p = Path(points_csv)
    if not p.exists():
        st.caption(f"找不到文件：{points_csv!r}，跳过批量检查。")
        return

    try:
        points, summary = _load_points(points_csv, p.stat().st_mtime)
    except (KeyError, OSError) as exc:
        st.exception(exc)
        return

    results = classify_points(points, geometries)
    rows = _result_rows(results)
    inside_n = sum(1 for r in results if r.inside)

    st.subheader("批量结果")
    c1, c2, c3 = st.columns(3)
    c1.metric("解析行数", f"{summary.rows_parsed}/{summary.rows_total}")
    c2.metric("围栏内", str(inside_n))
    c3.metric("围栏外", str(len(results) - inside_n))
    st.dataframe(rows, use_container_width=True, height=520)

    st.download_button("下载结果CSV", data=results_csv_text(results), file_name="results.csv", mime="text/csv")


if __name__ == "__main__":
    main()
