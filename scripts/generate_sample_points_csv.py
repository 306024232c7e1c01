from __future__ import annotations

import argparse
import csv
import random
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class Cluster:
    name: str
    lat: float
    lon: float
    spread_deg: float


def generate_points(*, rows: int, seed: int, clusters: list[Cluster]) -> list[dict[str, str]]:
    """Generate fake device locations scattered around a few clusters."""

    rng = random.Random(seed)
    out: list[dict[str, str]] = []
    for i in range(rows):
        cluster = rng.choice(clusters)
        lat = cluster.lat + rng.uniform(-cluster.spread_deg, cluster.spread_deg)
        lon = cluster.lon + rng.uniform(-cluster.spread_deg, cluster.spread_deg)
        # keep longitudes in [-180, 180] for clusters near the antimeridian
        if lon > 180.0:
            lon -= 360.0
        elif lon < -180.0:
            lon += 360.0
        out.append(
            {
                "id": f"{cluster.name}-{i + 1}",
                "latitude": f"{lat:.7f}",
                "longitude": f"{lon:.7f}",
            }
        )
    return out


def main() -> int:
    p = argparse.ArgumentParser(description="Generate a fake points.csv for demo/testing.")
    p.add_argument("--out", type=str, default="sample_data/points.csv", help="Output CSV path")
    p.add_argument("--rows", type=int, default=500, help="Number of rows")
    p.add_argument("--seed", type=int, default=42, help="Random seed (reproducible)")
    args = p.parse_args()

    clusters = [
        Cluster("chengdu_lab", 30.7456421, 103.9284974, 0.002),
        Cluster("shanghai", 31.2304000, 121.4737000, 0.01),
        Cluster("fiji_dateline", -16.5, 179.95, 0.1),
    ]

    rows = generate_points(rows=args.rows, seed=args.seed, clusters=clusters)
    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    with out_path.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=["id", "latitude", "longitude"])
        w.writeheader()
        w.writerows(rows)

    print(f"Generated: {out_path} (rows={len(rows)}, seed={args.seed})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
