"""Module entry point: python -m cb_geofence ..."""

from __future__ import annotations

from cb_geofence.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
