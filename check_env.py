#!/usr/bin/env python3
"""Helper script to check and create the .env file for the shuttle route service."""

import os
import sys
from pathlib import Path

ENV_KEYS = (
    "SHUTTLE_OSRM_BASE_URL",
    "SHUTTLE_OSRM_PROFILE",
    "SHUTTLE_OSRM_TIMEOUT_SECONDS",
    "SHUTTLE_FALLBACK_DISTANCE_METERS",
    "SHUTTLE_FALLBACK_DURATION_SECONDS",
    "SHUTTLE_STATIONS_FILE",
)

TEMPLATE = """# OSRM routing
SHUTTLE_OSRM_BASE_URL=https://router.project-osrm.org
SHUTTLE_OSRM_PROFILE=driving
SHUTTLE_OSRM_TIMEOUT_SECONDS=10

# Nominal metrics reported when the live route is unavailable (estimates)
SHUTTLE_FALLBACK_DISTANCE_METERS=3500
SHUTTLE_FALLBACK_DURATION_SECONDS=720

# Optional JSON station registry; the built-in registry is used when unset
# SHUTTLE_STATIONS_FILE=./data/stations.json
"""


def main():
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    print("=" * 60)
    print("Shuttle Route Service Environment Checker")
    print("=" * 60)
    print()

    if not env_file.exists():
        env_file.write_text(TEMPLATE, encoding="utf-8")
        print(f"Created template .env file at: {env_file}")
        print("Edit it and run this script again.")
        return 0

    print(f"Found .env file at: {env_file}")
    print()
    for key in ENV_KEYS:
        value = os.getenv(key)
        print(f"  {key} (environment): {value if value else '-'}")
    print()

    sys.path.insert(0, str(project_root / "src"))
    from shuttle.config import settings
    from shuttle.data.station_registry import load_registry

    print("Resolved configuration:")
    print(f"  osrm_base_url = {settings.osrm_base_url}")
    print(f"  osrm_timeout_seconds = {settings.osrm_timeout_seconds}")
    print(f"  fallback = {settings.fallback_distance_meters} m / {settings.fallback_duration_seconds} s")
    try:
        registry = load_registry()
    except (OSError, ValueError) as exc:
        print(f"  [ERROR] Station registry could not be loaded: {exc}")
        return 1
    origin, destination = registry.terminals()
    print(f"  route {registry.default_route_id}: {origin.name} -> {destination.name}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
