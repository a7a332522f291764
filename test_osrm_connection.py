#!/usr/bin/env python3
"""Manual script to verify OSRM connectivity for the shuttle route."""

import asyncio
import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "src"))

from shuttle.config import settings
from shuttle.data.station_registry import load_registry
from shuttle.services.routing.errors import RouteResolutionError
from shuttle.services.routing.metrics import to_kilometers, to_minutes
from shuttle.services.routing.osrm_client import OSRMClient, check_health
from shuttle.services.routing.resolver import RouteResolver


async def run() -> int:
    print("=" * 60)
    print("OSRM Connection Test")
    print("=" * 60)
    print()

    print("1. Checking OSRM configuration...")
    print(f"   [OK] OSRM Base URL: {settings.osrm_base_url}")
    print(f"   [OK] OSRM Profile: {settings.osrm_profile}")
    print(f"   [OK] Timeout: {settings.osrm_timeout_seconds:.1f}s")
    print()

    registry = load_registry()
    origin, destination = registry.terminals()
    waypoints = registry.waypoints()
    client = OSRMClient()
    try:
        print("2. Testing OSRM health check...")
        healthy = await check_health(
            client,
            [(origin.latitude, origin.longitude), (destination.latitude, destination.longitude)],
        )
        if not healthy:
            print("   [ERROR] OSRM service is not responding")
            return 1
        print("   [OK] OSRM service is healthy and accessible!")
        print()

        print(f"3. Resolving route '{registry.default_route_id}' ({origin.name} -> {destination.name})...")
        try:
            geometry = await RouteResolver(client).resolve(origin, waypoints, destination)
        except RouteResolutionError as e:
            print(f"   [ERROR] {type(e).__name__}: {e}")
            return 1
        print(f"   [OK] {len(geometry.points)} geometry points")
        print(f"   [OK] Distance: {to_kilometers(geometry.distance_meters)} km")
        print(f"   [OK] Duration: {to_minutes(geometry.duration_seconds)} min")
    finally:
        await client.aclose()
    print()

    print("=" * 60)
    print("[SUCCESS] OSRM is connected and working!")
    print("=" * 60)
    return 0


def main():
    return asyncio.run(run())


if __name__ == "__main__":
    sys.exit(main())
