#!/usr/bin/env python3
"""Seed demo parcels into a running registry backend.

Usage:
    # Start the backend first:
    uvicorn landregistry.web.app:create_app --factory --port 8080

    # Seed demo data:
    python3 scripts/seed_demo_parcels.py

    # Seed against a different host or fixture file:
    python3 scripts/seed_demo_parcels.py --base-url http://localhost:9000 \
        --fixtures config/demo_parcels.yml

All data flows through the public API, so it passes the same validation,
fee collection and audit logging as any other registration.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

DEFAULT_BASE_URL = "http://localhost:8080"
DEFAULT_FIXTURES = Path(__file__).resolve().parents[1] / "config" / "demo_parcels.yml"


def api(
    client: httpx.Client,
    method: str,
    path: str,
    *,
    principal: str,
    json: dict | None = None,
) -> dict | None:
    """Make an API call as ``principal`` and return parsed JSON, or None on failure."""
    resp = client.request(method, path, json=json, headers={"X-Principal": principal})
    if resp.status_code >= 400:
        print(f"  FAILED {method} {path} -> {resp.status_code}: {resp.text[:200]}")
        return None
    return resp.json()


def section(title: str) -> None:
    print(f"\n{'='*60}")
    print(f"  {title}")
    print(f"{'='*60}")


def load_fixtures(path: Path) -> dict[str, Any]:
    with open(path) as fh:
        return yaml.safe_load(fh) or {}


def seed_authority(client: httpx.Client, fixtures: dict[str, Any]) -> None:
    section("Authority & fee")
    admin = fixtures["registrant"]
    authority = fixtures["authority"]

    current = client.get("/api/health").json()["details"]
    if current["authority_configured"]:
        print("  Authority already configured, skipping")
    elif api(client, "POST", "/api/registry/authority", principal=admin,
             json={"identity": authority}):
        print(f"  Authority set to {authority}")

    fee = fixtures.get("registration_fee")
    if fee is not None and api(client, "PUT", "/api/registry/fee", principal=admin,
                               json={"fee": fee}):
        print(f"  Registration fee set to {fee}")


def seed_parcels(client: httpx.Client, fixtures: dict[str, Any]) -> list[int]:
    section("Parcels")
    registrant = fixtures["registrant"]
    parcel_ids: list[int] = []

    for parcel in fixtures.get("parcels", []):
        exists = client.get(f"/api/registry/parcels/exists/{parcel['geo_hash']}").json()
        if exists["exists"]:
            print(f"  {parcel['location']}: already registered")
            continue
        result = api(client, "POST", "/api/registry/parcels", principal=registrant, json=parcel)
        if result:
            parcel_ids.append(result["parcel_id"])
            print(f"  {parcel['location']}: parcel #{result['parcel_id']}")

    return parcel_ids


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed demo parcels into the registry")
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL)
    parser.add_argument("--fixtures", type=Path, default=DEFAULT_FIXTURES)
    args = parser.parse_args()

    fixtures = load_fixtures(args.fixtures)

    with httpx.Client(base_url=args.base_url, timeout=10.0) as client:
        try:
            client.get("/api/health").raise_for_status()
        except httpx.HTTPError as exc:
            print(f"Backend not reachable at {args.base_url}: {exc}")
            sys.exit(1)

        seed_authority(client, fixtures)
        parcel_ids = seed_parcels(client, fixtures)

        section("Done")
        count = client.get("/api/registry/parcels/count").json()["count"]
        print(f"  Registered {len(parcel_ids)} new parcels ({count} total)")


if __name__ == "__main__":
    main()
