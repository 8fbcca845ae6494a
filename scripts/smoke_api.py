#!/usr/bin/env python3
"""Smoke test against a running server seeded with demo data."""

from __future__ import annotations

import argparse
import sys
from datetime import date, timedelta
from typing import Any

import httpx


def next_weekday(start: date) -> date:
    day = start + timedelta(days=1)
    while day.weekday() >= 5:
        day += timedelta(days=1)
    return day


def check(response: httpx.Response, expected: int) -> Any:
    if response.status_code != expected:
        print(f"❌ {response.request.method} {response.request.url} -> {response.status_code}")
        print(f"Response: {response.text}")
        sys.exit(1)
    print(f"✅ {response.request.method} {response.request.url.path} -> {response.status_code}")
    return response.json() if response.content else None


def main() -> None:
    parser = argparse.ArgumentParser(description="Exercise the appointments API end to end.")
    parser.add_argument("--base-url", default="http://127.0.0.1:8000")
    parser.add_argument("--store", default="store-barber")
    parser.add_argument("--service", default="service-haircut")
    parser.add_argument("--client", default="client-maria")
    parser.add_argument("--operator", default="provider-barber")
    args = parser.parse_args()

    client_headers = {"X-User-Id": args.client}
    operator_headers = {"X-User-Id": args.operator}
    day = next_weekday(date.today()).isoformat()

    with httpx.Client(base_url=args.base_url, timeout=10.0) as http:
        try:
            http.get("/health")
        except httpx.ConnectError:
            print("❌ Server is not running!")
            print("   Start it with: uvicorn storebooking.main:app --reload")
            sys.exit(1)

        slots = check(
            http.get(f"/api/v1/appointments/available-slots/{args.store}/{args.service}", params={"date": day}),
            200,
        )
        print(f"   {len(slots)} slots on {day}")
        if not slots:
            print("❌ No slots available, nothing to book")
            sys.exit(1)

        first = slots[0]
        created = check(
            http.post(
                "/api/v1/appointments",
                json={
                    "store_id": args.store,
                    "service_id": args.service,
                    "start_time": f"{first['date']}T{first['start_time']}:00",
                    "notes": "smoke test",
                },
                headers=client_headers,
            ),
            201,
        )
        appointment_id = created["id"]

        check(
            http.post(
                "/api/v1/appointments",
                json={
                    "store_id": args.store,
                    "service_id": args.service,
                    "start_time": f"{first['date']}T{first['start_time']}:00",
                },
                headers=client_headers,
            ),
            409,
        )

        confirmed = check(
            http.put(f"/api/v1/appointments/{appointment_id}", json={"status": "confirmed"}, headers=operator_headers),
            200,
        )
        print(f"   status={confirmed['status']}")

        check(http.post(f"/api/v1/appointments/{appointment_id}/cancel", headers=client_headers), 400)
        check(
            http.put(f"/api/v1/appointments/{appointment_id}", json={"status": "cancelled"}, headers=operator_headers),
            200,
        )
        check(http.delete(f"/api/v1/appointments/{appointment_id}", headers=client_headers), 204)

    print("\n✅ Smoke test complete\n")


if __name__ == "__main__":
    main()
