#!/usr/bin/env python3
"""Smoke test against a running booking API (seeded with data/seed.example.json)."""

import sys
from datetime import date, timedelta

import httpx


BASE_URL = "http://127.0.0.1:8001"
STYLIST_ID = "stylist-1"
CLIENT_HEADERS = {"X-User-Id": "client-1", "X-User-Role": "client"}
STYLIST_HEADERS = {"X-User-Id": STYLIST_ID, "X-User-Role": "stylist"}
ADMIN_HEADERS = {"X-User-Id": "admin-1", "X-User-Role": "admin"}


def next_weekday(weekday: int) -> date:
    today = date.today()
    days_ahead = (weekday - today.weekday()) % 7 or 7
    return today + timedelta(days=days_ahead)


def check_slots(on_date: date) -> list[str]:
    print("=" * 60)
    print(f"GET /available-slots for {STYLIST_ID} on {on_date}")
    print("=" * 60)
    response = httpx.get(
        f"{BASE_URL}/available-slots",
        params={"providerKind": "stylist", "providerId": STYLIST_ID, "date": on_date.isoformat(), "duration": 60},
        timeout=10.0,
    )
    response.raise_for_status()
    data = response.json()
    print(f"available={data['available']} workingDays={data['workingDays']}")
    print(f"slots={data['slots']}")
    return data["slots"]


def book_and_confirm(on_date: date, start: str) -> None:
    print("\n" + "=" * 60)
    print(f"POST /appointments at {start}")
    print("=" * 60)
    response = httpx.post(
        f"{BASE_URL}/appointments",
        json={
            "providerKind": "STYLIST",
            "providerId": STYLIST_ID,
            "serviceId": "cut",
            "date": on_date.isoformat(),
            "startTime": start,
        },
        headers=CLIENT_HEADERS,
        timeout=10.0,
    )
    response.raise_for_status()
    booking = response.json()
    print(f"booking {booking['id']} {booking['startTime']}-{booking['endTime']} {booking['status']}")
    print(f"countdown={booking.get('countdown')}")

    response = httpx.put(
        f"{BASE_URL}/providers/me/appointments/{booking['id']}/status",
        json={"status": "confirmed"},
        headers=STYLIST_HEADERS,
        timeout=10.0,
    )
    response.raise_for_status()
    print(f"after provider update: {response.json()['status']}")


def sweep() -> None:
    print("\n" + "=" * 60)
    print("POST /appointments/reject-past")
    print("=" * 60)
    response = httpx.post(f"{BASE_URL}/appointments/reject-past", headers=ADMIN_HEADERS, timeout=30.0)
    response.raise_for_status()
    print(response.json())


def main():
    try:
        httpx.get(f"{BASE_URL}/health", timeout=5.0)
        print("✅ Server is running\n")
    except Exception:
        print("❌ Server is not running!")
        print("   Please start it with: SEED_PATH=data/seed.example.json uvicorn salonbook.main:app --port 8001")
        sys.exit(1)

    on_date = next_weekday(0)
    try:
        slots = check_slots(on_date)
        if slots:
            book_and_confirm(on_date, slots[0])
            check_slots(on_date)
        sweep()
    except httpx.HTTPStatusError as e:
        print(f"❌ HTTP Error: {e.response.status_code}")
        print(f"Response: {e.response.text}")
        sys.exit(1)

    print("\n✅ Smoke test complete!")


if __name__ == "__main__":
    main()
