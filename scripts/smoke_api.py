#!/usr/bin/env python3
"""Smoke test for the availability endpoint against a running server."""

import sys

import httpx


BASE_URL = "http://127.0.0.1:8001"


def check(payload: dict) -> bool:
    """POST one availability check and print the verdict."""
    print("=" * 60)
    print(f"POST /api/v1/availability/check {payload['date']} {payload['start_time']} {payload['duration_hours']}h")
    print("=" * 60)

    try:
        response = httpx.post(
            f"{BASE_URL}/api/v1/availability/check",
            json=payload,
            timeout=30.0
        )
        response.raise_for_status()

        data = response.json()
        print(f"has_conflict: {data['has_conflict']}  conflict_type: {data['conflict_type']}")
        if data.get("message"):
            print(f"message: {data['message']}")
        for slot in data["available_slots"]:
            print(f"  {slot['start']} - {slot['end']}")
        return True
    except httpx.HTTPStatusError as e:
        print(f"HTTP Error: {e.response.status_code}")
        print(f"Response: {e.response.text}")
        return False
    except Exception as e:
        print(f"Error: {e}")
        return False


def main():
    try:
        httpx.get(f"{BASE_URL}/health", timeout=5.0)
    except Exception:
        print("Server is not running!")
        print("   Please start it with: uvicorn spacebook.main:app --reload --port 8001")
        sys.exit(1)

    ok = check({"space_id": "1", "date": "2024-12-25", "start_time": "10:00", "duration_hours": 2})
    # Malformed start time must be rejected with 400
    rejected = not check({"space_id": "1", "date": "2024-12-25", "start_time": "25:00", "duration_hours": 2})
    ok = ok and rejected

    print("\n" + "=" * 60)
    print("Smoke test complete" if ok else "Smoke test FAILED")
    print("=" * 60 + "\n")
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
