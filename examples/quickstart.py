#!/usr/bin/env python3
"""
User Directory Quickstart — full lifecycle in one script.

Creates a user → logs in → lists/filters users → updates the user.
Run with: python examples/quickstart.py

Requires: pip install httpx
Backend must be running: http://localhost:8000
    USERDIR_JWT_SECRET=... USERDIR_JWT_ISSUER=userdir USERDIR_JWT_EXPIRATION_MS=3600000 \
        uvicorn userdir.main:app --port 8000
"""

import sys
import uuid

import httpx

BASE = "http://localhost:8000"


def expect_ok(resp: httpx.Response) -> dict:
    """Every response is HTTP 200; the real outcome is in the envelope."""
    data = resp.json()
    status = data.get("status")
    if status and status["code"] != 200:
        print(f"   FAILED {status['code']}: {status['message']} (trace {status['traceId']})")
        sys.exit(1)
    return data


def main():
    run_id = uuid.uuid4().hex[:6]
    email = f"demo.{run_id}@example.com"
    client = httpx.Client(base_url=BASE, timeout=10)

    # ── Create user (public) ──────────────────────────────────────
    print("1. Creating user...")
    try:
        resp = client.post("/user/v1/user", json={
            "firstName": "Demo",
            "lastName": "User",
            "email": email,
            "phoneNumber": "+393331112233",
        })
    except httpx.ConnectError:
        print(f"Backend not reachable at {BASE}")
        sys.exit(1)
    expect_ok(resp)
    print(f"   Created {email}")

    # ── Anonymous requests are rejected ───────────────────────────
    print("\n2. Listing users and checking health without a token...")
    for path in ("/user/v1/user", "/health"):
        status = client.get(path).json()["status"]
        print(f"   {path}: HTTP 200, envelope code {status['code']} ({status['message']})")

    # ── Login ─────────────────────────────────────────────────────
    print("\n3. Logging in...")
    token = expect_ok(client.post("/auth/login", json={"email": email}))["status"]["message"]
    client.headers["Authorization"] = f"Bearer {token}"
    print(f"   Token: {token[:24]}...")
    health = client.get("/health").json()
    print(f"   Server version {health['version']}, {health['users']} user(s)")

    # ── Query ─────────────────────────────────────────────────────
    print("\n4. Querying by email...")
    data = expect_ok(client.get("/user/v1/user", params={"query": email}))
    user = data["users"][0]
    print(f"   Found {data['total']}: {user['firstName']} {user['lastName']} ({user['id'][:8]}...)")

    # ── Update ────────────────────────────────────────────────────
    print("\n5. Updating user...")
    expect_ok(client.put(f"/user/v1/user/{user['id']}", json={
        "firstName": "Renamed",
        "lastName": "User",
        "email": email,
        "phoneNumber": "+393331112233",
    }))

    data = expect_ok(client.get("/user/v1/user", params={"query": email}))
    print(f"   Now: {data['users'][0]['firstName']} {data['users'][0]['lastName']}")

    print("\nDone.")


if __name__ == "__main__":
    main()
