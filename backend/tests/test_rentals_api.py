"""Rental API integration tests."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


def _payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "resource_type": "umbrella",
        "unit_number": 1,
        "start_date": "2025-12-10",
        "end_date": "2025-12-15",
        "client_name": "Lucia Fernandez",
        "client_phone": "2262123456",
        "client_national_id": "30111222",
        "price_per_day": "1000",
    }
    payload.update(overrides)
    return payload


async def test_rental_lifecycle(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]

    created = await client.post("/api/v1/rentals", json=_payload(amount_paid="1000"))
    assert created.status_code == 201
    rental = created.json()
    assert rental["days"] == 6
    assert Decimal(rental["total_price"]) == Decimal("6000")
    assert rental["status"] == "active"

    conflict = await client.post(
        "/api/v1/rentals",
        json=_payload(start_date="2025-12-15", end_date="2025-12-20"),
    )
    assert conflict.status_code == 409
    detail = conflict.json()["detail"]
    assert detail["conflict_date"] == "2025-12-15"
    assert detail["conflicting_rental_id"] == rental["id"]

    summary = await client.get(f"/api/v1/rentals/{rental['id']}/payments")
    assert summary.status_code == 200
    assert summary.json()["payment_count"] == 1
    assert Decimal(summary.json()["pending_amount"]) == Decimal("5000")

    moved = await client.post(
        f"/api/v1/rentals/{rental['id']}/move", json={"unit_number": 9}
    )
    assert moved.status_code == 200
    assert moved.json()["unit_number"] == 9

    status_resp = await client.get(
        "/api/v1/rentals/units/umbrella/9/status",
        params={"reference_date": "2025-12-12"},
    )
    assert status_resp.status_code == 200
    assert status_resp.json()["status"] == "occupied"
    assert status_resp.json()["payment_status"] == "partial"

    cancelled = await client.post(f"/api/v1/rentals/{rental['id']}/cancel")
    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == "cancelled"

    active = await client.get("/api/v1/rentals", params={"include_cancelled": False})
    assert active.json() == []


async def test_validation_errors_are_reported_together(
    app_context: dict[str, Any],
) -> None:
    client: AsyncClient = app_context["client"]

    response = await client.post(
        "/api/v1/rentals",
        json=_payload(unit_number=0, client_phone="12", price_per_day=None),
    )
    assert response.status_code == 422
    errors = response.json()["detail"]["errors"]
    assert "Unit number is invalid" in errors
    assert "Phone must have 10 digits" in errors
    assert "Price per day must be greater than 0" in errors


async def test_payments_endpoint_rejects_overpayment(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]

    rental = (
        await client.post(
            "/api/v1/rentals",
            json=_payload(start_date="2025-12-01", end_date="2025-12-05"),
        )
    ).json()

    first = await client.post(
        "/api/v1/payments", json={"rental_id": rental["id"], "amount": "3000"}
    )
    assert first.status_code == 201

    too_much = await client.post(
        "/api/v1/payments", json={"rental_id": rental["id"], "amount": "2500"}
    )
    assert too_much.status_code == 400
    assert Decimal(too_much.json()["detail"]["pending"]) == Decimal("2000")

    missing = await client.post(
        "/api/v1/payments",
        json={"rental_id": "00000000-0000-0000-0000-000000000000", "amount": "10"},
    )
    assert missing.status_code == 404


async def test_availability_endpoints(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]

    await client.post("/api/v1/rentals", json=_payload())

    unit = await client.get(
        "/api/v1/availability/umbrella/units/1",
        params={"start_date": "2025-12-14", "end_date": "2025-12-18"},
    )
    assert unit.json()["available"] is False
    assert unit.json()["conflict_date"] == "2025-12-14"

    first = await client.get(
        "/api/v1/availability/umbrella/first-available",
        params={"start_date": "2025-12-14", "end_date": "2025-12-18"},
    )
    assert first.json()["unit_number"] == 2

    summary = await client.get(
        "/api/v1/availability/umbrella", params={"day": "2025-12-12"}
    )
    assert summary.json()["occupied"] == 1
    assert summary.json()["available"] == 49

    unknown = await client.get(
        "/api/v1/availability/kayak", params={"day": "2025-12-12"}
    )
    assert unknown.status_code == 404


async def test_search_and_bundled_parking(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]

    created = await client.post(
        "/api/v1/rentals",
        json=_payload(
            resource_type="tent",
            include_parking=True,
            parking_price_per_day="500",
            parking_amount_paid="500",
        ),
    )
    assert created.status_code == 201
    booking = created.json()
    assert booking["parking_error"] is None
    assert booking["parking"]["resource_type"] == "parking"
    assert booking["parking"]["unit_number"] == 1
    assert booking["parking"]["client_id"] == booking["client_id"]

    found = await client.get("/api/v1/rentals", params={"q": "lucia", "resource_type": "tent"})
    assert found.status_code == 200
    assert [r["id"] for r in found.json()] == [booking["id"]]

    by_spot = await client.get("/api/v1/rentals", params={"q": "parking"})
    assert [r["id"] for r in by_spot.json()] == [booking["parking"]["id"]]

    bad_filter = await client.get(
        "/api/v1/rentals", params={"q": "lucia", "payment_status": "overdue"}
    )
    assert bad_filter.status_code == 422
