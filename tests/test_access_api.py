"""Tests for POST /api/access/scan and GET /api/access/qr."""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient

from app.models.user import Role, UserStatus

SCAN_URL = "/api/access/scan"


def _body(user, center_id, age=timedelta(0)):
    ts = datetime.now(timezone.utc) - age
    return {
        "qrData": {"id": user.id, "timestamp": ts.isoformat(), "email": user.email, "name": user.name},
        "centerId": center_id,
    }


@pytest.mark.asyncio
async def test_scan_entry(async_client: AsyncClient, auth_headers, superadmin, member, center):
    resp = await async_client.post(SCAN_URL, json=_body(member, center.id), headers=auth_headers(superadmin))
    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert data["type"] == "entry"
    assert data["user"]["id"] == member.id
    assert data["user"]["centerId"] == center.id
    assert "hashed_password" not in data["user"]
    assert "center_id" not in data["user"]
    assert data["user"]["favoriteCenterId"] is None


@pytest.mark.asyncio
async def test_scan_entry_then_exit(async_client: AsyncClient, auth_headers, center_admin, member, center):
    headers = auth_headers(center_admin)
    first = await async_client.post(SCAN_URL, json=_body(member, center.id), headers=headers)
    second = await async_client.post(SCAN_URL, json=_body(member, center.id), headers=headers)
    assert first.json()["type"] == "entry"
    assert second.status_code == 200
    assert second.json()["type"] == "exit"
    assert second.json()["user"]["centerId"] is None
    assert "Exit registered" in second.json()["message"]


@pytest.mark.asyncio
async def test_scan_snake_case_body_accepted(async_client: AsyncClient, auth_headers, superadmin, member, center):
    body = _body(member, center.id)
    body = {"qr_data": body["qrData"], "center_id": body["centerId"]}
    resp = await async_client.post(SCAN_URL, json=body, headers=auth_headers(superadmin))
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_center_admin_cannot_scan_other_center(
    async_client: AsyncClient, auth_headers, center_admin, member, other_center
):
    resp = await async_client.post(SCAN_URL, json=_body(member, other_center.id), headers=auth_headers(center_admin))
    assert resp.status_code == 403
    assert resp.json()["success"] is False


@pytest.mark.asyncio
async def test_member_cannot_scan(async_client: AsyncClient, auth_headers, make_user, member, center):
    trainer = await make_user(role=Role.TRAINER)
    for actor in (member, trainer):
        resp = await async_client.post(SCAN_URL, json=_body(member, center.id), headers=auth_headers(actor))
        assert resp.status_code == 403


@pytest.mark.asyncio
async def test_scan_requires_auth(async_client: AsyncClient, member, center):
    resp = await async_client.post(SCAN_URL, json=_body(member, center.id))
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_scan_rejects_garbage_token(async_client: AsyncClient, member, center):
    resp = await async_client.post(
        SCAN_URL, json=_body(member, center.id), headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_scan_missing_fields(async_client: AsyncClient, auth_headers, superadmin, center):
    resp = await async_client.post(SCAN_URL, json={"centerId": center.id}, headers=auth_headers(superadmin))
    assert resp.status_code == 400
    assert resp.json()["success"] is False


@pytest.mark.asyncio
async def test_scan_invalid_id_format(async_client: AsyncClient, auth_headers, superadmin, member):
    resp = await async_client.post(SCAN_URL, json=_body(member, "NOT-AN-ID!"), headers=auth_headers(superadmin))
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_scan_expired_qr(async_client: AsyncClient, auth_headers, superadmin, member, center):
    resp = await async_client.post(
        SCAN_URL, json=_body(member, center.id, timedelta(minutes=25)), headers=auth_headers(superadmin)
    )
    assert resp.status_code == 400
    assert "expired" in resp.json()["detail"]


@pytest.mark.asyncio
async def test_scan_unknown_user(async_client: AsyncClient, auth_headers, superadmin, center):
    body = {
        "qrData": {"id": "a" * 32, "timestamp": datetime.now(timezone.utc).isoformat()},
        "centerId": center.id,
    }
    resp = await async_client.post(SCAN_URL, json=body, headers=auth_headers(superadmin))
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_scan_unknown_center(async_client: AsyncClient, auth_headers, superadmin, member):
    resp = await async_client.post(SCAN_URL, json=_body(member, "b" * 32), headers=auth_headers(superadmin))
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_scan_user_present_elsewhere(
    async_client: AsyncClient, auth_headers, superadmin, make_user, center, other_center
):
    user = await make_user(center_id=other_center.id)
    resp = await async_client.post(SCAN_URL, json=_body(user, center.id), headers=auth_headers(superadmin))
    assert resp.status_code == 409
    assert "another center" in resp.json()["detail"]


@pytest.mark.asyncio
async def test_inactive_operator_rejected(async_client: AsyncClient, auth_headers, make_user, member, center):
    admin = await make_user(role=Role.SUPERADMIN, status=UserStatus.INACTIVE)
    resp = await async_client.post(SCAN_URL, json=_body(member, center.id), headers=auth_headers(admin))
    assert resp.status_code == 403


# ── QR payload ──────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_my_qr_payload(async_client: AsyncClient, auth_headers, member):
    resp = await async_client.get("/api/access/qr", headers=auth_headers(member))
    assert resp.status_code == 200
    data = resp.json()
    assert data["qrData"]["id"] == member.id
    assert data["qrData"]["email"] == member.email
    assert "expiresAt" in data


@pytest.mark.asyncio
async def test_qr_payload_round_trips_through_scan(
    async_client: AsyncClient, auth_headers, superadmin, member, center
):
    qr = (await async_client.get("/api/access/qr", headers=auth_headers(member))).json()["qrData"]
    resp = await async_client.post(
        SCAN_URL, json={"qrData": qr, "centerId": center.id}, headers=auth_headers(superadmin)
    )
    assert resp.status_code == 200
    assert resp.json()["type"] == "entry"
