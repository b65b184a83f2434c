"""Tests for center CRUD and presence listing."""

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from app.models.user import User


@pytest.mark.asyncio
async def test_superadmin_creates_center(async_client: AsyncClient, auth_headers, superadmin):
    resp = await async_client.post("/api/centers", headers=auth_headers(superadmin), json={
        "name": "  Riverside  ", "city": "Valencia", "email": "RIVER@gym.example.com",
    })
    assert resp.status_code == 201
    data = resp.json()
    assert data["name"] == "Riverside"
    assert data["email"] == "river@gym.example.com"


@pytest.mark.asyncio
async def test_duplicate_center_name(async_client: AsyncClient, auth_headers, superadmin, center):
    resp = await async_client.post("/api/centers", headers=auth_headers(superadmin), json={"name": center.name})
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_center_admin_cannot_create_center(async_client: AsyncClient, auth_headers, center_admin):
    resp = await async_client.post("/api/centers", headers=auth_headers(center_admin), json={"name": "Rogue Gym"})
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_list_and_get_centers(async_client: AsyncClient, auth_headers, member, center, other_center):
    headers = auth_headers(member)
    resp = await async_client.get("/api/centers", headers=headers)
    assert resp.status_code == 200
    assert [c["name"] for c in resp.json()] == ["Downtown", "Uptown"]

    resp = await async_client.get(f"/api/centers/{center.id}", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["id"] == center.id


@pytest.mark.asyncio
async def test_get_missing_center(async_client: AsyncClient, auth_headers, member):
    resp = await async_client.get(f"/api/centers/{'0' * 32}", headers=auth_headers(member))
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_center_admin_updates_own_center(async_client: AsyncClient, auth_headers, center_admin, center):
    resp = await async_client.patch(
        f"/api/centers/{center.id}", headers=auth_headers(center_admin), json={"phone": "+34 600 000 000"}
    )
    assert resp.status_code == 200
    assert resp.json()["phone"] == "+34 600 000 000"


@pytest.mark.asyncio
async def test_center_admin_cannot_update_other_center(
    async_client: AsyncClient, auth_headers, center_admin, other_center
):
    resp = await async_client.patch(
        f"/api/centers/{other_center.id}", headers=auth_headers(center_admin), json={"phone": "1"}
    )
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_users_present_at_center(
    async_client: AsyncClient, auth_headers, make_user, center_admin, center, other_center
):
    here = await make_user(name="Here Member", center_id=center.id)
    await make_user(name="Fan Member", favorite_center_id=center.id)
    await make_user(name="Away Member", center_id=other_center.id)

    resp = await async_client.get(f"/api/centers/{center.id}/users", headers=auth_headers(center_admin))
    assert resp.status_code == 200
    assert [u["id"] for u in resp.json()] == [here.id]


@pytest.mark.asyncio
async def test_delete_center_releases_present_users(
    async_client: AsyncClient, auth_headers, db_session, make_user, superadmin, center
):
    user = await make_user(center_id=center.id, favorite_center_id=center.id)
    resp = await async_client.delete(f"/api/centers/{center.id}", headers=auth_headers(superadmin))
    assert resp.status_code == 204

    fresh = (await db_session.execute(
        select(User).where(User.id == user.id).execution_options(populate_existing=True)
    )).scalar_one()
    assert fresh.center_id is None
    assert fresh.favorite_center_id is None


@pytest.mark.asyncio
async def test_center_admin_cannot_delete_center(async_client: AsyncClient, auth_headers, center_admin, center):
    resp = await async_client.delete(f"/api/centers/{center.id}", headers=auth_headers(center_admin))
    assert resp.status_code == 403
