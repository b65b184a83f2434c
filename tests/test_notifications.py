"""Tests for in-app notifications."""

import pytest
from httpx import AsyncClient

from app.models.notification import Notification, NotificationType
from app.models.user import Role, UserStatus


@pytest.fixture
def make_notification(db_session):
    async def _make(user, title="Hello", read=False):
        notification = Notification(user_id=user.id, title=title, message="Body", is_read=read)
        db_session.add(notification)
        await db_session.commit()
        return notification

    return _make


@pytest.mark.asyncio
async def test_list_only_own(async_client: AsyncClient, auth_headers, make_user, member, make_notification):
    await make_notification(member, "Mine")
    await make_notification(await make_user(), "Theirs")

    resp = await async_client.get("/api/notifications", headers=auth_headers(member))
    assert resp.status_code == 200
    assert [n["title"] for n in resp.json()] == ["Mine"]
    assert resp.json()[0]["type"] == "info"


@pytest.mark.asyncio
async def test_unread_count_and_mark_read(async_client: AsyncClient, auth_headers, member, make_notification):
    headers = auth_headers(member)
    first = await make_notification(member)
    await make_notification(member)
    await make_notification(member, read=True)

    resp = await async_client.get("/api/notifications/unread-count", headers=headers)
    assert resp.json() == {"count": 2}

    resp = await async_client.patch(f"/api/notifications/{first.id}/read", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["is_read"] is True
    resp = await async_client.get("/api/notifications/unread-count", headers=headers)
    assert resp.json() == {"count": 1}


@pytest.mark.asyncio
async def test_cannot_mark_someone_elses(async_client: AsyncClient, auth_headers, make_user, member, make_notification):
    theirs = await make_notification(await make_user())
    resp = await async_client.patch(f"/api/notifications/{theirs.id}/read", headers=auth_headers(member))
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_read_all(async_client: AsyncClient, auth_headers, make_user, member, make_notification):
    other = await make_user()
    await make_notification(member)
    await make_notification(member)
    await make_notification(other)

    resp = await async_client.patch("/api/notifications/read-all", headers=auth_headers(member))
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "updated": 2}
    resp = await async_client.get("/api/notifications/unread-count", headers=auth_headers(other))
    assert resp.json() == {"count": 1}


@pytest.mark.asyncio
async def test_activation_notifies_user(async_client: AsyncClient, auth_headers, make_user, center_admin, center):
    pending = await make_user(status=UserStatus.PENDING, favorite_center_id=center.id)
    resp = await async_client.patch(
        f"/api/users/{pending.id}", headers=auth_headers(center_admin), json={"status": "ACTIVE"}
    )
    assert resp.status_code == 200

    resp = await async_client.get("/api/notifications", headers=auth_headers(pending))
    assert len(resp.json()) == 1
    assert resp.json()[0]["title"] == "Account activated"
    assert resp.json()[0]["type"] == NotificationType.SUCCESS.value

    # Saving an already active account does not notify again.
    await async_client.patch(
        f"/api/users/{pending.id}", headers=auth_headers(center_admin), json={"status": "ACTIVE"}
    )
    resp = await async_client.get("/api/notifications/unread-count", headers=auth_headers(pending))
    assert resp.json() == {"count": 1}


@pytest.mark.asyncio
async def test_new_ticket_notifies_center_admins(
    async_client: AsyncClient, auth_headers, make_user, center_admin, center, other_center
):
    elsewhere = await make_user(role=Role.ADMIN_CENTER, favorite_center_id=other_center.id)
    resp = await async_client.post("/api/tickets", json={
        "name": "Jane Visitor",
        "email": "jane@example.com",
        "center_id": center.id,
        "subject": "Locker broken",
        "description": "Locker 12 does not close properly.",
    })
    assert resp.status_code == 201

    resp = await async_client.get("/api/notifications", headers=auth_headers(center_admin))
    assert [n["message"] for n in resp.json()] == ["Jane Visitor: Locker broken"]
    resp = await async_client.get("/api/notifications/unread-count", headers=auth_headers(elsewhere))
    assert resp.json() == {"count": 0}
