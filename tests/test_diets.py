"""Tests for diet plans."""

import pytest
from httpx import AsyncClient

from app.models.meal import Meal
from app.models.user import Role


@pytest.fixture
async def meals(db_session):
    oats, salad = Meal(name="Oats", calories=300), Meal(name="Salad", calories=150)
    db_session.add_all([oats, salad])
    await db_session.commit()
    return oats, salad


async def _diet(client, headers, name="Cutting", **fields):
    resp = await client.post("/api/diets", headers=headers, json={"name": name, **fields})
    assert resp.status_code == 201
    return resp.json()


async def _add(client, headers, diet_id, meal_id, day=1, meal_type="breakfast", order=0, **fields):
    return await client.post(f"/api/diets/{diet_id}/meals", headers=headers, json={
        "meal_id": meal_id, "day_of_week": day, "meal_type": meal_type, "order": order, **fields,
    })


@pytest.mark.asyncio
async def test_build_diet(async_client: AsyncClient, auth_headers, member, meals):
    oats, salad = meals
    headers = auth_headers(member)
    diet = await _diet(async_client, headers)

    resp = await _add(async_client, headers, diet["id"], salad.id, day=1, meal_type="lunch", order=1, quantity=1.5)
    assert resp.status_code == 201
    assert resp.json()["quantity"] == 1.5
    await _add(async_client, headers, diet["id"], oats.id, day=1, order=0)

    data = (await async_client.get(f"/api/diets/{diet['id']}", headers=headers)).json()
    assert [(m["meal"]["name"], m["meal_type"]) for m in data["meals"]] == [
        ("Oats", "breakfast"), ("Salad", "lunch"),
    ]


@pytest.mark.asyncio
async def test_unknown_meal_type(async_client: AsyncClient, auth_headers, member, meals):
    headers = auth_headers(member)
    diet = await _diet(async_client, headers)
    resp = await _add(async_client, headers, diet["id"], meals[0].id, meal_type="brunch")
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_list_is_own_for_members_and_any_for_staff(
    async_client: AsyncClient, auth_headers, make_user, member
):
    other = await make_user()
    mine = await _diet(async_client, auth_headers(member))
    await _diet(async_client, auth_headers(other), "Bulking")

    resp = await async_client.get("/api/diets", headers=auth_headers(member))
    assert [d["id"] for d in resp.json()] == [mine["id"]]

    trainer = await make_user(role=Role.TRAINER)
    resp = await async_client.get("/api/diets", headers=auth_headers(trainer))
    assert len(resp.json()) == 2
    resp = await async_client.get(f"/api/diets?user_id={member.id}", headers=auth_headers(trainer))
    assert [d["id"] for d in resp.json()] == [mine["id"]]


@pytest.mark.asyncio
async def test_trainer_edits_members_diet(async_client: AsyncClient, auth_headers, make_user, member):
    diet = await _diet(async_client, auth_headers(member))
    trainer = await make_user(role=Role.TRAINER)
    resp = await async_client.patch(
        f"/api/diets/{diet['id']}", headers=auth_headers(trainer), json={"description": "Less sugar"}
    )
    assert resp.status_code == 200
    assert resp.json()["description"] == "Less sugar"


@pytest.mark.asyncio
async def test_cleaner_cannot_edit_members_diet(async_client: AsyncClient, auth_headers, make_user, member):
    diet = await _diet(async_client, auth_headers(member))
    cleaner = await make_user(role=Role.CLEANER)
    resp = await async_client.delete(f"/api/diets/{diet['id']}", headers=auth_headers(cleaner))
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_update_and_remove_entry(async_client: AsyncClient, auth_headers, member, meals):
    headers = auth_headers(member)
    diet = await _diet(async_client, headers)
    entry = (await _add(async_client, headers, diet["id"], meals[0].id, notes="no sugar")).json()

    resp = await async_client.patch(
        f"/api/diets/meals/{entry['id']}", headers=headers, json={"meal_type": "dinner", "notes": None}
    )
    assert resp.status_code == 200
    assert resp.json()["meal_type"] == "dinner"
    assert resp.json()["notes"] is None

    resp = await async_client.patch(f"/api/diets/meals/{entry['id']}", headers=headers, json={"order": None})
    assert resp.status_code == 400

    resp = await async_client.delete(f"/api/diets/meals/{entry['id']}", headers=headers)
    assert resp.status_code == 204
    resp = await async_client.delete(f"/api/diets/meals/{entry['id']}", headers=headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_reorder_reschedules(async_client: AsyncClient, auth_headers, member, meals):
    oats, salad = meals
    headers = auth_headers(member)
    diet = await _diet(async_client, headers)
    breakfast = (await _add(async_client, headers, diet["id"], oats.id, day=1, order=0)).json()
    lunch = (await _add(async_client, headers, diet["id"], salad.id, day=1, meal_type="lunch", order=1)).json()

    resp = await async_client.post(f"/api/diets/{diet['id']}/reorder", headers=headers, json={"meals": [
        {"id": breakfast["id"], "day_of_week": 2, "meal_type": "afternoon_snack", "order": 0},
        {"id": lunch["id"], "day_of_week": 0, "meal_type": "lunch", "order": 0},
    ]})
    assert resp.status_code == 200
    placed = [(m["id"], m["day_of_week"], m["meal_type"]) for m in resp.json()["meals"]]
    assert placed == [(lunch["id"], 0, "lunch"), (breakfast["id"], 2, "afternoon_snack")]


@pytest.mark.asyncio
async def test_deleting_user_removes_their_diets(async_client: AsyncClient, auth_headers, superadmin, member):
    diet = await _diet(async_client, auth_headers(member))
    resp = await async_client.delete(f"/api/users/{member.id}", headers=auth_headers(superadmin))
    assert resp.status_code == 204
    resp = await async_client.get(f"/api/diets/{diet['id']}", headers=auth_headers(superadmin))
    assert resp.status_code == 404
