"""Tests for workout plans and their exercise entries."""

import pytest
from httpx import AsyncClient

from app.models.exercise import Exercise
from app.models.user import Role


@pytest.fixture
async def exercises(db_session):
    squat, plank = Exercise(name="Squat"), Exercise(name="Plank")
    db_session.add_all([squat, plank])
    await db_session.commit()
    return squat, plank


async def _workout(client, headers, name="Leg Day", **fields):
    resp = await client.post("/api/workouts", headers=headers, json={"name": name, **fields})
    assert resp.status_code == 201
    return resp.json()


async def _add(client, headers, workout_id, exercise_id, day=1, order=0, **fields):
    return await client.post(f"/api/workouts/{workout_id}/exercises", headers=headers, json={
        "exercise_id": exercise_id, "day_of_week": day, "order": order, **fields,
    })


@pytest.mark.asyncio
async def test_member_creates_own_workout(async_client: AsyncClient, auth_headers, member):
    data = await _workout(async_client, auth_headers(member), description="Mondays")
    assert data["user_id"] == member.id
    assert data["exercises"] == []


@pytest.mark.asyncio
async def test_member_cannot_create_for_someone_else(async_client: AsyncClient, auth_headers, make_user, member):
    other = await make_user()
    resp = await async_client.post(
        "/api/workouts", headers=auth_headers(member), json={"name": "Gift", "user_id": other.id}
    )
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_trainer_builds_workout_for_member(async_client: AsyncClient, auth_headers, make_user, member):
    trainer = await make_user(role=Role.TRAINER)
    data = await _workout(async_client, auth_headers(trainer), user_id=member.id)
    assert data["user_id"] == member.id

    resp = await async_client.get("/api/workouts", headers=auth_headers(member))
    assert [w["id"] for w in resp.json()] == [data["id"]]


@pytest.mark.asyncio
async def test_add_entries_sorted_by_day_then_order(
    async_client: AsyncClient, auth_headers, member, exercises
):
    squat, plank = exercises
    headers = auth_headers(member)
    workout = await _workout(async_client, headers)

    resp = await _add(async_client, headers, workout["id"], plank.id, day=3, order=0, duration=60)
    assert resp.status_code == 201
    await _add(async_client, headers, workout["id"], squat.id, day=1, order=1, sets=5, reps=5)
    await _add(async_client, headers, workout["id"], plank.id, day=1, order=0)

    data = (await async_client.get(f"/api/workouts/{workout['id']}", headers=headers)).json()
    placed = [(e["day_of_week"], e["order"], e["exercise"]["name"]) for e in data["exercises"]]
    assert placed == [(1, 0, "Plank"), (1, 1, "Squat"), (3, 0, "Plank")]


@pytest.mark.asyncio
async def test_add_unknown_exercise(async_client: AsyncClient, auth_headers, member):
    headers = auth_headers(member)
    workout = await _workout(async_client, headers)
    resp = await _add(async_client, headers, workout["id"], "e" * 32)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_day_of_week_out_of_range(async_client: AsyncClient, auth_headers, member, exercises):
    headers = auth_headers(member)
    workout = await _workout(async_client, headers)
    resp = await _add(async_client, headers, workout["id"], exercises[0].id, day=7)
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_other_member_cannot_see_or_edit(async_client: AsyncClient, auth_headers, make_user, member, exercises):
    workout = await _workout(async_client, auth_headers(member))
    stranger = auth_headers(await make_user())

    assert (await async_client.get(f"/api/workouts/{workout['id']}", headers=stranger)).status_code == 403
    resp = await async_client.patch(f"/api/workouts/{workout['id']}", headers=stranger, json={"name": "Mine"})
    assert resp.status_code == 403
    resp = await _add(async_client, stranger, workout["id"], exercises[0].id)
    assert resp.status_code == 403
    resp = await async_client.get(f"/api/workouts?user_id={member.id}", headers=stranger)
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_update_and_remove_entry(async_client: AsyncClient, auth_headers, make_user, member, exercises):
    headers = auth_headers(member)
    workout = await _workout(async_client, headers)
    entry = (await _add(async_client, headers, workout["id"], exercises[0].id, sets=3, notes="slow")).json()

    resp = await async_client.patch(
        f"/api/workouts/exercises/{entry['id']}", headers=headers, json={"sets": 4, "notes": None}
    )
    assert resp.status_code == 200
    assert resp.json()["sets"] == 4
    assert resp.json()["notes"] is None

    stranger = auth_headers(await make_user())
    resp = await async_client.delete(f"/api/workouts/exercises/{entry['id']}", headers=stranger)
    assert resp.status_code == 403

    resp = await async_client.delete(f"/api/workouts/exercises/{entry['id']}", headers=headers)
    assert resp.status_code == 204
    data = (await async_client.get(f"/api/workouts/{workout['id']}", headers=headers)).json()
    assert data["exercises"] == []


@pytest.mark.asyncio
async def test_reorder_moves_entries(async_client: AsyncClient, auth_headers, member, exercises):
    squat, plank = exercises
    headers = auth_headers(member)
    workout = await _workout(async_client, headers)
    first = (await _add(async_client, headers, workout["id"], squat.id, day=1, order=0)).json()
    second = (await _add(async_client, headers, workout["id"], plank.id, day=1, order=1)).json()

    resp = await async_client.post(f"/api/workouts/{workout['id']}/reorder", headers=headers, json={
        "exercises": [
            {"id": first["id"], "day_of_week": 2, "order": 0},
            {"id": second["id"], "day_of_week": 1, "order": 0},
        ],
    })
    assert resp.status_code == 200
    placed = [(e["id"], e["day_of_week"]) for e in resp.json()["exercises"]]
    assert placed == [(second["id"], 1), (first["id"], 2)]


@pytest.mark.asyncio
async def test_reorder_rejects_foreign_entries(async_client: AsyncClient, auth_headers, member, exercises):
    headers = auth_headers(member)
    mine = await _workout(async_client, headers)
    other = await _workout(async_client, headers, "Arm Day")
    entry = (await _add(async_client, headers, other["id"], exercises[0].id)).json()

    resp = await async_client.post(f"/api/workouts/{mine['id']}/reorder", headers=headers, json={
        "exercises": [{"id": entry["id"], "day_of_week": 0, "order": 0}],
    })
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_duplicate_copies_entries_to_caller(
    async_client: AsyncClient, auth_headers, make_user, member, exercises
):
    trainer = await make_user(role=Role.TRAINER)
    source = await _workout(async_client, auth_headers(trainer), "Template")
    await _add(async_client, auth_headers(trainer), source["id"], exercises[0].id, sets=3, reps=10)

    resp = await async_client.post(f"/api/workouts/{source['id']}/duplicate", headers=auth_headers(trainer))
    assert resp.status_code == 201
    copy = resp.json()
    assert copy["id"] != source["id"]
    assert copy["name"] == "Template (copy)"
    assert copy["user_id"] == trainer.id
    assert [(e["exercise_id"], e["sets"], e["reps"]) for e in copy["exercises"]] == [(exercises[0].id, 3, 10)]

    resp = await async_client.post(f"/api/workouts/{source['id']}/duplicate", headers=auth_headers(member))
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_delete_workout_removes_entries(async_client: AsyncClient, auth_headers, member, exercises):
    headers = auth_headers(member)
    workout = await _workout(async_client, headers)
    entry = (await _add(async_client, headers, workout["id"], exercises[0].id)).json()

    resp = await async_client.delete(f"/api/workouts/{workout['id']}", headers=headers)
    assert resp.status_code == 204
    assert (await async_client.get(f"/api/workouts/{workout['id']}", headers=headers)).status_code == 404
    resp = await async_client.patch(f"/api/workouts/exercises/{entry['id']}", headers=headers, json={"sets": 1})
    assert resp.status_code == 404
