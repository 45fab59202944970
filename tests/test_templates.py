import pytest
from httpx import AsyncClient
from fastapi import status
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import PersistenceError
from app.crud import template as crud_template

pytestmark = pytest.mark.asyncio

async def test_create_and_list_templates(client: AsyncClient, user_id, other_user_id):
    """Templates are listed per user, most used first."""
    payload = {
        "user_id": user_id,
        "template_name": "VRS shift",
        "assignment_type": "vrs",
        "location_type": "virtual",
        "is_recurring": True,
        "recurrence_pattern": "weekly"
    }
    response = await client.post("/api/v1/assignments/templates", json=payload)
    assert response.status_code == status.HTTP_201_CREATED
    template = response.json()["template"]
    assert template["times_used"] == 0
    assert template["duration_minutes"] == 60
    assert template["team_size"] == 1
    assert template["last_used_at"] is None

    await client.post(
        "/api/v1/assignments/templates",
        json={**payload, "user_id": other_user_id, "template_name": "Not mine"}
    )

    response = await client.get("/api/v1/assignments/templates", params={"user_id": user_id})
    assert response.status_code == status.HTTP_200_OK
    names = [t["template_name"] for t in response.json()["templates"]]
    assert names == ["VRS shift"]

async def test_templates_ordered_by_usage(client: AsyncClient, make_template, user_id):
    await make_template(template_name="Rare", times_used=1)
    await make_template(template_name="Frequent", times_used=9)
    response = await client.get("/api/v1/assignments/templates", params={"user_id": user_id})
    assert [t["template_name"] for t in response.json()["templates"]] == ["Frequent", "Rare"]

async def test_create_template_requires_fields(client: AsyncClient, user_id):
    response = await client.post(
        "/api/v1/assignments/templates",
        json={"user_id": user_id, "template_name": "No type"}
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

async def test_delete_template(client: AsyncClient, make_template, user_id, other_user_id):
    template = await make_template()

    response = await client.delete(
        "/api/v1/assignments/templates",
        params={"template_id": template.id, "user_id": other_user_id}
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND

    response = await client.delete(
        "/api/v1/assignments/templates",
        params={"template_id": template.id, "user_id": user_id}
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["message"] == "Template deleted successfully"

    response = await client.get("/api/v1/assignments/templates", params={"user_id": user_id})
    assert response.json()["templates"] == []

async def test_use_one_time_template(client: AsyncClient, make_template, user_id):
    """A non-recurring template creates one assignment with template defaults."""
    template = await make_template()
    response = await client.post(
        "/api/v1/assignments/templates/use",
        json={"template_id": template.id, "user_id": user_id, "date": "2025-03-01"}
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["message"] == "Created 1 assignment(s) from template"
    assert data["warnings"] == []
    [assignment] = data["assignments"]
    assert assignment["title"] == "legal Assignment"
    assert assignment["time"] == "09:00"
    assert assignment["date"] == "2025-03-01"
    assert assignment["duration_minutes"] == 90
    assert assignment["setting"] == "courtroom"
    assert assignment["location_details"] == "County courthouse"
    assert assignment["status"] == "upcoming"
    assert assignment["timezone"] == "America/New_York"

async def test_use_template_overrides(client: AsyncClient, make_template, user_id):
    template = await make_template(default_title="Arraignment")
    response = await client.post(
        "/api/v1/assignments/templates/use",
        json={"template_id": template.id, "user_id": user_id, "date": "2025-03-01"}
    )
    assert response.json()["assignments"][0]["title"] == "Arraignment"

    response = await client.post(
        "/api/v1/assignments/templates/use",
        json={
            "template_id": template.id,
            "user_id": user_id,
            "date": "2025-03-02",
            "time": "13:30",
            "title": "Sentencing"
        }
    )
    assignment = response.json()["assignments"][0]
    assert assignment["title"] == "Sentencing"
    assert assignment["time"] == "13:30"

async def test_use_recurring_template(client: AsyncClient, make_template, user_id):
    template = await make_template(is_recurring=True, recurrence_pattern="weekly")
    response = await client.post(
        "/api/v1/assignments/templates/use",
        json={
            "template_id": template.id,
            "user_id": user_id,
            "date": "2025-01-01",
            "recurrence_end_date": "2025-01-20"
        }
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert [a["date"] for a in data["assignments"]] == ["2025-01-01", "2025-01-08", "2025-01-15"]
    assert data["message"] == "Created 3 assignment(s) from template"

async def test_use_recurring_template_without_end_date(client: AsyncClient, make_template, user_id):
    template = await make_template(is_recurring=True, recurrence_pattern="monthly")
    response = await client.post(
        "/api/v1/assignments/templates/use",
        json={"template_id": template.id, "user_id": user_id, "date": "2025-01-31"}
    )
    dates = [a["date"] for a in response.json()["assignments"]]
    assert len(dates) == 52
    assert dates[:3] == ["2025-01-31", "2025-02-28", "2025-03-31"]

async def test_use_updates_usage_stats(client: AsyncClient, make_template, user_id):
    template = await make_template()
    for day in ("2025-03-01", "2025-03-08"):
        response = await client.post(
            "/api/v1/assignments/templates/use",
            json={"template_id": template.id, "user_id": user_id, "date": day}
        )
        assert response.status_code == status.HTTP_201_CREATED

    response = await client.get("/api/v1/assignments/templates", params={"user_id": user_id})
    [stored] = response.json()["templates"]
    assert stored["times_used"] == 2
    assert stored["last_used_at"] is not None

async def test_use_template_of_another_user(client: AsyncClient, make_template, other_user_id):
    template = await make_template()
    response = await client.post(
        "/api/v1/assignments/templates/use",
        json={"template_id": template.id, "user_id": other_user_id, "date": "2025-03-01"}
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Template not found or access denied"

async def test_use_template_requires_date(client: AsyncClient, make_template, user_id):
    template = await make_template()
    response = await client.post(
        "/api/v1/assignments/templates/use",
        json={"template_id": template.id, "user_id": user_id}
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

async def test_usage_update_failure_is_a_warning(client: AsyncClient, make_template, user_id, monkeypatch):
    """Assignments survive a failed usage-counter update; the caller gets a warning."""
    async def failing_usage(db, template):
        raise PersistenceError("Failed to update template usage", reason="deadlock detected")

    monkeypatch.setattr(crud_template, "record_template_usage", failing_usage)
    template = await make_template(is_recurring=True, recurrence_pattern="daily")
    response = await client.post(
        "/api/v1/assignments/templates/use",
        json={
            "template_id": template.id,
            "user_id": user_id,
            "date": "2025-01-01",
            "recurrence_end_date": "2025-01-03"
        }
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["success"] is True
    assert len(data["assignments"]) == 3
    assert len(data["warnings"]) == 1
    assert "usage statistics" in data["warnings"][0]

    response = await client.get("/api/v1/assignments/", params={"user_id": user_id})
    assert response.json()["total"] == 3

    response = await client.get("/api/v1/assignments/templates", params={"user_id": user_id})
    assert response.json()["templates"][0]["times_used"] == 0

async def test_failed_template_batch_creates_nothing(client: AsyncClient, make_template, user_id, monkeypatch):
    """A storage failure while saving the batch leaves no assignments and no usage recorded."""
    template = await make_template(is_recurring=True, recurrence_pattern="daily")

    async def failing_commit(self):
        raise OperationalError("INSERT INTO assignments", {}, Exception("disk I/O error"))

    monkeypatch.setattr(AsyncSession, "commit", failing_commit)
    response = await client.post(
        "/api/v1/assignments/templates/use",
        json={
            "template_id": template.id,
            "user_id": user_id,
            "date": "2025-01-01",
            "recurrence_end_date": "2025-01-03"
        }
    )
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    data = response.json()
    assert data["type"] == "application_error"
    assert data["detail"]["error"] == "Failed to create assignments from template"
    assert "disk I/O error" in data["detail"]["details"]

    monkeypatch.undo()
    response = await client.get("/api/v1/assignments/", params={"user_id": user_id})
    assert response.json()["total"] == 0

    response = await client.get("/api/v1/assignments/templates", params={"user_id": user_id})
    [stored] = response.json()["templates"]
    assert stored["times_used"] == 0
    assert stored["last_used_at"] is None

async def test_failed_delete_keeps_template(client: AsyncClient, make_template, user_id, monkeypatch):
    template = await make_template()

    async def failing_commit(self):
        raise OperationalError("DELETE FROM assignment_templates", {}, Exception("database is locked"))

    monkeypatch.setattr(AsyncSession, "commit", failing_commit)
    response = await client.delete(
        "/api/v1/assignments/templates",
        params={"template_id": template.id, "user_id": user_id}
    )
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["detail"]["error"] == "Failed to delete template"

    monkeypatch.undo()
    response = await client.get("/api/v1/assignments/templates", params={"user_id": user_id})
    assert [t["id"] for t in response.json()["templates"]] == [template.id]
