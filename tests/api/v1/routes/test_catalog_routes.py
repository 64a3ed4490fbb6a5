from __future__ import annotations

import uuid

import pytest

from app.models.case_file import CaseFile
from app.models.question import QuestionCategory

pytestmark = pytest.mark.asyncio


async def test_delete_case_file_only_deactivates(client, db_session):
    created = await client.post(
        "/api/v1/case-files",
        json={
            "filename": "1_brief.pdf",
            "original_name": "brief.pdf",
            "filepath": "/srv/uploads/case-files/1_brief.pdf",
            "url": "/api/v1/files/case-files/1_brief.pdf",
            "mime_type": "application/pdf",
        },
    )
    case_file_id = created.json()["data"]["id"]

    response = await client.delete(f"/api/v1/case-files/{case_file_id}")

    assert response.status_code == 200
    assert response.json()["msg"] == "Case file deactivated successfully"
    listed = await client.get("/api/v1/case-files")
    assert listed.json()["data"] == []
    stored = await db_session.get(CaseFile, uuid.UUID(case_file_id))
    assert stored is not None
    assert stored.is_active is False


async def test_delete_category_only_deactivates(client, db_session):
    created = await client.post("/api/v1/question-categories", json={"name": "Strategy"})
    category_id = created.json()["data"]["id"]

    response = await client.delete(f"/api/v1/question-categories/{category_id}")

    assert response.status_code == 200
    assert response.json()["msg"] == "Category deactivated successfully"
    listed = await client.get("/api/v1/question-categories")
    assert listed.json()["data"] == []
    stored = await db_session.get(QuestionCategory, uuid.UUID(category_id))
    assert stored is not None
    assert stored.is_active is False
