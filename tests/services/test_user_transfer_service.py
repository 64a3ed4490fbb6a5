from __future__ import annotations

import csv
import io

import pytest
from sqlalchemy import select

from app.core.security import verify_password
from app.models.bulk_operation import BulkOperation
from app.models.user import User
from app.schemas.bulk import ImportOptions
from app.services.bulk import user_transfer_service
from app.utils.enums import BulkOperationStatus, Role
from tests.factories import create_team, create_user

pytestmark = pytest.mark.asyncio


async def _user_by_email(db_session, email):
    result = await db_session.execute(select(User).where(User.email == email))
    return result.scalars().first()


async def test_import_reports_row_errors_and_keeps_good_rows(db_session, admin_user):
    await create_team(db_session, "Falcons")
    await create_user(db_session, "taken@example.com")

    result = await user_transfer_service.import_users(
        db_session,
        [
            {"name": "Ana", "email": "Ana@Example.com", "password": "secret1", "team_name": "Falcons"},
            {"name": "No Password", "email": "nopass@example.com"},
            {"name": "Dup", "email": "taken@example.com", "password": "secret1"},
            {"name": "Bad", "email": "not-an-email", "password": "secret1"},
        ],
        ImportOptions(),
        admin_user.id,
    )

    assert result.processed == 1
    assert result.failed == 3
    assert [e.email for e in result.errors] == ["nopass@example.com", "taken@example.com", "not-an-email"]
    assert result.errors[0].error == "Email and password are required"
    assert result.errors[1].error == "User already exists"

    ana = await _user_by_email(db_session, "ana@example.com")
    assert ana is not None
    assert ana.role == Role.student
    assert ana.team_id is not None

    operation = await db_session.get(BulkOperation, result.operation_id)
    assert operation.status == BulkOperationStatus.completed
    assert operation.total_items == 4
    assert operation.processed_items == 1
    assert operation.failed_items == 3
    assert operation.completed_at is not None
    assert len(operation.result_data["errors"]) == 3


async def test_import_can_update_existing_users(db_session, admin_user):
    await create_user(db_session, "sam@example.com", name="Old Name")

    result = await user_transfer_service.import_users(
        db_session,
        [{"name": "New Name", "email": "sam@example.com", "password": "fresh-pass", "role": "ADMIN"}],
        ImportOptions(update_existing=True),
        admin_user.id,
    )

    assert result.processed == 1
    sam = await _user_by_email(db_session, "sam@example.com")
    await db_session.refresh(sam)
    assert sam.name == "New Name"
    assert sam.role == Role.admin
    assert verify_password("fresh-pass", sam.password_hash)


async def test_import_where_every_row_fails_is_marked_failed(db_session, admin_user):
    result = await user_transfer_service.import_users(
        db_session, [{"name": "x"}, {"email": "y@example.com"}], ImportOptions(), admin_user.id
    )

    assert result.processed == 0
    operation = await db_session.get(BulkOperation, result.operation_id)
    assert operation.status == BulkOperationStatus.failed


async def test_empty_import_completes(db_session, admin_user):
    result = await user_transfer_service.import_users(db_session, [], ImportOptions(), admin_user.id)

    assert result.processed == 0 and result.failed == 0
    operation = await db_session.get(BulkOperation, result.operation_id)
    assert operation.status == BulkOperationStatus.completed


async def test_export_rows_match_between_formats(db_session, admin_user):
    team = await create_team(db_session, "Falcons")
    await create_user(db_session, "sam@example.com", name="Sam", team=team)
    await create_user(db_session, "gone@example.com", name="Gone", is_active=False)

    rows = await user_transfer_service.collect_export_rows(db_session)
    reader = csv.DictReader(io.StringIO(user_transfer_service.rows_to_csv(rows)))
    parsed = list(reader)

    assert reader.fieldnames == user_transfer_service.EXPORT_FIELDS
    assert len(parsed) == len(rows) == 2
    # admins sort ahead of students
    assert [r["email"] for r in parsed] == ["admin@example.com", "sam@example.com"]
    assert parsed[1]["team_name"] == "Falcons"
    assert parsed[1]["submission_count"] == "0"

    everyone = await user_transfer_service.collect_export_rows(db_session, include_inactive=True)
    assert len(everyone) == 3


async def test_export_filename_uses_current_date():
    name = user_transfer_service.export_filename("csv")
    assert name.startswith("users_export_")
    assert name.endswith(".csv")
    assert len(name) == len("users_export_YYYY-MM-DD.csv")


async def test_unexpected_row_failure_does_not_abort_batch(db_session, admin_user, monkeypatch):
    real_find_team_id = user_transfer_service._find_team_id

    async def flaky_find_team_id(db, team_name):
        if team_name == "Broken":
            raise RuntimeError("team lookup failed")
        return await real_find_team_id(db, team_name)

    monkeypatch.setattr(user_transfer_service, "_find_team_id", flaky_find_team_id)

    result = await user_transfer_service.import_users(
        db_session,
        [
            {"name": "One", "email": "one@example.com", "password": "secret1"},
            {"name": "Two", "email": "two@example.com", "password": "secret1", "team_name": "Broken"},
            {"name": "Three", "email": "three@example.com", "password": "secret1"},
        ],
        ImportOptions(),
        admin_user.id,
    )

    assert result.processed == 2
    assert [(e.email, e.error) for e in result.errors] == [("two@example.com", "team lookup failed")]
    assert await _user_by_email(db_session, "one@example.com") is not None
    assert await _user_by_email(db_session, "two@example.com") is None
    assert await _user_by_email(db_session, "three@example.com") is not None

    operation = await db_session.get(BulkOperation, result.operation_id)
    assert operation.status == BulkOperationStatus.completed
    assert operation.processed_items == 2
    assert operation.failed_items == 1
