"""Bulk user import and export.

Imports are recorded as a BulkOperation whose counters and error list are
filled in as the rows are processed. Each row is validated on its own, so one
bad row never rejects the batch.
"""
from __future__ import annotations

import csv
import io
import uuid
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.logging_config import get_logger
from app.core.security import get_password_hash
from app.models.bulk_operation import BulkOperation
from app.models.submission import Submission
from app.models.team import Team
from app.models.user import User
from app.schemas.bulk import ImportOptions, ImportRowError, UserImportResult
from app.schemas.users import UserImportRecord, normalize_email
from app.utils.datetime_utils import get_current_utc_datetime
from app.utils.enums import BulkOperationStatus, BulkOperationType

logger = get_logger("services.user_transfer")

MAX_REPORTED_ERRORS = 10

EXPORT_FIELDS = [
    "id",
    "name",
    "email",
    "role",
    "team_name",
    "is_group_leader",
    "individual_score",
    "total_submission_points",
    "submission_count",
    "is_active",
    "created_at",
    "updated_at",
]


class RowRejected(Exception):
    """A single import row that cannot be applied."""


def _describe_validation_error(exc: PydanticValidationError) -> str:
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ()))
    return f"{field}: {first.get('msg', 'invalid value')}" if field else first.get("msg", "invalid value")


async def _find_team_id(db: AsyncSession, team_name: Optional[str]) -> Optional[uuid.UUID]:
    if not team_name:
        return None
    result = await db.execute(select(Team.id).where(Team.name == team_name.strip()))
    return result.scalars().first()


async def _apply_row(db: AsyncSession, raw: Dict[str, Any], options: ImportOptions) -> None:
    if not raw.get("email") or not raw.get("password"):
        raise RowRejected("Email and password are required")
    try:
        record = UserImportRecord.model_validate(raw)
    except PydanticValidationError as exc:
        raise RowRejected(_describe_validation_error(exc)) from exc

    # autoflush makes rows added earlier in this batch visible here
    existing = (
        await db.execute(select(User).where(User.email == record.email))
    ).scalars().first()
    if existing is not None and not options.update_existing:
        raise RowRejected("User already exists")

    team_id = await _find_team_id(db, record.team_name)
    password_hash = get_password_hash(record.password)

    if existing is not None:
        existing.name = record.name
        existing.password_hash = password_hash
        existing.role = record.role
        existing.team_id = team_id
    else:
        db.add(
            User(
                name=record.name,
                email=record.email,
                password_hash=password_hash,
                role=record.role,
                team_id=team_id,
            )
        )


async def import_users(
    db: AsyncSession,
    rows: List[Dict[str, Any]],
    options: ImportOptions,
    initiated_by: Optional[uuid.UUID],
) -> UserImportResult:
    operation = BulkOperation(
        type=BulkOperationType.import_users,
        status=BulkOperationStatus.processing,
        total_items=len(rows),
        initiated_by=initiated_by,
    )
    db.add(operation)
    await db.commit()
    operation_id = operation.id

    processed = 0
    errors: List[ImportRowError] = []
    try:
        for raw in rows:
            email = normalize_email(raw.get("email")) if isinstance(raw.get("email"), str) else None
            try:
                # a failing row only unwinds its own savepoint
                async with db.begin_nested():
                    await _apply_row(db, raw, options)
                processed += 1
            except RowRejected as exc:
                errors.append(ImportRowError(email=email or "missing", error=str(exc)))
            except Exception as exc:
                logger.warning(f"User import {operation_id}: row {email or 'missing'} failed: {exc}")
                errors.append(ImportRowError(email=email or "missing", error=str(exc)))

        operation.processed_items = processed
        operation.failed_items = len(errors)
        operation.result_data = {"errors": [e.model_dump() for e in errors]}
        # an empty batch has nothing that failed
        all_failed = bool(rows) and processed == 0
        operation.mark_finished(
            BulkOperationStatus.failed if all_failed else BulkOperationStatus.completed
        )
        await db.commit()
    except Exception:
        await db.rollback()
        logger.error(f"User import {operation_id} aborted", exc_info=True)
        # rollback expired the instance; reload before recording the failure
        operation = await db.get(BulkOperation, operation_id, populate_existing=True)
        if operation is not None:
            operation.mark_finished(BulkOperationStatus.failed)
            operation.result_data = {"errors": [{"email": "unknown", "error": "Import aborted"}]}
            await db.commit()
        raise

    logger.info(
        f"User import {operation_id}: {processed} processed, {len(errors)} failed of {len(rows)}"
    )
    return UserImportResult(
        processed=processed,
        failed=len(errors),
        errors=errors[:MAX_REPORTED_ERRORS],
        operation_id=operation_id,
    )


async def collect_export_rows(db: AsyncSession, include_inactive: bool = False) -> List[Dict[str, Any]]:
    totals = (
        select(
            Submission.user_id,
            func.count(Submission.id).label("submission_count"),
            func.coalesce(func.sum(Submission.points), 0).label("total_points"),
        )
        .group_by(Submission.user_id)
        .subquery()
    )
    stmt = (
        select(User, totals.c.submission_count, totals.c.total_points)
        .options(selectinload(User.team))
        .outerjoin(totals, totals.c.user_id == User.id)
        .order_by(User.role.asc(), User.name.asc())
    )
    if not include_inactive:
        stmt = stmt.where(User.is_active.is_(True))

    rows = []
    for user, submission_count, total_points in (await db.execute(stmt)).all():
        rows.append(
            {
                "id": str(user.id),
                "name": user.name or "",
                "email": user.email,
                "role": user.role.value,
                "team_name": user.team.name if user.team else "",
                "is_group_leader": user.is_group_leader,
                "individual_score": user.individual_score,
                "total_submission_points": int(total_points or 0),
                "submission_count": int(submission_count or 0),
                "is_active": user.is_active,
                "created_at": user.created_at.isoformat() if user.created_at else "",
                "updated_at": user.updated_at.isoformat() if user.updated_at else "",
            }
        )
    return rows


def rows_to_csv(rows: List[Dict[str, Any]]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=EXPORT_FIELDS, lineterminator="\n")
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue()


def export_filename(extension: str) -> str:
    return f"users_export_{get_current_utc_datetime().date().isoformat()}.{extension}"


async def record_export(
    db: AsyncSession, row_count: int, filename: str, initiated_by: Optional[uuid.UUID]
) -> BulkOperation:
    operation = BulkOperation(
        type=BulkOperationType.export_users,
        status=BulkOperationStatus.processing,
        total_items=row_count,
        processed_items=row_count,
        filename=filename,
        initiated_by=initiated_by,
    )
    operation.mark_finished(BulkOperationStatus.completed)
    db.add(operation)
    await db.commit()
    return operation
