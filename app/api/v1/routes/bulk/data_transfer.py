# app/api/v1/routes/bulk/data_transfer.py

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging_config import get_logger
from app.core.response import ResponseModel, success_response
from app.core.security import require_roles
from app.db.deps import get_db
from app.models.user import User
from app.schemas.bulk import UserImportRequest
from app.services.bulk import user_transfer_service
from app.utils.datetime_utils import get_current_utc_datetime
from app.utils.enums import ExportFormat, Role

router = APIRouter(tags=["bulk"])

logger = get_logger("routes.data_transfer")

admin_only = require_roles(Role.admin)


@router.post("/import/users", response_model=ResponseModel)
async def import_users(
    payload: UserImportRequest,
    current_user: User = Depends(admin_only),
    db: AsyncSession = Depends(get_db),
):
    result = await user_transfer_service.import_users(
        db, payload.users, payload.options, initiated_by=current_user.id
    )
    return success_response(
        msg=f"Imported {result.processed} users, {result.failed} failed",
        data=result,
    )


@router.get("/export/users")
async def export_users(
    format: ExportFormat = Query(ExportFormat.json),
    include_inactive: bool = Query(False),
    current_user: User = Depends(admin_only),
    db: AsyncSession = Depends(get_db),
):
    rows = await user_transfer_service.collect_export_rows(db, include_inactive=include_inactive)
    filename = user_transfer_service.export_filename(format.value)
    await user_transfer_service.record_export(db, len(rows), filename, current_user.id)
    logger.info(f"Exported {len(rows)} users as {format.value}")

    if format == ExportFormat.csv:
        return Response(
            content=user_transfer_service.rows_to_csv(rows),
            media_type="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    return success_response(
        msg="Users exported",
        data={
            "users": rows,
            "meta": {
                "total": len(rows),
                "exported_at": get_current_utc_datetime().isoformat(),
                "include_inactive": include_inactive,
            },
        },
    )
