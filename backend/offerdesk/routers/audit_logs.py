"""Audit log router — query, export, and rollback."""

import uuid
from datetime import date, datetime, timezone
from typing import Literal

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from offerdesk.database import get_db
from offerdesk.dependencies import get_request_context
from offerdesk.schemas.audit import AuditLogResponse, RollbackRequest
from offerdesk.services.audit_log_service import AuditFilters, audit_log_service
from offerdesk.services.audit_service import AuditContext, snapshot
from offerdesk.services.export_service import export_service

router = APIRouter()


def get_filters(
    module: str | None = None,
    action: str | None = None,
    user: str | None = None,
    entity_id: str | None = Query(None, alias="entityId"),
    start_date: date | None = Query(None, alias="startDate"),
    end_date: date | None = Query(None, alias="endDate"),
    search: str | None = None,
    limit: int = Query(100, ge=1, le=1000),
) -> AuditFilters:
    return AuditFilters(
        module=module,
        action=action,
        user=user,
        entity_id=entity_id,
        start_date=start_date,
        end_date=end_date,
        search=search,
        limit=limit,
    )


@router.get("", response_model=list[AuditLogResponse])
async def list_audit_logs(
    filters: AuditFilters = Depends(get_filters),
    db: AsyncSession = Depends(get_db),
):
    return await audit_log_service.list_logs(db, filters)


@router.get("/entity/{entity_id}", response_model=list[AuditLogResponse])
async def get_entity_history(entity_id: str, db: AsyncSession = Depends(get_db)):
    return await audit_log_service.list_logs(db, AuditFilters(entity_id=entity_id, limit=1000))


@router.get("/export")
async def export_audit_logs(
    format: Literal["csv", "pdf"] = "csv",
    filters: AuditFilters = Depends(get_filters),
    db: AsyncSession = Depends(get_db),
):
    """Download the filtered audit trail as CSV or PDF."""
    logs = await audit_log_service.list_logs(db, filters)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")

    if format == "pdf":
        content = export_service.audit_pdf(logs, {k: v for k, v in vars(filters).items() if v})
        media_type = "application/pdf"
    else:
        content = export_service.audit_csv(logs)
        media_type = "text/csv"

    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="audit-logs-{stamp}.{format}"'},
    )


@router.get("/{log_id}", response_model=AuditLogResponse)
async def get_audit_log(log_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await audit_log_service.get(db, log_id)


@router.post("/{log_id}/rollback")
async def rollback_audit_log(
    log_id: uuid.UUID,
    req: RollbackRequest,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    entity = await audit_log_service.rollback(db, ctx, log_id, req.justification)
    return {"message": "Rollback applied", "data": snapshot(entity)}
