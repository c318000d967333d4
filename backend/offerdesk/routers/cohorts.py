"""Cohort router — definitions and search-context matching."""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from offerdesk.database import get_db
from offerdesk.dependencies import get_request_context
from offerdesk.schemas.cohorts import (
    CohortCreate,
    CohortResponse,
    CohortSimulateRequest,
    CohortSimulateResponse,
    CohortSummary,
    CohortUpdate,
)
from offerdesk.schemas.common import StatusUpdate
from offerdesk.services.audit_service import AuditContext
from offerdesk.services.cohort_service import cohort_service
from offerdesk.services.rule_matcher import RuleContext
from offerdesk.services.stores import cohort_store

router = APIRouter()


@router.get("", response_model=list[CohortResponse])
async def list_cohorts(
    type: str | None = None,
    status: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    return await cohort_store.list(db, RuleContext(status=status, filters={"type": type}))


@router.get("/list", response_model=list[CohortSummary])
async def list_cohort_summaries(db: AsyncSession = Depends(get_db)):
    """Active cohorts as code/name pairs for pickers."""
    return await cohort_store.list(db, RuleContext())


@router.post("/simulate", response_model=CohortSimulateResponse)
async def simulate_cohorts(req: CohortSimulateRequest, db: AsyncSession = Depends(get_db)):
    context = req.search_context.model_dump(mode="json", by_alias=True, exclude_none=True)
    matched = await cohort_service.match(db, context)
    return {"matched_cohorts": matched, "count": len(matched)}


@router.get("/{cohort_id}", response_model=CohortResponse)
async def get_cohort(cohort_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await cohort_store.get(db, cohort_id)


@router.post("", response_model=CohortResponse, status_code=201)
async def create_cohort(
    req: CohortCreate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await cohort_store.create(db, ctx, {**req.to_columns(), "created_by": ctx.user})


@router.put("/{cohort_id}", response_model=CohortResponse)
async def update_cohort(
    cohort_id: uuid.UUID,
    req: CohortUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await cohort_store.update(db, ctx, cohort_id, req.to_columns(exclude_unset=True))


@router.patch("/{cohort_id}/status", response_model=CohortResponse)
async def update_cohort_status(
    cohort_id: uuid.UUID,
    req: StatusUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await cohort_store.set_status(db, ctx, cohort_id, req.status)


@router.delete("/{cohort_id}", status_code=204)
async def delete_cohort(
    cohort_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    await cohort_store.delete(db, ctx, cohort_id)
