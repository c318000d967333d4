"""Agent tier router — tier definitions, KPI evaluation, and assignments."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from offerdesk.database import get_db
from offerdesk.dependencies import get_request_context
from offerdesk.models.agents import AgentTierAssignment
from offerdesk.schemas.agents import (
    AgentTierCreate,
    AgentTierResponse,
    AgentTierUpdate,
    AutoAssignRequest,
    EvaluateRequest,
    OverrideRequest,
    TierAssignmentResponse,
)
from offerdesk.schemas.common import StatusUpdate
from offerdesk.services.audit_service import AuditContext
from offerdesk.services.rule_matcher import RuleContext
from offerdesk.services.stores import tier_store
from offerdesk.services.tier_service import tier_service

router = APIRouter()


@router.get("", response_model=list[AgentTierResponse])
async def list_tiers(status: str | None = None, db: AsyncSession = Depends(get_db)):
    return await tier_store.list(db, RuleContext(status=status))


@router.get("/assignments", response_model=list[TierAssignmentResponse])
async def list_assignments(
    agent_id: str | None = Query(None, alias="agentId"),
    status: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    query = select(AgentTierAssignment)
    if agent_id:
        query = query.where(AgentTierAssignment.agent_id == agent_id)
    if status:
        query = query.where(AgentTierAssignment.status == status)
    result = await db.execute(query.order_by(AgentTierAssignment.created_at.desc()))
    return result.scalars().all()


@router.post("/evaluate")
async def evaluate_agent(req: EvaluateRequest, db: AsyncSession = Depends(get_db)):
    """KPIs for the window and the tier they qualify for. Nothing is written."""
    return await tier_service.evaluate(db, req.agent_id, req.kpi_window)


@router.post("/assign")
async def auto_assign(
    req: AutoAssignRequest,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    outcome = await tier_service.auto_assign(
        db, ctx, req.agent_ids, req.kpi_window, req.effective_from
    )
    return {
        **outcome,
        "assignments": [
            TierAssignmentResponse.model_validate(a).model_dump(mode="json", by_alias=True)
            for a in outcome["assignments"]
        ],
    }


@router.post("/override", response_model=TierAssignmentResponse, status_code=201)
async def override_tier(
    req: OverrideRequest,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await tier_service.override(
        db, ctx, req.agent_id, req.tier_code, req.effective_from,
        req.justification, req.assigned_by or ctx.user,
    )


@router.get("/{tier_id}", response_model=AgentTierResponse)
async def get_tier(tier_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await tier_store.get(db, tier_id)


@router.post("", response_model=AgentTierResponse, status_code=201)
async def create_tier(
    req: AgentTierCreate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await tier_store.create(db, ctx, {**req.to_columns(), "created_by": ctx.user})


@router.put("/{tier_id}", response_model=AgentTierResponse)
async def update_tier(
    tier_id: uuid.UUID,
    req: AgentTierUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await tier_store.update(db, ctx, tier_id, req.to_columns(exclude_unset=True))


@router.patch("/{tier_id}/status", response_model=AgentTierResponse)
async def update_tier_status(
    tier_id: uuid.UUID,
    req: StatusUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await tier_store.set_status(db, ctx, tier_id, req.status)


@router.delete("/{tier_id}", status_code=204)
async def delete_tier(
    tier_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    await tier_store.delete(db, ctx, tier_id)
