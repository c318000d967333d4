import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from offerdesk.database import get_db
from offerdesk.dependencies import get_request_context
from offerdesk.schemas.agents import (
    AgentBookingCreate,
    AgentBookingResponse,
    AgentCreate,
    AgentResponse,
    AgentUpdate,
)
from offerdesk.schemas.common import StatusUpdate
from offerdesk.services.audit_service import AuditContext
from offerdesk.services.rule_matcher import RuleContext
from offerdesk.services.stores import agent_store
from offerdesk.services.tier_service import tier_service

router = APIRouter()


@router.get("", response_model=list[AgentResponse])
async def list_agents(
    tier: str | None = None,
    status: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    return await agent_store.list(db, RuleContext(status=status, filters={"tier": tier}))


@router.get("/{agent_id}/bookings", response_model=list[AgentBookingResponse])
async def list_agent_bookings(agent_id: str, db: AsyncSession = Depends(get_db)):
    await agent_store.get_by_code(db, agent_id, active_only=False)
    return await tier_service.list_bookings(db, agent_id)


@router.post("/{agent_id}/bookings", response_model=AgentBookingResponse, status_code=201)
async def create_agent_booking(
    agent_id: str,
    req: AgentBookingCreate,
    db: AsyncSession = Depends(get_db),
):
    """Record a completed booking; it counts towards the agent's tier KPIs."""
    await agent_store.get_by_code(db, agent_id, active_only=False)
    return await tier_service.record_booking(db, agent_id, req.model_dump())


@router.get("/{agent_id}", response_model=AgentResponse)
async def get_agent(agent_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await agent_store.get(db, agent_id)


@router.post("", response_model=AgentResponse, status_code=201)
async def create_agent(
    req: AgentCreate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await agent_store.create(db, ctx, req.to_columns())


@router.put("/{agent_id}", response_model=AgentResponse)
async def update_agent(
    agent_id: uuid.UUID,
    req: AgentUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await agent_store.update(db, ctx, agent_id, req.to_columns(exclude_unset=True))


@router.patch("/{agent_id}/status", response_model=AgentResponse)
async def update_agent_status(
    agent_id: uuid.UUID,
    req: StatusUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await agent_store.set_status(db, ctx, agent_id, req.status)


@router.delete("/{agent_id}", status_code=204)
async def delete_agent(
    agent_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    await agent_store.delete(db, ctx, agent_id)
