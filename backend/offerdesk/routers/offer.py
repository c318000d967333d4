"""Offer router — compose priced offers and read back their traces."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from offerdesk.database import get_db
from offerdesk.errors import NotFoundError
from offerdesk.models.offer import OfferTrace
from offerdesk.schemas.offer import ComposeRequest, OfferTraceResponse
from offerdesk.services.offer_composer import offer_composer

router = APIRouter()


@router.post("/compose", response_model=OfferTraceResponse)
async def compose_offer(req: ComposeRequest, db: AsyncSession = Depends(get_db)):
    """Resolve fare, discounts, ancillaries and bundles into one traced offer."""
    params = req.model_dump(mode="json", by_alias=True, exclude_none=True)
    return await offer_composer.compose(db, params)


@router.get("/traces", response_model=list[OfferTraceResponse])
async def list_traces(
    agent_id: str | None = Query(None, alias="agentId"),
    fare_source: str | None = Query(None, alias="fareSource"),
    limit: int = Query(100, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
):
    query = select(OfferTrace)
    if agent_id:
        query = query.where(OfferTrace.agent_id == agent_id)
    if fare_source:
        query = query.where(OfferTrace.fare_source == fare_source)
    result = await db.execute(query.order_by(OfferTrace.created_at.desc()).limit(limit))
    return result.scalars().all()


@router.get("/traces/{id}", response_model=OfferTraceResponse)
async def get_trace(id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    trace = await db.get(OfferTrace, id)
    if not trace:
        raise NotFoundError("Offer trace not found")
    return trace


@router.get("/trace/{trace_id}", response_model=OfferTraceResponse)
async def get_trace_by_trace_id(trace_id: str, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(OfferTrace).where(OfferTrace.trace_id == trace_id))
    trace = result.scalar_one_or_none()
    if not trace:
        raise NotFoundError(f"Offer trace {trace_id} not found")
    return trace
