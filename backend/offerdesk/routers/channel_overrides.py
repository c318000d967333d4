import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from offerdesk.database import get_db
from offerdesk.dependencies import get_request_context
from offerdesk.errors import BadRequestError
from offerdesk.schemas.common import StatusUpdate
from offerdesk.schemas.rules import (
    ChannelOverrideCreate,
    ChannelOverrideResponse,
    ChannelOverrideSimulateRequest,
    ChannelOverrideUpdate,
)
from offerdesk.services.audit_service import AuditContext
from offerdesk.services.pricing import apply_markup
from offerdesk.services.rule_matcher import RuleContext
from offerdesk.services.stores import channel_override_store

router = APIRouter()


@router.get("", response_model=list[ChannelOverrideResponse])
async def list_channel_overrides(
    channel: str | None = None,
    product_scope: str | None = Query(None, alias="productScope"),
    status: str | None = None,
    pos: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    context = RuleContext(
        channel=channel,
        status=status,
        pos=pos,
        filters={"product_scope": product_scope},
    )
    return await channel_override_store.list(db, context)


@router.post("/simulate")
async def simulate_channel_override(
    req: ChannelOverrideSimulateRequest, db: AsyncSession = Depends(get_db)
):
    rule = await channel_override_store.get(db, req.rule_id)
    try:
        adj = apply_markup(req.base_value, rule.adjustment_type, rule.adjustment_value)
    except ValueError as e:
        raise BadRequestError(str(e))

    return {
        "baseValue": adj.before,
        "adjustedValue": adj.after,
        "delta": adj.delta,
        "currency": req.currency,
        "ruleApplied": rule.override_code,
    }


@router.get("/{override_id}", response_model=ChannelOverrideResponse)
async def get_channel_override(override_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await channel_override_store.get(db, override_id)


@router.post("", response_model=ChannelOverrideResponse, status_code=201)
async def create_channel_override(
    req: ChannelOverrideCreate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await channel_override_store.create(db, ctx, req.to_columns())


@router.put("/{override_id}", response_model=ChannelOverrideResponse)
async def update_channel_override(
    override_id: uuid.UUID,
    req: ChannelOverrideUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await channel_override_store.update(
        db, ctx, override_id, req.to_columns(exclude_unset=True)
    )


@router.patch("/{override_id}/status", response_model=ChannelOverrideResponse)
async def update_channel_override_status(
    override_id: uuid.UUID,
    req: StatusUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await channel_override_store.set_status(db, ctx, override_id, req.status)


@router.delete("/{override_id}", status_code=204)
async def delete_channel_override(
    override_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    await channel_override_store.delete(db, ctx, override_id)
