import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from offerdesk.database import get_db
from offerdesk.dependencies import get_request_context
from offerdesk.errors import BadRequestError
from offerdesk.schemas.common import StatusUpdate
from offerdesk.schemas.rules import (
    AirAncillaryRuleCreate,
    AirAncillaryRuleResponse,
    AirAncillaryRuleUpdate,
    AncillarySimulateRequest,
)
from offerdesk.services.audit_service import AuditContext
from offerdesk.services.pricing import apply_discount
from offerdesk.services.rule_matcher import RuleContext
from offerdesk.services.stores import ancillary_store

router = APIRouter()


@router.get("", response_model=list[AirAncillaryRuleResponse])
async def list_ancillary_rules(
    ancillary_code: str | None = Query(None, alias="ancillaryCode"),
    channel: str | None = None,
    status: str | None = None,
    agent_tier: str | None = Query(None, alias="agentTier"),
    pos: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    context = RuleContext(
        channel=channel,
        status=status,
        agent_tier=agent_tier,
        pos=pos,
        filters={"ancillary_code": ancillary_code},
    )
    return await ancillary_store.list(db, context)


@router.post("/simulate")
async def simulate_ancillary(req: AncillarySimulateRequest, db: AsyncSession = Depends(get_db)):
    """Discount an ancillary base price with one rule. Nothing is written."""
    rule = await ancillary_store.get(db, req.rule_id)
    try:
        adj = apply_discount(req.base_price, rule.adjustment_type, rule.adjustment_value)
    except ValueError as e:
        raise BadRequestError(str(e))

    return {
        "ancillaryCode": rule.ancillary_code,
        "basePrice": adj.before,
        "discount": adj.discount,
        "adjustedPrice": adj.after,
        "delta": adj.delta,
        "currency": req.currency,
        "ruleApplied": rule.rule_code,
    }


@router.get("/{rule_id}", response_model=AirAncillaryRuleResponse)
async def get_ancillary_rule(rule_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await ancillary_store.get(db, rule_id)


@router.post("", response_model=AirAncillaryRuleResponse, status_code=201)
async def create_ancillary_rule(
    req: AirAncillaryRuleCreate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await ancillary_store.create(db, ctx, req.to_columns())


@router.put("/{rule_id}", response_model=AirAncillaryRuleResponse)
async def update_ancillary_rule(
    rule_id: uuid.UUID,
    req: AirAncillaryRuleUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await ancillary_store.update(db, ctx, rule_id, req.to_columns(exclude_unset=True))


@router.patch("/{rule_id}/status", response_model=AirAncillaryRuleResponse)
async def update_ancillary_rule_status(
    rule_id: uuid.UUID,
    req: StatusUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await ancillary_store.set_status(db, ctx, rule_id, req.status)


@router.delete("/{rule_id}", status_code=204)
async def delete_ancillary_rule(
    rule_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    await ancillary_store.delete(db, ctx, rule_id)
