"""Dynamic discount rule router."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from offerdesk.database import get_db
from offerdesk.dependencies import get_request_context
from offerdesk.errors import BadRequestError
from offerdesk.schemas.common import StatusUpdate
from offerdesk.schemas.rules import (
    DiscountSimulateRequest,
    DynamicDiscountRuleCreate,
    DynamicDiscountRuleResponse,
    DynamicDiscountRuleUpdate,
)
from offerdesk.services.audit_service import AuditContext
from offerdesk.services.pricing import apply_markup
from offerdesk.services.rule_matcher import RuleContext
from offerdesk.services.stores import discount_store

router = APIRouter()


@router.get("", response_model=list[DynamicDiscountRuleResponse])
async def list_discount_rules(
    origin: str | None = None,
    destination: str | None = None,
    cabin_class: str | None = Query(None, alias="cabinClass"),
    trip_type: str | None = Query(None, alias="tripType"),
    channel: str | None = None,
    status: str | None = None,
    agent_tier: str | None = Query(None, alias="agentTier"),
    pos: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    context = RuleContext(
        origin=origin,
        destination=destination,
        cabin_class=cabin_class,
        trip_type=trip_type,
        channel=channel,
        status=status,
        agent_tier=agent_tier,
        pos=pos,
    )
    return await discount_store.list(db, context)


@router.post("/simulate")
async def simulate_discount(req: DiscountSimulateRequest, db: AsyncSession = Depends(get_db)):
    """Apply one rule to a base fare without writing anything.

    Fare-context pricing: PERCENT scales the fare up, AMOUNT is added.
    """
    rule = await discount_store.get(db, req.rule_id)
    try:
        adj = apply_markup(req.base_fare, rule.adjustment_type, rule.adjustment_value)
    except ValueError as e:
        raise BadRequestError(str(e))

    return {
        "baseFare": adj.before,
        "currency": req.currency,
        "adjustment": {"type": rule.adjustment_type, "value": float(rule.adjustment_value)},
        "adjustedFare": adj.after,
        "delta": adj.delta,
        "ruleApplied": rule.rule_code,
    }


@router.get("/{rule_id}", response_model=DynamicDiscountRuleResponse)
async def get_discount_rule(rule_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await discount_store.get(db, rule_id)


@router.post("", response_model=DynamicDiscountRuleResponse, status_code=201)
async def create_discount_rule(
    req: DynamicDiscountRuleCreate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await discount_store.create(db, ctx, req.to_columns())


@router.put("/{rule_id}", response_model=DynamicDiscountRuleResponse)
async def update_discount_rule(
    rule_id: uuid.UUID,
    req: DynamicDiscountRuleUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await discount_store.update(db, ctx, rule_id, req.to_columns(exclude_unset=True))


@router.patch("/{rule_id}/status", response_model=DynamicDiscountRuleResponse)
async def update_discount_rule_status(
    rule_id: uuid.UUID,
    req: StatusUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await discount_store.set_status(db, ctx, rule_id, req.status)


@router.delete("/{rule_id}", status_code=204)
async def delete_discount_rule(
    rule_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    await discount_store.delete(db, ctx, rule_id)
