"""Offer rule router — approval workflow and rule simulation."""

import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from offerdesk.database import get_db
from offerdesk.dependencies import get_request_context
from offerdesk.errors import BadRequestError
from offerdesk.schemas.rules import (
    OfferRuleCreate,
    OfferRuleResponse,
    OfferRuleSimulateRequest,
    OfferRuleStatusUpdate,
    OfferRuleUpdate,
)
from offerdesk.services.audit_service import AuditContext
from offerdesk.services.pricing import apply_discount, apply_markup, round_money
from offerdesk.services.rule_matcher import RuleContext
from offerdesk.services.stores import offer_rule_store

router = APIRouter()

PRICE_ACTIONS = {"DISCOUNT": apply_discount, "MARKUP": apply_markup}


@router.get("", response_model=list[OfferRuleResponse])
async def list_offer_rules(
    rule_type: str | None = Query(None, alias="ruleType"),
    status: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    context = RuleContext(status=status, filters={"rule_type": rule_type})
    return await offer_rule_store.list(db, context)


@router.post("/simulate")
async def simulate_offer_rule(req: OfferRuleSimulateRequest, db: AsyncSession = Depends(get_db)):
    """Run a rule's price actions over a base price, in order. Nothing is written."""
    rule = await offer_rule_store.get(db, req.rule_id)

    price = req.base_price
    steps = []
    for action in rule.actions:
        apply = PRICE_ACTIONS.get(action.get("type"))
        if apply is None:
            continue
        try:
            adj = apply(price, action.get("valueType") or "AMOUNT", action.get("value"))
        except ValueError as e:
            raise BadRequestError(str(e))
        steps.append({
            "type": action["type"],
            "valueType": action.get("valueType"),
            "value": action.get("value"),
            "before": adj.before,
            "after": adj.after,
        })
        price = adj.after

    return {
        "ruleId": str(rule.id),
        "ruleApplied": rule.rule_code,
        "basePrice": round_money(req.base_price),
        "adjustedPrice": round_money(price),
        "delta": round_money(price - req.base_price),
        "currency": req.currency,
        "steps": steps,
    }


@router.get("/{rule_id}", response_model=OfferRuleResponse)
async def get_offer_rule(rule_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await offer_rule_store.get(db, rule_id)


@router.post("", response_model=OfferRuleResponse, status_code=201)
async def create_offer_rule(
    req: OfferRuleCreate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await offer_rule_store.create(db, ctx, {**req.to_columns(), "created_by": ctx.user})


@router.put("/{rule_id}", response_model=OfferRuleResponse)
async def update_offer_rule(
    rule_id: uuid.UUID,
    req: OfferRuleUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await offer_rule_store.update(db, ctx, rule_id, req.to_columns(exclude_unset=True))


@router.patch("/{rule_id}/status", response_model=OfferRuleResponse)
async def update_offer_rule_status(
    rule_id: uuid.UUID,
    req: OfferRuleStatusUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    """Move a rule through DRAFT -> PENDING_APPROVAL -> ACTIVE. Activation stamps the approver."""
    extra = {}
    if req.status == "ACTIVE":
        extra = {
            "approved_by": req.approver or ctx.user,
            "approved_at": datetime.now(timezone.utc),
        }
    return await offer_rule_store.set_status(db, ctx, rule_id, req.status, **extra)


@router.delete("/{rule_id}", status_code=204)
async def delete_offer_rule(
    rule_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    await offer_rule_store.delete(db, ctx, rule_id)
