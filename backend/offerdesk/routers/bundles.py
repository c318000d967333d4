"""Bundle router — bundle definitions and their pricing rules."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from offerdesk.database import get_db
from offerdesk.dependencies import get_request_context
from offerdesk.errors import BadRequestError
from offerdesk.schemas.bundles import (
    BundleCreate,
    BundlePricingRuleCreate,
    BundlePricingRuleResponse,
    BundlePricingRuleUpdate,
    BundleResponse,
    BundleSimulateRequest,
    BundleUpdate,
)
from offerdesk.schemas.common import StatusUpdate
from offerdesk.services.audit_service import AuditContext
from offerdesk.services.pricing import apply_discount
from offerdesk.services.rule_matcher import RuleContext
from offerdesk.services.stores import bundle_pricing_store, bundle_store

router = APIRouter()


# ─── Pricing rules (registered first so /pricing is not taken as a bundle id) ───

@router.get("/pricing", response_model=list[BundlePricingRuleResponse])
async def list_pricing_rules(
    bundle_code: str | None = Query(None, alias="bundleCode"),
    status: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    context = RuleContext(status=status, filters={"bundle_code": bundle_code})
    return await bundle_pricing_store.list(db, context)


@router.post("/pricing/simulate")
async def simulate_bundle_pricing(req: BundleSimulateRequest, db: AsyncSession = Depends(get_db)):
    """Discount a bundle base price with one pricing rule. Nothing is written."""
    rule = await bundle_pricing_store.get(db, req.rule_id)
    try:
        adj = apply_discount(req.base_price, rule.discount_type, rule.discount_value)
    except ValueError as e:
        raise BadRequestError(str(e))

    return {
        "bundleCode": rule.bundle_code,
        "basePrice": adj.before,
        "discount": adj.discount,
        "adjustedPrice": adj.after,
        "delta": adj.delta,
        "currency": req.currency,
        "ruleApplied": rule.rule_code,
    }


@router.get("/pricing/{rule_id}", response_model=BundlePricingRuleResponse)
async def get_pricing_rule(rule_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await bundle_pricing_store.get(db, rule_id)


@router.post("/pricing", response_model=BundlePricingRuleResponse, status_code=201)
async def create_pricing_rule(
    req: BundlePricingRuleCreate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await bundle_pricing_store.create(db, ctx, req.to_columns())


@router.put("/pricing/{rule_id}", response_model=BundlePricingRuleResponse)
async def update_pricing_rule(
    rule_id: uuid.UUID,
    req: BundlePricingRuleUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await bundle_pricing_store.update(db, ctx, rule_id, req.to_columns(exclude_unset=True))


@router.patch("/pricing/{rule_id}/status", response_model=BundlePricingRuleResponse)
async def update_pricing_rule_status(
    rule_id: uuid.UUID,
    req: StatusUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await bundle_pricing_store.set_status(db, ctx, rule_id, req.status)


@router.delete("/pricing/{rule_id}", status_code=204)
async def delete_pricing_rule(
    rule_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    await bundle_pricing_store.delete(db, ctx, rule_id)


# ─── Bundles ───

@router.get("", response_model=list[BundleResponse])
async def list_bundles(
    bundle_type: str | None = Query(None, alias="bundleType"),
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
        filters={"bundle_type": bundle_type},
    )
    return await bundle_store.list(db, context)


@router.get("/{bundle_id}", response_model=BundleResponse)
async def get_bundle(bundle_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await bundle_store.get(db, bundle_id)


@router.post("", response_model=BundleResponse, status_code=201)
async def create_bundle(
    req: BundleCreate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await bundle_store.create(db, ctx, req.to_columns())


@router.put("/{bundle_id}", response_model=BundleResponse)
async def update_bundle(
    bundle_id: uuid.UUID,
    req: BundleUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await bundle_store.update(db, ctx, bundle_id, req.to_columns(exclude_unset=True))


@router.patch("/{bundle_id}/status", response_model=BundleResponse)
async def update_bundle_status(
    bundle_id: uuid.UUID,
    req: StatusUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await bundle_store.set_status(db, ctx, bundle_id, req.status)


@router.delete("/{bundle_id}", status_code=204)
async def delete_bundle(
    bundle_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    await bundle_store.delete(db, ctx, bundle_id)
