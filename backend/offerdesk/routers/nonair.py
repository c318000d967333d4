"""Non-air router — supplier rates (with CSV upload) and markup rules."""

import uuid

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from offerdesk.database import get_db
from offerdesk.dependencies import get_request_context
from offerdesk.errors import BadRequestError
from offerdesk.schemas.common import StatusUpdate
from offerdesk.schemas.nonair import (
    MarkupSimulateRequest,
    NonAirRateCreate,
    NonAirRateResponse,
    NonAirRateUpdate,
    NonAirRuleCreate,
    NonAirRuleResponse,
    NonAirRuleUpdate,
)
from offerdesk.services.audit_service import AuditContext
from offerdesk.services.pricing import apply_markup
from offerdesk.services.rule_matcher import RuleContext
from offerdesk.services.stores import nonair_rule_store, rate_store
from offerdesk.services.upload_service import RATES, upload_service

router = APIRouter()


# ─── Rates ───

@router.get("/rates", response_model=list[NonAirRateResponse])
async def list_rates(
    supplier_code: str | None = Query(None, alias="supplierCode"),
    product_code: str | None = Query(None, alias="productCode"),
    status: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    context = RuleContext(
        status=status,
        filters={"supplier_code": supplier_code, "product_code": product_code},
    )
    return await rate_store.list(db, context)


@router.post("/rates/upload")
async def upload_rates(
    file: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    """Bulk insert supplier rates from a CSV file."""
    if file is None:
        raise BadRequestError("No file uploaded")
    content = await file.read()
    return await upload_service.upload(db, ctx, RATES, content)


@router.get("/rates/{rate_id}", response_model=NonAirRateResponse)
async def get_rate(rate_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await rate_store.get(db, rate_id)


@router.post("/rates", response_model=NonAirRateResponse, status_code=201)
async def create_rate(
    req: NonAirRateCreate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await rate_store.create(db, ctx, req.to_columns())


@router.put("/rates/{rate_id}", response_model=NonAirRateResponse)
async def update_rate(
    rate_id: uuid.UUID,
    req: NonAirRateUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await rate_store.update(db, ctx, rate_id, req.to_columns(exclude_unset=True))


@router.patch("/rates/{rate_id}/status", response_model=NonAirRateResponse)
async def update_rate_status(
    rate_id: uuid.UUID,
    req: StatusUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await rate_store.set_status(db, ctx, rate_id, req.status)


@router.delete("/rates/{rate_id}", status_code=204)
async def delete_rate(
    rate_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    await rate_store.delete(db, ctx, rate_id)


# ─── Markup rules ───

@router.get("/rules", response_model=list[NonAirRuleResponse])
async def list_markup_rules(
    product_code: str | None = Query(None, alias="productCode"),
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
        filters={"product_code": product_code},
    )
    return await nonair_rule_store.list(db, context)


@router.post("/rules/simulate")
async def simulate_markup(req: MarkupSimulateRequest, db: AsyncSession = Depends(get_db)):
    """Mark up a supplier rate with one rule. Nothing is written."""
    rule = await nonair_rule_store.get(db, req.rule_id)
    try:
        adj = apply_markup(req.base_rate, rule.adjustment_type, rule.adjustment_value)
    except ValueError as e:
        raise BadRequestError(str(e))

    return {
        "baseRate": adj.before,
        "markup": adj.delta,
        "adjustedRate": adj.after,
        "delta": adj.delta,
        "currency": req.currency,
        "ruleApplied": rule.rule_code,
    }


@router.get("/rules/{rule_id}", response_model=NonAirRuleResponse)
async def get_markup_rule(rule_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await nonair_rule_store.get(db, rule_id)


@router.post("/rules", response_model=NonAirRuleResponse, status_code=201)
async def create_markup_rule(
    req: NonAirRuleCreate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await nonair_rule_store.create(db, ctx, req.to_columns())


@router.put("/rules/{rule_id}", response_model=NonAirRuleResponse)
async def update_markup_rule(
    rule_id: uuid.UUID,
    req: NonAirRuleUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await nonair_rule_store.update(db, ctx, rule_id, req.to_columns(exclude_unset=True))


@router.patch("/rules/{rule_id}/status", response_model=NonAirRuleResponse)
async def update_markup_rule_status(
    rule_id: uuid.UUID,
    req: StatusUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await nonair_rule_store.set_status(db, ctx, rule_id, req.status)


@router.delete("/rules/{rule_id}", status_code=204)
async def delete_markup_rule(
    rule_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    await nonair_rule_store.delete(db, ctx, rule_id)
