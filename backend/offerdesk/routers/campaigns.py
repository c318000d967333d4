"""Campaign router — campaign definitions, daily metrics, and delivery tracking."""

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from offerdesk.database import get_db
from offerdesk.dependencies import get_request_context
from offerdesk.schemas.campaigns import (
    CampaignCreate,
    CampaignResponse,
    CampaignUpdate,
    DeliveryCreate,
    DeliveryEvent,
    DeliveryResponse,
    MetricsUpsert,
)
from offerdesk.schemas.common import StatusUpdate
from offerdesk.services.audit_service import AuditContext
from offerdesk.services.campaign_service import campaign_service
from offerdesk.services.rule_matcher import RuleContext
from offerdesk.services.stores import campaign_store

router = APIRouter()


@router.get("", response_model=list[CampaignResponse])
async def list_campaigns(status: str | None = None, db: AsyncSession = Depends(get_db)):
    return await campaign_store.list(db, RuleContext(status=status))


@router.post("/deliveries/{delivery_id}/events", response_model=DeliveryResponse)
async def record_delivery_event(
    delivery_id: uuid.UUID,
    req: DeliveryEvent,
    db: AsyncSession = Depends(get_db),
):
    return await campaign_service.record_event(db, delivery_id, req.event, req.purchase_amount)


@router.get("/{campaign_code}/metrics")
async def get_campaign_metrics(
    campaign_code: str,
    start_date: date | None = Query(None, alias="startDate"),
    end_date: date | None = Query(None, alias="endDate"),
    db: AsyncSession = Depends(get_db),
):
    return await campaign_service.get_metrics(db, campaign_code, start_date, end_date)


@router.post("/{campaign_code}/metrics")
async def upsert_campaign_metrics(
    campaign_code: str,
    req: MetricsUpsert,
    db: AsyncSession = Depends(get_db),
):
    """Insert or replace one day's counters."""
    metrics = await campaign_service.upsert_metrics(db, campaign_code, req.model_dump())
    return {
        "campaignCode": metrics.campaign_code,
        "metricDate": metrics.metric_date.isoformat(),
        "sent": metrics.sent,
        "delivered": metrics.delivered,
        "opened": metrics.opened,
        "clicked": metrics.clicked,
        "purchased": metrics.purchased,
        "revenue": float(metrics.revenue),
        "currency": metrics.currency,
    }


@router.get("/{campaign_code}/deliveries", response_model=list[DeliveryResponse])
async def list_campaign_deliveries(campaign_code: str, db: AsyncSession = Depends(get_db)):
    return await campaign_service.list_deliveries(db, campaign_code)


@router.post("/{campaign_code}/deliveries", response_model=DeliveryResponse, status_code=201)
async def record_campaign_delivery(
    campaign_code: str,
    req: DeliveryCreate,
    db: AsyncSession = Depends(get_db),
):
    return await campaign_service.record_delivery(db, campaign_code, req.model_dump())


@router.get("/{campaign_id}", response_model=CampaignResponse)
async def get_campaign(campaign_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await campaign_store.get(db, campaign_id)


@router.post("", response_model=CampaignResponse, status_code=201)
async def create_campaign(
    req: CampaignCreate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await campaign_store.create(db, ctx, {**req.to_columns(), "created_by": ctx.user})


@router.put("/{campaign_id}", response_model=CampaignResponse)
async def update_campaign(
    campaign_id: uuid.UUID,
    req: CampaignUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await campaign_store.update(db, ctx, campaign_id, req.to_columns(exclude_unset=True))


@router.patch("/{campaign_id}/status", response_model=CampaignResponse)
async def update_campaign_status(
    campaign_id: uuid.UUID,
    req: StatusUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await campaign_store.set_status(db, ctx, campaign_id, req.status)


@router.delete("/{campaign_id}", status_code=204)
async def delete_campaign(
    campaign_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    await campaign_store.delete(db, ctx, campaign_id)
