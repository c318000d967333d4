"""Campaign metrics and delivery tracking."""

import logging
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from offerdesk.errors import BadRequestError, NotFoundError
from offerdesk.models.campaigns import Campaign, CampaignDelivery, CampaignMetrics
from offerdesk.services.pricing import round_money

logger = logging.getLogger(__name__)

METRIC_FIELDS = ("sent", "delivered", "opened", "clicked", "purchased")

# Delivery status progression; an event never moves a delivery backwards
DELIVERY_FLOW = ("SENT", "DELIVERED", "OPENED", "CLICKED", "PURCHASED")


def _rate(numerator: float, denominator: float) -> float:
    return round_money(numerator / denominator * 100) if denominator else 0.0


class CampaignService:
    async def _require_campaign(self, db: AsyncSession, campaign_code: str) -> Campaign:
        result = await db.execute(
            select(Campaign).where(Campaign.campaign_code == campaign_code).limit(1)
        )
        campaign = result.scalar_one_or_none()
        if not campaign:
            raise NotFoundError(f"Campaign {campaign_code} not found")
        return campaign

    async def get_metrics(
        self,
        db: AsyncSession,
        campaign_code: str,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> dict:
        await self._require_campaign(db, campaign_code)

        query = select(CampaignMetrics).where(CampaignMetrics.campaign_code == campaign_code)
        if start_date:
            query = query.where(CampaignMetrics.metric_date >= start_date)
        if end_date:
            query = query.where(CampaignMetrics.metric_date <= end_date)
        result = await db.execute(query.order_by(CampaignMetrics.metric_date))
        rows = result.scalars().all()

        daily = [
            {
                "metricDate": m.metric_date.isoformat(),
                **{f: getattr(m, f) or 0 for f in METRIC_FIELDS},
                "revenue": float(m.revenue or 0),
                "currency": m.currency,
            }
            for m in rows
        ]
        totals = {f: sum(d[f] for d in daily) for f in METRIC_FIELDS}
        totals["revenue"] = round_money(sum(d["revenue"] for d in daily))
        totals["openRate"] = _rate(totals["opened"], totals["delivered"])
        totals["clickRate"] = _rate(totals["clicked"], totals["opened"])
        totals["conversionRate"] = _rate(totals["purchased"], totals["clicked"])

        return {"campaignCode": campaign_code, "daily": daily, "totals": totals}

    async def upsert_metrics(self, db: AsyncSession, campaign_code: str, data: dict) -> CampaignMetrics:
        await self._require_campaign(db, campaign_code)

        result = await db.execute(
            select(CampaignMetrics).where(
                CampaignMetrics.campaign_code == campaign_code,
                CampaignMetrics.metric_date == data["metric_date"],
            )
        )
        metrics = result.scalar_one_or_none()
        if metrics is None:
            metrics = CampaignMetrics(campaign_code=campaign_code, metric_date=data["metric_date"])
            db.add(metrics)

        for f in METRIC_FIELDS:
            setattr(metrics, f, data.get(f, 0))
        metrics.revenue = Decimal(str(data.get("revenue", 0)))
        metrics.currency = data.get("currency", "INR")

        await db.commit()
        await db.refresh(metrics)
        return metrics

    async def list_deliveries(self, db: AsyncSession, campaign_code: str) -> list[CampaignDelivery]:
        await self._require_campaign(db, campaign_code)
        result = await db.execute(
            select(CampaignDelivery)
            .where(CampaignDelivery.campaign_code == campaign_code)
            .order_by(CampaignDelivery.sent_at.desc())
        )
        return list(result.scalars().all())

    async def record_delivery(self, db: AsyncSession, campaign_code: str, data: dict) -> CampaignDelivery:
        await self._require_campaign(db, campaign_code)
        delivery = CampaignDelivery(campaign_code=campaign_code, **data)
        db.add(delivery)
        await db.commit()
        await db.refresh(delivery)
        return delivery

    async def record_event(
        self,
        db: AsyncSession,
        delivery_id: uuid.UUID,
        event: str,
        purchase_amount: float | None = None,
    ) -> CampaignDelivery:
        delivery = await db.get(CampaignDelivery, delivery_id)
        if not delivery:
            raise NotFoundError("Delivery not found")

        now = datetime.now(timezone.utc)
        if event == "FAILED":
            if delivery.status != "SENT":
                raise BadRequestError(f"Cannot fail a delivery in status {delivery.status}")
            delivery.status = "FAILED"
        else:
            if delivery.status == "FAILED":
                raise BadRequestError("Delivery already failed")
            if event == "OPENED":
                delivery.opened_at = delivery.opened_at or now
            elif event == "CLICKED":
                delivery.clicked_at = delivery.clicked_at or now
            elif event == "PURCHASED":
                delivery.purchased_at = delivery.purchased_at or now
                if purchase_amount is not None:
                    delivery.purchase_amount = Decimal(str(purchase_amount))
            if DELIVERY_FLOW.index(event) > DELIVERY_FLOW.index(delivery.status):
                delivery.status = event

        await db.commit()
        await db.refresh(delivery)
        logger.info(f"Delivery {delivery_id} {event} -> {delivery.status}")
        return delivery


campaign_service = CampaignService()
