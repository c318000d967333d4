import uuid
from datetime import date, datetime
from typing import Literal

from pydantic import Field

from offerdesk.schemas.common import CamelModel, EntityResponse, TierCode

CampaignStatus = Literal["DRAFT", "ACTIVE", "PAUSED", "COMPLETED", "CANCELLED"]
DeliveryChannel = Literal["EMAIL", "WHATSAPP", "PORTAL", "API"]


class CampaignTarget(CamelModel):
    cohorts: list[str] = []
    agent_tiers: list[TierCode] = []
    pos: list[str] = []
    channel: list[str] = []


class CampaignProducts(CamelModel):
    ancillaries: list[str] = []
    bundles: list[str] = []


class CampaignOffer(CamelModel):
    type: Literal["PERCENT", "AMOUNT", "SPECIAL_PRICE"]
    value: float | None = Field(default=None, ge=0)
    special_price: float | None = Field(default=None, ge=0)


class CampaignLifecycle(CamelModel):
    start_date: date
    end_date: date
    frequency: Literal["ONCE", "DAILY", "WEEKLY"] = "ONCE"
    max_sends: int | None = Field(default=None, ge=0)
    cap_per_pnr: int | None = Field(default=None, ge=0)


class CampaignComms(CamelModel):
    portal_banner: bool = False
    email_template_id: str | None = None
    whatsapp_template_id: str | None = None
    api_push: bool = False


class CampaignCreate(CamelModel):
    campaign_code: str = Field(min_length=1, max_length=50)
    campaign_name: str = Field(min_length=1, max_length=255)
    target: CampaignTarget = CampaignTarget()
    products: CampaignProducts = CampaignProducts()
    offer: CampaignOffer
    lifecycle: CampaignLifecycle
    comms: CampaignComms = CampaignComms()
    status: CampaignStatus = "DRAFT"


class CampaignUpdate(CamelModel):
    campaign_code: str | None = Field(default=None, min_length=1, max_length=50)
    campaign_name: str | None = None
    target: CampaignTarget | None = None
    products: CampaignProducts | None = None
    offer: CampaignOffer | None = None
    lifecycle: CampaignLifecycle | None = None
    comms: CampaignComms | None = None
    status: CampaignStatus | None = None


class CampaignResponse(EntityResponse):
    campaign_code: str
    campaign_name: str
    target: dict
    products: dict
    offer: dict
    lifecycle: dict
    comms: dict
    created_by: str | None


class MetricsUpsert(CamelModel):
    metric_date: date
    sent: int = Field(default=0, ge=0)
    delivered: int = Field(default=0, ge=0)
    opened: int = Field(default=0, ge=0)
    clicked: int = Field(default=0, ge=0)
    purchased: int = Field(default=0, ge=0)
    revenue: float = Field(default=0, ge=0)
    currency: str = Field(default="INR", min_length=3, max_length=3)


class DeliveryCreate(CamelModel):
    recipient: str = Field(min_length=1, max_length=255)
    channel: DeliveryChannel
    status: Literal["SENT", "DELIVERED", "FAILED"] = "SENT"


class DeliveryEvent(CamelModel):
    event: Literal["DELIVERED", "OPENED", "CLICKED", "PURCHASED", "FAILED"]
    purchase_amount: float | None = Field(default=None, ge=0)


class DeliveryResponse(CamelModel):
    id: uuid.UUID
    campaign_code: str
    recipient: str
    channel: str
    status: str
    sent_at: datetime | None
    opened_at: datetime | None
    clicked_at: datetime | None
    purchased_at: datetime | None
    purchase_amount: float | None
