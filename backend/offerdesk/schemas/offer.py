import uuid
from datetime import date, datetime

from pydantic import Field

from offerdesk.schemas.common import CabinClass, CamelModel, Channel, TripType


class TravelDates(CamelModel):
    departure: date | None = None
    return_: date | None = Field(default=None, alias="return")


class Pax(CamelModel):
    adults: int = Field(default=1, ge=0)
    children: int = Field(default=0, ge=0)
    infants: int = Field(default=0, ge=0)


class ComposeRequest(CamelModel):
    origin: str = Field(min_length=3, max_length=3)
    destination: str = Field(min_length=3, max_length=3)
    agent_id: str = Field(min_length=1)
    trip_type: TripType | None = None
    pax: Pax | None = None
    cabin_class: CabinClass | None = None
    dates: TravelDates | None = None
    channel: Channel | None = None
    pos: str | None = None
    device: str | None = None


class OfferTraceResponse(CamelModel):
    id: uuid.UUID
    trace_id: str
    agent_id: str
    search_params: dict
    agent_tier: str
    cohorts: list[str]
    fare_source: str
    base_price: float
    adjustments: list[dict]
    ancillaries: list[dict]
    bundles: list[dict]
    final_offer_price: float
    commission: float
    audit_trace_id: str
    status: str
    created_at: datetime | None = None
