import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from pydantic import Field

from offerdesk.schemas.common import CamelModel, Channel, EntityResponse, TierCode

AgentStatus = Literal["ACTIVE", "INACTIVE"]
KpiWindow = Literal["MONTHLY", "QUARTERLY"]


class AgentCreate(CamelModel):
    agent_id: str = Field(min_length=1, max_length=50)
    agency_name: str = Field(min_length=1, max_length=255)
    iata_code: str | None = None
    tier: TierCode = "BRONZE"
    allowed_channels: list[Channel] = []
    commission_profile_id: str | None = None
    pos: list[str] = []
    status: AgentStatus = "ACTIVE"


class AgentUpdate(CamelModel):
    agency_name: str | None = None
    iata_code: str | None = None
    tier: TierCode | None = None
    allowed_channels: list[Channel] | None = None
    commission_profile_id: str | None = None
    pos: list[str] | None = None
    status: AgentStatus | None = None


class AgentResponse(EntityResponse):
    agent_id: str
    agency_name: str
    iata_code: str | None
    tier: str
    allowed_channels: list[str]
    commission_profile_id: str | None
    pos: list[str]


class AgentBookingCreate(CamelModel):
    booking_ref: str = Field(min_length=1, max_length=50)
    amount: Decimal = Field(ge=0)
    currency: str = Field(default="INR", min_length=3, max_length=3)
    booked_at: datetime | None = None
    trace_id: str | None = None


class AgentBookingResponse(CamelModel):
    id: uuid.UUID
    agent_id: str
    booking_ref: str
    amount: float
    currency: str
    booked_at: datetime
    trace_id: str | None


# ─── Tiers ───

class KpiThresholds(CamelModel):
    total_booking_value_min: float | None = Field(default=None, ge=0)
    total_bookings_min: int | None = Field(default=None, ge=0)
    avg_bookings_per_month_min: float | None = Field(default=None, ge=0)
    avg_searches_per_month_min: float | None = Field(default=None, ge=0)
    conversion_pct_min: float | None = Field(default=None, ge=0, le=100)


class AgentTierCreate(CamelModel):
    tier_code: TierCode
    display_name: str = Field(min_length=1, max_length=100)
    kpi_window: KpiWindow = "QUARTERLY"
    kpi_thresholds: KpiThresholds = KpiThresholds()
    default_pricing_policy: dict | None = None
    description: str | None = None
    status: AgentStatus = "ACTIVE"


class AgentTierUpdate(CamelModel):
    display_name: str | None = None
    kpi_window: KpiWindow | None = None
    kpi_thresholds: KpiThresholds | None = None
    default_pricing_policy: dict | None = None
    description: str | None = None
    status: AgentStatus | None = None


class AgentTierResponse(EntityResponse):
    tier_code: str
    display_name: str
    kpi_window: str
    kpi_thresholds: dict
    default_pricing_policy: dict | None
    description: str | None
    created_by: str | None


class TierAssignmentResponse(EntityResponse):
    agent_id: str
    tier_code: str
    assignment_type: str
    effective_from: date
    effective_to: date | None
    kpi_snapshot: dict | None
    justification: str | None
    assigned_by: str | None


class EvaluateRequest(CamelModel):
    agent_id: str = Field(min_length=1)
    kpi_window: KpiWindow = "QUARTERLY"


class AutoAssignRequest(CamelModel):
    agent_ids: list[str] = Field(min_length=1)
    kpi_window: KpiWindow = "QUARTERLY"
    effective_from: date | None = None


class OverrideRequest(CamelModel):
    agent_id: str = Field(min_length=1)
    tier_code: TierCode
    effective_from: date
    justification: str = Field(min_length=10)
    assigned_by: str | None = None
