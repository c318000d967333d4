"""Request/response models for discount, ancillary, offer and channel rules."""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from pydantic import Field, model_validator

from offerdesk.schemas.common import (
    AdjustmentType,
    CabinClass,
    CamelModel,
    Channel,
    EntityResponse,
    SimulateRequest,
    TierCode,
    TripType,
    ValidityModel,
)

RuleStatus = Literal["ACTIVE", "INACTIVE"]


# ─── Dynamic discount rules ───

class DynamicDiscountRuleCreate(ValidityModel):
    rule_code: str = Field(min_length=1, max_length=50)
    fare_source: str = "API_GDS_NDC"
    origin: str = Field(min_length=3, max_length=3)
    destination: str = Field(min_length=3, max_length=3)
    cabin_class: CabinClass
    trip_type: TripType
    pos: list[str] = []
    market_region: str | None = None
    agent_tier: list[TierCode] = []
    cohort_codes: list[str] | None = None
    channel: Channel
    booking_window_min: int | None = Field(default=None, ge=0)
    booking_window_max: int | None = Field(default=None, ge=0)
    travel_window_min: int | None = Field(default=None, ge=0)
    travel_window_max: int | None = Field(default=None, ge=0)
    season_code: str | None = None
    adjustment_type: AdjustmentType
    adjustment_value: Decimal = Field(ge=0)
    stackable: bool = False
    priority: int = Field(default=1, ge=1)
    status: RuleStatus = "ACTIVE"
    valid_from: date
    valid_to: date


class DynamicDiscountRuleUpdate(ValidityModel):
    rule_code: str | None = Field(default=None, min_length=1, max_length=50)
    fare_source: str | None = None
    origin: str | None = Field(default=None, min_length=3, max_length=3)
    destination: str | None = Field(default=None, min_length=3, max_length=3)
    cabin_class: CabinClass | None = None
    trip_type: TripType | None = None
    pos: list[str] | None = None
    market_region: str | None = None
    agent_tier: list[TierCode] | None = None
    cohort_codes: list[str] | None = None
    channel: Channel | None = None
    booking_window_min: int | None = None
    booking_window_max: int | None = None
    travel_window_min: int | None = None
    travel_window_max: int | None = None
    season_code: str | None = None
    adjustment_type: AdjustmentType | None = None
    adjustment_value: Decimal | None = Field(default=None, ge=0)
    stackable: bool | None = None
    priority: int | None = Field(default=None, ge=1)
    status: RuleStatus | None = None
    valid_from: date | None = None
    valid_to: date | None = None


class DynamicDiscountRuleResponse(EntityResponse):
    rule_code: str
    fare_source: str
    origin: str
    destination: str
    cabin_class: str
    trip_type: str
    pos: list[str]
    market_region: str | None
    agent_tier: list[str]
    cohort_codes: list[str] | None
    channel: str
    booking_window_min: int | None
    booking_window_max: int | None
    travel_window_min: int | None
    travel_window_max: int | None
    season_code: str | None
    adjustment_type: str
    adjustment_value: float
    stackable: bool
    priority: int
    valid_from: date
    valid_to: date


class DiscountSimulateRequest(SimulateRequest):
    base_fare: float = Field(ge=0)


# ─── Air ancillary rules ───

AncillaryAdjustmentType = Literal["PERCENT", "AMOUNT", "FREE"]


class AirAncillaryRuleCreate(ValidityModel):
    rule_code: str = Field(min_length=1, max_length=50)
    ancillary_code: str = Field(min_length=1, max_length=50)
    airline_code: str | None = Field(default=None, min_length=2, max_length=2)
    origin: str | None = Field(default=None, min_length=3, max_length=3)
    destination: str | None = Field(default=None, min_length=3, max_length=3)
    pos: list[str] = []
    channel: Channel
    agent_tier: list[TierCode] = []
    cohort_codes: list[str] | None = None
    condition_behavior: Literal["SKIPPED_ANCILLARY", "POST_BOOKING"] | None = None
    adjustment_type: AncillaryAdjustmentType
    adjustment_value: Decimal | None = Field(default=None, ge=0)
    priority: int = Field(default=1, ge=1)
    status: RuleStatus = "ACTIVE"
    valid_from: date
    valid_to: date

    @model_validator(mode="after")
    def _value_required(self):
        if self.adjustment_type != "FREE" and self.adjustment_value is None:
            raise ValueError("adjustmentValue is required unless adjustmentType is FREE")
        return self


class AirAncillaryRuleUpdate(ValidityModel):
    rule_code: str | None = Field(default=None, min_length=1, max_length=50)
    ancillary_code: str | None = None
    airline_code: str | None = None
    origin: str | None = None
    destination: str | None = None
    pos: list[str] | None = None
    channel: Channel | None = None
    agent_tier: list[TierCode] | None = None
    cohort_codes: list[str] | None = None
    condition_behavior: Literal["SKIPPED_ANCILLARY", "POST_BOOKING"] | None = None
    adjustment_type: AncillaryAdjustmentType | None = None
    adjustment_value: Decimal | None = Field(default=None, ge=0)
    priority: int | None = Field(default=None, ge=1)
    status: RuleStatus | None = None
    valid_from: date | None = None
    valid_to: date | None = None


class AirAncillaryRuleResponse(EntityResponse):
    rule_code: str
    ancillary_code: str
    airline_code: str | None
    origin: str | None
    destination: str | None
    pos: list[str]
    channel: str
    agent_tier: list[str]
    cohort_codes: list[str] | None
    condition_behavior: str | None
    adjustment_type: str
    adjustment_value: float | None
    priority: int
    valid_from: date
    valid_to: date


class AncillarySimulateRequest(SimulateRequest):
    base_price: float = Field(ge=0)


# ─── Offer rules ───

OfferRuleStatus = Literal["DRAFT", "PENDING_APPROVAL", "ACTIVE", "INACTIVE"]


class OfferRuleConditions(CamelModel):
    origin: str | None = None
    destination: str | None = None
    pos: list[str] | None = None
    agent_tier: list[TierCode] | None = None
    cohort_codes: list[str] | None = None
    channel: list[Channel] | None = None
    cabin_class: list[CabinClass] | None = None
    trip_type: list[TripType] | None = None
    season_code: str | None = None


class OfferRuleAction(CamelModel):
    type: Literal["DISCOUNT", "MARKUP", "ADD_ANCILLARY", "ACTIVATE_BUNDLE", "SUPPRESS_PRODUCT", "ADD_BANNER"]
    value_type: Literal["PERCENT", "AMOUNT"] | None = None
    value: float | None = None
    target: str | None = None


class OfferRuleCreate(ValidityModel):
    rule_code: str = Field(min_length=1, max_length=50)
    rule_name: str = Field(min_length=1, max_length=255)
    rule_type: Literal["FARE_DISCOUNT", "ANCILLARY_DISCOUNT", "BUNDLE_OFFER", "MARKUP"]
    conditions: OfferRuleConditions = OfferRuleConditions()
    actions: list[OfferRuleAction] = Field(min_length=1)
    priority: int = Field(default=1, ge=1)
    status: OfferRuleStatus = "DRAFT"
    valid_from: date
    valid_to: date
    justification: str | None = None


class OfferRuleUpdate(ValidityModel):
    rule_code: str | None = Field(default=None, min_length=1, max_length=50)
    rule_name: str | None = None
    rule_type: Literal["FARE_DISCOUNT", "ANCILLARY_DISCOUNT", "BUNDLE_OFFER", "MARKUP"] | None = None
    conditions: OfferRuleConditions | None = None
    actions: list[OfferRuleAction] | None = None
    priority: int | None = Field(default=None, ge=1)
    status: OfferRuleStatus | None = None
    valid_from: date | None = None
    valid_to: date | None = None
    justification: str | None = None


class OfferRuleStatusUpdate(CamelModel):
    status: str
    approver: str | None = None


class OfferRuleResponse(EntityResponse):
    rule_code: str
    rule_name: str
    rule_type: str
    conditions: dict
    actions: list[dict]
    priority: int
    valid_from: date
    valid_to: date
    justification: str | None
    approved_by: str | None
    approved_at: datetime | None
    created_by: str | None


class OfferRuleSimulateRequest(SimulateRequest):
    base_price: float = Field(ge=0)


# ─── Channel price overrides ───

class ChannelOverrideCreate(ValidityModel):
    override_code: str = Field(min_length=1, max_length=50)
    channel: Channel
    pos: list[str] = []
    product_scope: Literal["FARE", "ANCILLARY", "BUNDLE"]
    adjustment_type: AdjustmentType
    adjustment_value: Decimal
    priority: int = Field(default=1, ge=1)
    status: RuleStatus = "ACTIVE"
    valid_from: date
    valid_to: date


class ChannelOverrideUpdate(ValidityModel):
    override_code: str | None = Field(default=None, min_length=1, max_length=50)
    channel: Channel | None = None
    pos: list[str] | None = None
    product_scope: Literal["FARE", "ANCILLARY", "BUNDLE"] | None = None
    adjustment_type: AdjustmentType | None = None
    adjustment_value: Decimal | None = None
    priority: int | None = Field(default=None, ge=1)
    status: RuleStatus | None = None
    valid_from: date | None = None
    valid_to: date | None = None


class ChannelOverrideResponse(EntityResponse):
    override_code: str
    channel: str
    pos: list[str]
    product_scope: str
    adjustment_type: str
    adjustment_value: float
    priority: int
    valid_from: date
    valid_to: date


class ChannelOverrideSimulateRequest(SimulateRequest):
    base_value: float = Field(ge=0)
