from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import Field

from offerdesk.schemas.common import (
    AdjustmentType,
    CamelModel,
    Channel,
    EntityResponse,
    SimulateRequest,
    TierCode,
    ValidityModel,
)

BundleStatus = Literal["ACTIVE", "INACTIVE"]
BundleType = Literal["AIR_AIR", "AIR_NONAIR", "NONAIR_NONAIR"]


class BundleComponent(CamelModel):
    type: Literal["AIR", "NONAIR"]
    code: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=1)


class BundleCreate(ValidityModel):
    bundle_code: str = Field(min_length=1, max_length=50)
    bundle_name: str = Field(min_length=1, max_length=255)
    components: list[BundleComponent] = Field(min_length=1)
    bundle_type: BundleType
    pos: list[str] = []
    agent_tier: list[TierCode] = []
    cohort_codes: list[str] | None = None
    channel: Channel
    valid_from: date
    valid_to: date
    inventory_cap: int | None = Field(default=None, ge=0)
    status: BundleStatus = "ACTIVE"


class BundleUpdate(ValidityModel):
    bundle_code: str | None = Field(default=None, min_length=1, max_length=50)
    bundle_name: str | None = None
    components: list[BundleComponent] | None = None
    bundle_type: BundleType | None = None
    pos: list[str] | None = None
    agent_tier: list[TierCode] | None = None
    cohort_codes: list[str] | None = None
    channel: Channel | None = None
    valid_from: date | None = None
    valid_to: date | None = None
    inventory_cap: int | None = None
    status: BundleStatus | None = None


class BundleResponse(EntityResponse):
    bundle_code: str
    bundle_name: str
    components: list[dict]
    bundle_type: str
    pos: list[str]
    agent_tier: list[str]
    cohort_codes: list[str] | None
    channel: str
    valid_from: date
    valid_to: date
    inventory_cap: int | None


class BundlePricingRuleCreate(ValidityModel):
    rule_code: str = Field(min_length=1, max_length=50)
    bundle_code: str = Field(min_length=1, max_length=50)
    discount_type: AdjustmentType
    discount_value: Decimal = Field(ge=0)
    priority: int = Field(default=1, ge=1)
    status: BundleStatus = "ACTIVE"
    valid_from: date
    valid_to: date


class BundlePricingRuleUpdate(ValidityModel):
    rule_code: str | None = Field(default=None, min_length=1, max_length=50)
    bundle_code: str | None = None
    discount_type: AdjustmentType | None = None
    discount_value: Decimal | None = Field(default=None, ge=0)
    priority: int | None = Field(default=None, ge=1)
    status: BundleStatus | None = None
    valid_from: date | None = None
    valid_to: date | None = None


class BundlePricingRuleResponse(EntityResponse):
    rule_code: str
    bundle_code: str
    discount_type: str
    discount_value: float
    priority: int
    valid_from: date
    valid_to: date


class BundleSimulateRequest(SimulateRequest):
    base_price: float = Field(ge=0)
