from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import Field

from offerdesk.schemas.common import (
    AdjustmentType,
    Channel,
    EntityResponse,
    SimulateRequest,
    TierCode,
    ValidityModel,
)

NonAirStatus = Literal["ACTIVE", "INACTIVE"]


class NonAirRateCreate(ValidityModel):
    supplier_code: str = Field(min_length=1, max_length=50)
    product_code: str = Field(min_length=1, max_length=50)
    product_name: str = Field(min_length=1, max_length=255)
    net_rate: Decimal = Field(gt=0)
    currency: str = Field(min_length=3, max_length=3)
    region: list[str] = []
    valid_from: date
    valid_to: date
    inventory: int | None = Field(default=None, ge=0)
    status: NonAirStatus = "ACTIVE"


class NonAirRateUpdate(ValidityModel):
    supplier_code: str | None = None
    product_code: str | None = None
    product_name: str | None = None
    net_rate: Decimal | None = Field(default=None, gt=0)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    region: list[str] | None = None
    valid_from: date | None = None
    valid_to: date | None = None
    inventory: int | None = Field(default=None, ge=0)
    status: NonAirStatus | None = None


class NonAirRateResponse(EntityResponse):
    supplier_code: str
    product_code: str
    product_name: str
    net_rate: float
    currency: str
    region: list[str]
    valid_from: date
    valid_to: date
    inventory: int | None


class NonAirRuleCreate(ValidityModel):
    rule_code: str = Field(min_length=1, max_length=50)
    supplier_code: str | None = None
    product_code: str = Field(min_length=1, max_length=50)
    pos: list[str] = []
    agent_tier: list[TierCode] = []
    cohort_codes: list[str] | None = None
    channel: Channel
    adjustment_type: AdjustmentType
    adjustment_value: Decimal = Field(ge=0)
    priority: int = Field(default=1, ge=1)
    status: NonAirStatus = "ACTIVE"
    valid_from: date
    valid_to: date


class NonAirRuleUpdate(ValidityModel):
    rule_code: str | None = Field(default=None, min_length=1, max_length=50)
    supplier_code: str | None = None
    product_code: str | None = None
    pos: list[str] | None = None
    agent_tier: list[TierCode] | None = None
    cohort_codes: list[str] | None = None
    channel: Channel | None = None
    adjustment_type: AdjustmentType | None = None
    adjustment_value: Decimal | None = Field(default=None, ge=0)
    priority: int | None = Field(default=None, ge=1)
    status: NonAirStatus | None = None
    valid_from: date | None = None
    valid_to: date | None = None


class NonAirRuleResponse(EntityResponse):
    rule_code: str
    supplier_code: str | None
    product_code: str
    pos: list[str]
    agent_tier: list[str]
    cohort_codes: list[str] | None
    channel: str
    adjustment_type: str
    adjustment_value: float
    priority: int
    valid_from: date
    valid_to: date


class MarkupSimulateRequest(SimulateRequest):
    base_rate: float = Field(ge=0)
