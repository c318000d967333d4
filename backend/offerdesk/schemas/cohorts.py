from datetime import date
from typing import Literal

from pydantic import Field

from offerdesk.schemas.common import CabinClass, CamelModel, EntityResponse

CohortStatus = Literal["ACTIVE", "INACTIVE"]
CohortType = Literal["MARKET", "CHANNEL", "SEASON", "BEHAVIOR"]


class Range(CamelModel):
    min: float | None = None
    max: float | None = None


class BehaviorCriteria(CamelModel):
    booking_frequency: str | None = None
    average_booking_value: Range | None = None
    preferred_cabin_class: list[CabinClass] | None = None


class CohortCriteria(CamelModel):
    pos: list[str] | None = None
    channel: list[str] | None = None
    device: list[str] | None = None
    season: str | None = None
    booking_window: Range | None = None
    behavior: BehaviorCriteria | None = None


class CohortCreate(CamelModel):
    cohort_code: str = Field(min_length=1, max_length=50)
    cohort_name: str = Field(min_length=1, max_length=255)
    type: CohortType
    criteria: CohortCriteria = CohortCriteria()
    description: str | None = None
    status: CohortStatus = "ACTIVE"


class CohortUpdate(CamelModel):
    cohort_code: str | None = Field(default=None, min_length=1, max_length=50)
    cohort_name: str | None = None
    type: CohortType | None = None
    criteria: CohortCriteria | None = None
    description: str | None = None
    status: CohortStatus | None = None


class CohortResponse(EntityResponse):
    cohort_code: str
    cohort_name: str
    type: str
    criteria: dict
    description: str | None
    created_by: str | None


class CohortSummary(CamelModel):
    cohort_code: str
    cohort_name: str
    type: str


class SearchContext(CamelModel):
    pos: str | None = None
    channel: str | None = None
    device: str | None = None
    season: str | None = None
    departure_date: date | None = None
    cabin_class: str | None = None
    average_booking_value: float | None = None
    booking_frequency: str | None = None


class CohortSimulateRequest(CamelModel):
    search_context: SearchContext


class CohortSimulateResponse(CamelModel):
    matched_cohorts: list[CohortSummary]
    count: int
