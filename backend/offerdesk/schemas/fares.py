from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import Field, field_validator, model_validator

from offerdesk.schemas.common import CabinClass, CamelModel, EntityResponse, TierCode, TripType

FareStatus = Literal["ACTIVE", "INACTIVE", "CONFLICTED"]


class NegotiatedFareBase(CamelModel):
    @field_validator("airline_code", "origin", "destination", "currency", mode="before", check_fields=False)
    @classmethod
    def _upper(cls, v):
        return v.strip().upper() if isinstance(v, str) else v

    @model_validator(mode="after")
    def _check_windows(self):
        pairs = (
            ("booking_start_date", "booking_end_date"),
            ("travel_start_date", "travel_end_date"),
        )
        for start_field, end_field in pairs:
            start, end = getattr(self, start_field), getattr(self, end_field)
            if start is not None and end is not None and end < start:
                raise ValueError(f"{end_field} must be on or after {start_field}")
        return self


class NegotiatedFareCreate(NegotiatedFareBase):
    airline_code: str = Field(min_length=2, max_length=2)
    fare_code: str = Field(min_length=1, max_length=50)
    origin: str = Field(min_length=3, max_length=3)
    destination: str = Field(min_length=3, max_length=3)
    trip_type: TripType
    cabin_class: CabinClass
    base_net_fare: Decimal = Field(gt=0)
    currency: str = Field(min_length=3, max_length=3)
    booking_start_date: date
    booking_end_date: date
    travel_start_date: date
    travel_end_date: date
    pos: list[str] = []
    seat_allotment: int | None = Field(default=None, ge=0)
    min_stay: int | None = Field(default=None, ge=0)
    max_stay: int | None = Field(default=None, ge=0)
    blackout_dates: list[date] | None = None
    eligible_agent_tiers: list[TierCode] = ["BRONZE"]
    eligible_cohorts: list[str] | None = None
    remarks: str | None = None
    status: FareStatus = "ACTIVE"


class NegotiatedFareUpdate(NegotiatedFareBase):
    airline_code: str | None = Field(default=None, min_length=2, max_length=2)
    fare_code: str | None = None
    origin: str | None = Field(default=None, min_length=3, max_length=3)
    destination: str | None = Field(default=None, min_length=3, max_length=3)
    trip_type: TripType | None = None
    cabin_class: CabinClass | None = None
    base_net_fare: Decimal | None = Field(default=None, gt=0)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    booking_start_date: date | None = None
    booking_end_date: date | None = None
    travel_start_date: date | None = None
    travel_end_date: date | None = None
    pos: list[str] | None = None
    seat_allotment: int | None = None
    min_stay: int | None = None
    max_stay: int | None = None
    blackout_dates: list[date] | None = None
    eligible_agent_tiers: list[TierCode] | None = None
    eligible_cohorts: list[str] | None = None
    remarks: str | None = None
    status: FareStatus | None = None


class NegotiatedFareResponse(EntityResponse):
    airline_code: str
    fare_code: str
    origin: str
    destination: str
    trip_type: str
    cabin_class: str
    base_net_fare: float
    currency: str
    booking_start_date: date
    booking_end_date: date
    travel_start_date: date
    travel_end_date: date
    pos: list[str]
    seat_allotment: int | None
    min_stay: int | None
    max_stay: int | None
    blackout_dates: list[date] | None
    eligible_agent_tiers: list[str]
    eligible_cohorts: list[str] | None
    remarks: str | None
