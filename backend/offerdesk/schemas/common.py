import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel
from pydantic_core import to_jsonable_python

AdjustmentType = Literal["PERCENT", "AMOUNT"]
Channel = Literal["API", "PORTAL", "MOBILE"]
CabinClass = Literal["ECONOMY", "PREMIUM_ECONOMY", "BUSINESS", "FIRST"]
TripType = Literal["ONE_WAY", "ROUND_TRIP", "MULTI_CITY"]
TierCode = Literal["PLATINUM", "GOLD", "SILVER", "BRONZE"]


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python. Either spelling is accepted on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_columns(self, exclude_unset: bool = False) -> dict:
        """ORM column values. Nested lists and objects become camelCase JSON."""
        names = self.model_fields_set if exclude_unset else type(self).model_fields
        columns = {}
        for name in names:
            value = getattr(self, name)
            if isinstance(value, (BaseModel, list, dict)):
                value = to_jsonable_python(value, by_alias=True, exclude_none=True)
            columns[name] = value
        return columns


class ValidityModel(CamelModel):
    """Rejects a validity window that ends before it starts."""

    @model_validator(mode="after")
    def _check_validity(self):
        start = getattr(self, "valid_from", None)
        end = getattr(self, "valid_to", None)
        if start is not None and end is not None and end < start:
            raise ValueError("validTo must be on or after validFrom")
        return self


class EntityResponse(CamelModel):
    id: uuid.UUID
    status: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class StatusUpdate(CamelModel):
    status: str


class SimulateRequest(CamelModel):
    currency: str = Field(default="INR", min_length=3, max_length=3)
    rule_id: uuid.UUID
