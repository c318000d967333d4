"""Pricing rule models — fare discounts, air ancillaries, offer rules, channel overrides."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Boolean, Date, DateTime, Integer, Numeric, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from offerdesk.database import Base, JSONType, active_unique_index


class DynamicDiscountRule(Base):
    __tablename__ = "dynamic_discount_rules"
    __table_args__ = (active_unique_index("uq_dynamic_discount_rules_active_code", "rule_code"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    rule_code: Mapped[str] = mapped_column(String(50), nullable=False)
    fare_source: Mapped[str] = mapped_column(String(20), nullable=False, default="API_GDS_NDC")
    origin: Mapped[str] = mapped_column(String(3), nullable=False)
    destination: Mapped[str] = mapped_column(String(3), nullable=False)
    cabin_class: Mapped[str] = mapped_column(String(20), nullable=False)
    trip_type: Mapped[str] = mapped_column(String(20), nullable=False)
    pos: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    market_region: Mapped[str | None] = mapped_column(String(50))
    agent_tier: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    cohort_codes: Mapped[list | None] = mapped_column(JSONType)
    channel: Mapped[str] = mapped_column(String(20), nullable=False)
    booking_window_min: Mapped[int | None] = mapped_column(Integer)
    booking_window_max: Mapped[int | None] = mapped_column(Integer)
    travel_window_min: Mapped[int | None] = mapped_column(Integer)
    travel_window_max: Mapped[int | None] = mapped_column(Integer)
    season_code: Mapped[str | None] = mapped_column(String(50))
    adjustment_type: Mapped[str] = mapped_column(String(20), nullable=False)  # PERCENT | AMOUNT
    adjustment_value: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    stackable: Mapped[bool] = mapped_column(Boolean, default=False)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    status: Mapped[str] = mapped_column(String(20), default="ACTIVE")
    valid_from: Mapped[date] = mapped_column(Date, nullable=False)
    valid_to: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class AirAncillaryRule(Base):
    __tablename__ = "air_ancillary_rules"
    __table_args__ = (active_unique_index("uq_air_ancillary_rules_active_code", "rule_code"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    rule_code: Mapped[str] = mapped_column(String(50), nullable=False)
    ancillary_code: Mapped[str] = mapped_column(String(50), nullable=False)  # BAG20, SEAT_STD, MEAL_STD ...
    airline_code: Mapped[str | None] = mapped_column(String(2))
    origin: Mapped[str | None] = mapped_column(String(3))
    destination: Mapped[str | None] = mapped_column(String(3))
    pos: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    channel: Mapped[str] = mapped_column(String(20), nullable=False)
    agent_tier: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    cohort_codes: Mapped[list | None] = mapped_column(JSONType)
    condition_behavior: Mapped[str | None] = mapped_column(String(30))  # SKIPPED_ANCILLARY | POST_BOOKING
    adjustment_type: Mapped[str] = mapped_column(String(20), nullable=False)  # PERCENT | AMOUNT | FREE
    adjustment_value: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    status: Mapped[str] = mapped_column(String(20), default="ACTIVE")
    valid_from: Mapped[date] = mapped_column(Date, nullable=False)
    valid_to: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class OfferRule(Base):
    __tablename__ = "offer_rules"
    __table_args__ = (active_unique_index("uq_offer_rules_active_code", "rule_code"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    rule_code: Mapped[str] = mapped_column(String(50), nullable=False)
    rule_name: Mapped[str] = mapped_column(String(255), nullable=False)
    rule_type: Mapped[str] = mapped_column(String(30), nullable=False)
    conditions: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)
    actions: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    status: Mapped[str] = mapped_column(String(20), default="DRAFT")
    valid_from: Mapped[date] = mapped_column(Date, nullable=False)
    valid_to: Mapped[date] = mapped_column(Date, nullable=False)
    justification: Mapped[str | None] = mapped_column(Text)
    approved_by: Mapped[str | None] = mapped_column(String(100))
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_by: Mapped[str] = mapped_column(String(100), default="system")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class ChannelPriceOverride(Base):
    __tablename__ = "channel_price_overrides"
    __table_args__ = (active_unique_index("uq_channel_price_overrides_active_code", "override_code"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    override_code: Mapped[str] = mapped_column(String(50), nullable=False)
    channel: Mapped[str] = mapped_column(String(20), nullable=False)
    pos: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    product_scope: Mapped[str] = mapped_column(String(20), nullable=False)  # FARE | ANCILLARY | BUNDLE
    adjustment_type: Mapped[str] = mapped_column(String(20), nullable=False)
    adjustment_value: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    status: Mapped[str] = mapped_column(String(20), default="ACTIVE")
    valid_from: Mapped[date] = mapped_column(Date, nullable=False)
    valid_to: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
