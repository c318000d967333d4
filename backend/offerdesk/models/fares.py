import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Date, DateTime, Index, Integer, Numeric, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from offerdesk.database import Base, JSONType


class NegotiatedFare(Base):
    __tablename__ = "negotiated_fares"
    __table_args__ = (
        Index("idx_negotiated_fares_scope", "airline_code", "origin", "destination", "cabin_class"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    airline_code: Mapped[str] = mapped_column(String(2), nullable=False)
    fare_code: Mapped[str] = mapped_column(String(50), nullable=False)
    origin: Mapped[str] = mapped_column(String(3), nullable=False)
    destination: Mapped[str] = mapped_column(String(3), nullable=False)
    trip_type: Mapped[str] = mapped_column(String(20), nullable=False)
    cabin_class: Mapped[str] = mapped_column(String(20), nullable=False)
    base_net_fare: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    booking_start_date: Mapped[date] = mapped_column(Date, nullable=False)
    booking_end_date: Mapped[date] = mapped_column(Date, nullable=False)
    travel_start_date: Mapped[date] = mapped_column(Date, nullable=False)
    travel_end_date: Mapped[date] = mapped_column(Date, nullable=False)
    pos: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    seat_allotment: Mapped[int | None] = mapped_column(Integer)
    min_stay: Mapped[int | None] = mapped_column(Integer)
    max_stay: Mapped[int | None] = mapped_column(Integer)
    blackout_dates: Mapped[list | None] = mapped_column(JSONType)
    eligible_agent_tiers: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    eligible_cohorts: Mapped[list | None] = mapped_column(JSONType)
    remarks: Mapped[str | None] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(20), default="ACTIVE")  # ACTIVE | INACTIVE | CONFLICTED
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
