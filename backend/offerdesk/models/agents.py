"""Agent, tier definition, and tier assignment models."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Date, DateTime, Index, Numeric, String, Text, Uuid, func, text
from sqlalchemy.orm import Mapped, mapped_column

from offerdesk.database import Base, JSONType, active_unique_index


class Agent(Base):
    __tablename__ = "agents"
    __table_args__ = (active_unique_index("uq_agents_active_agent_id", "agent_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    agent_id: Mapped[str] = mapped_column(String(50), nullable=False)
    agency_name: Mapped[str] = mapped_column(String(255), nullable=False)
    iata_code: Mapped[str | None] = mapped_column(String(20))
    tier: Mapped[str] = mapped_column(String(20), nullable=False, default="BRONZE")
    allowed_channels: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    commission_profile_id: Mapped[str | None] = mapped_column(String(50))
    pos: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    status: Mapped[str] = mapped_column(String(20), default="ACTIVE")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class AgentBooking(Base):
    """Booking facts per agent, aggregated into tier KPIs."""

    __tablename__ = "agent_bookings"
    __table_args__ = (Index("idx_agent_bookings_agent", "agent_id", "booked_at"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    agent_id: Mapped[str] = mapped_column(String(50), nullable=False)
    booking_ref: Mapped[str] = mapped_column(String(50), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    booked_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    trace_id: Mapped[str | None] = mapped_column(String(20))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class AgentTier(Base):
    __tablename__ = "agent_tiers"
    __table_args__ = (active_unique_index("uq_agent_tiers_active_code", "tier_code"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tier_code: Mapped[str] = mapped_column(String(20), nullable=False)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)
    kpi_window: Mapped[str] = mapped_column(String(20), nullable=False)  # MONTHLY | QUARTERLY
    kpi_thresholds: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)
    default_pricing_policy: Mapped[dict | None] = mapped_column(JSONType)
    description: Mapped[str | None] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(20), default="ACTIVE")
    created_by: Mapped[str] = mapped_column(String(100), default="system")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class AgentTierAssignment(Base):
    __tablename__ = "agent_tier_assignments"
    __table_args__ = (
        # At most one ACTIVE assignment per agent
        Index(
            "uq_agent_tier_assignments_active_agent",
            "agent_id",
            unique=True,
            postgresql_where=text("status = 'ACTIVE'"),
            sqlite_where=text("status = 'ACTIVE'"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    agent_id: Mapped[str] = mapped_column(String(50), nullable=False)
    tier_code: Mapped[str] = mapped_column(String(20), nullable=False)
    assignment_type: Mapped[str] = mapped_column(String(20), nullable=False)  # AUTO | MANUAL_OVERRIDE
    effective_from: Mapped[date] = mapped_column(Date, nullable=False)
    effective_to: Mapped[date | None] = mapped_column(Date)
    kpi_snapshot: Mapped[dict | None] = mapped_column(JSONType)
    justification: Mapped[str | None] = mapped_column(Text)
    assigned_by: Mapped[str] = mapped_column(String(100), default="system")
    status: Mapped[str] = mapped_column(String(20), default="ACTIVE")  # ACTIVE | SUPERSEDED
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
