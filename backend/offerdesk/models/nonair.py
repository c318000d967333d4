import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Date, DateTime, Index, Integer, Numeric, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from offerdesk.database import Base, JSONType, active_unique_index


class NonAirRate(Base):
    __tablename__ = "nonair_rates"
    __table_args__ = (Index("idx_nonair_rates_product", "supplier_code", "product_code"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    supplier_code: Mapped[str] = mapped_column(String(50), nullable=False)
    product_code: Mapped[str] = mapped_column(String(50), nullable=False)  # INS_STD, HOTEL_STD, TRANSFER_STD ...
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    net_rate: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    region: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    valid_from: Mapped[date] = mapped_column(Date, nullable=False)
    valid_to: Mapped[date] = mapped_column(Date, nullable=False)
    inventory: Mapped[int | None] = mapped_column(Integer)
    status: Mapped[str] = mapped_column(String(20), default="ACTIVE")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class NonAirMarkupRule(Base):
    __tablename__ = "nonair_markup_rules"
    __table_args__ = (active_unique_index("uq_nonair_markup_rules_active_code", "rule_code"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    rule_code: Mapped[str] = mapped_column(String(50), nullable=False)
    supplier_code: Mapped[str | None] = mapped_column(String(50))
    product_code: Mapped[str] = mapped_column(String(50), nullable=False)
    pos: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    agent_tier: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    cohort_codes: Mapped[list | None] = mapped_column(JSONType)
    channel: Mapped[str] = mapped_column(String(20), nullable=False)
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
