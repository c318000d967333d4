import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Date, DateTime, Integer, Numeric, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from offerdesk.database import Base, JSONType, active_unique_index


class Bundle(Base):
    __tablename__ = "bundles"
    __table_args__ = (active_unique_index("uq_bundles_active_code", "bundle_code"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    bundle_code: Mapped[str] = mapped_column(String(50), nullable=False)
    bundle_name: Mapped[str] = mapped_column(String(255), nullable=False)
    components: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    bundle_type: Mapped[str] = mapped_column(String(20), nullable=False)  # AIR_AIR | AIR_NONAIR | NONAIR_NONAIR
    pos: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    agent_tier: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    cohort_codes: Mapped[list | None] = mapped_column(JSONType)
    channel: Mapped[str] = mapped_column(String(20), nullable=False)
    valid_from: Mapped[date] = mapped_column(Date, nullable=False)
    valid_to: Mapped[date] = mapped_column(Date, nullable=False)
    inventory_cap: Mapped[int | None] = mapped_column(Integer)
    status: Mapped[str] = mapped_column(String(20), default="ACTIVE")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class BundlePricingRule(Base):
    __tablename__ = "bundle_pricing_rules"
    __table_args__ = (active_unique_index("uq_bundle_pricing_rules_active_code", "rule_code"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    rule_code: Mapped[str] = mapped_column(String(50), nullable=False)
    bundle_code: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    discount_type: Mapped[str] = mapped_column(String(20), nullable=False)  # PERCENT | AMOUNT
    discount_value: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
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
