import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Numeric, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from offerdesk.database import Base, JSONType


class OfferTrace(Base):
    """One offer-composition run. Written once, never updated."""

    __tablename__ = "offer_traces"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    trace_id: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    agent_id: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    search_params: Mapped[dict] = mapped_column(JSONType, nullable=False)
    agent_tier: Mapped[str] = mapped_column(String(20), nullable=False)
    cohorts: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    fare_source: Mapped[str] = mapped_column(String(20), nullable=False)  # NEGOTIATED | API
    base_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    adjustments: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    ancillaries: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    bundles: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    final_offer_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    commission: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    audit_trace_id: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="COMPOSED")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
