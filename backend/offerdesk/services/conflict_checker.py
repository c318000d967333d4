"""Conflict detection for fares, non-air rates and code-unique rules."""

import logging
import uuid
import zlib
from datetime import date

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from offerdesk.models.fares import NegotiatedFare
from offerdesk.models.nonair import NonAirRate

logger = logging.getLogger(__name__)


def windows_overlap(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    """Inclusive overlap of [start_a, end_a] and [start_b, end_b]."""
    return start_a <= end_b and end_a >= start_b


def fares_overlap(a, b) -> bool:
    """Same airline/route/cabin with an overlapping booking or travel window."""
    same_scope = (
        a.airline_code == b.airline_code
        and a.origin == b.origin
        and a.destination == b.destination
        and a.cabin_class == b.cabin_class
    )
    return same_scope and (
        windows_overlap(a.booking_start_date, a.booking_end_date, b.booking_start_date, b.booking_end_date)
        or windows_overlap(a.travel_start_date, a.travel_end_date, b.travel_start_date, b.travel_end_date)
    )


def rates_overlap(a, b) -> bool:
    """Same supplier/product with overlapping validity."""
    return (
        a.supplier_code == b.supplier_code
        and a.product_code == b.product_code
        and windows_overlap(a.valid_from, a.valid_to, b.valid_from, b.valid_to)
    )


async def scope_lock(db: AsyncSession, *parts: str) -> None:
    """Serialize check-then-insert on one scope key for the rest of the transaction.

    PostgreSQL only; SQLite already serializes writers.
    """
    if db.get_bind().dialect.name != "postgresql":
        return
    key = zlib.crc32("|".join(str(p) for p in parts).encode("utf-8"))
    await db.execute(text("SELECT pg_advisory_xact_lock(:key)"), {"key": key})


async def find_fare_conflicts(
    db: AsyncSession, fare: NegotiatedFare, exclude_id: uuid.UUID | None = None
) -> list[NegotiatedFare]:
    """ACTIVE fares on the same airline/route/cabin whose booking or travel window overlaps."""
    await scope_lock(db, "fare", fare.airline_code, fare.origin, fare.destination, fare.cabin_class)

    query = select(NegotiatedFare).where(
        NegotiatedFare.airline_code == fare.airline_code,
        NegotiatedFare.origin == fare.origin,
        NegotiatedFare.destination == fare.destination,
        NegotiatedFare.cabin_class == fare.cabin_class,
        NegotiatedFare.status == "ACTIVE",
    )
    if exclude_id is not None:
        query = query.where(NegotiatedFare.id != exclude_id)

    result = await db.execute(query.order_by(NegotiatedFare.created_at))
    conflicts = [existing for existing in result.scalars().all() if fares_overlap(fare, existing)]
    if conflicts:
        logger.warning(
            f"Fare {fare.airline_code} {fare.origin}-{fare.destination} {fare.cabin_class} "
            f"overlaps {len(conflicts)} active fare(s)"
        )
    return conflicts


async def find_rate_conflicts(
    db: AsyncSession, rate: NonAirRate, exclude_id: uuid.UUID | None = None
) -> list[NonAirRate]:
    """ACTIVE rates for the same supplier/product whose validity overlaps."""
    await scope_lock(db, "rate", rate.supplier_code, rate.product_code)

    query = select(NonAirRate).where(
        NonAirRate.supplier_code == rate.supplier_code,
        NonAirRate.product_code == rate.product_code,
        NonAirRate.status == "ACTIVE",
    )
    if exclude_id is not None:
        query = query.where(NonAirRate.id != exclude_id)

    result = await db.execute(query.order_by(NonAirRate.created_at))
    conflicts = [existing for existing in result.scalars().all() if rates_overlap(rate, existing)]
    if conflicts:
        logger.warning(
            f"Rate {rate.supplier_code}/{rate.product_code} overlaps {len(conflicts)} active rate(s)"
        )
    return conflicts


async def find_code_conflicts(
    db: AsyncSession, model, code_field: str, code: str, exclude_id: uuid.UUID | None = None
) -> list:
    """ACTIVE rows of ``model`` already holding ``code``."""
    column = getattr(model, code_field)
    query = select(model).where(column == code, model.status == "ACTIVE")
    if exclude_id is not None:
        query = query.where(model.id != exclude_id)

    result = await db.execute(query)
    conflicts = list(result.scalars().all())
    if conflicts:
        logger.warning(f"{model.__name__} code {code} already active")
    return conflicts
