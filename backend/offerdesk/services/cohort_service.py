"""Cohort matcher — resolves which segments a search context belongs to."""

import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from offerdesk.models.cohorts import Cohort

logger = logging.getLogger(__name__)


def _as_date(value) -> date | None:
    if value is None or isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def _in_range(value, bounds: dict) -> bool:
    if value is None:
        return False
    low, high = bounds.get("min"), bounds.get("max")
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True


def cohort_matches(criteria: dict, context: dict, today: date | None = None) -> bool:
    """True when every criterion present on the cohort is met by the context.

    Context keys: pos, channel, device, season, departureDate, cabinClass,
    averageBookingValue, bookingFrequency. A criterion the context cannot
    answer does not match.
    """
    criteria = criteria or {}
    today = today or date.today()

    for key in ("pos", "channel", "device"):
        allowed = criteria.get(key)
        if allowed and context.get(key) not in allowed:
            return False

    season = criteria.get("season")
    if season and context.get("season") != season:
        return False

    window = criteria.get("bookingWindow")
    if window:
        departure = _as_date(context.get("departureDate"))
        days_out = (departure - today).days if departure else None
        if not _in_range(days_out, window):
            return False

    behavior = criteria.get("behavior") or {}
    cabins = behavior.get("preferredCabinClass")
    if cabins and context.get("cabinClass") not in cabins:
        return False

    value_range = behavior.get("averageBookingValue")
    if value_range and not _in_range(context.get("averageBookingValue"), value_range):
        return False

    frequency = behavior.get("bookingFrequency")
    if frequency and context.get("bookingFrequency") != frequency:
        return False

    return True


class CohortService:
    async def match(self, db: AsyncSession, context: dict) -> list[Cohort]:
        result = await db.execute(
            select(Cohort).where(Cohort.status == "ACTIVE").order_by(Cohort.cohort_code)
        )
        matched = [c for c in result.scalars().all() if cohort_matches(c.criteria, context)]
        logger.debug(f"Cohort match: {[c.cohort_code for c in matched]}")
        return matched


cohort_service = CohortService()
