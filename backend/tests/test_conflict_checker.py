from datetime import date
from types import SimpleNamespace

import pytest

from offerdesk.models import NegotiatedFare
from offerdesk.services.conflict_checker import fares_overlap, find_fare_conflicts, windows_overlap


def _fare(**overrides):
    values = dict(
        airline_code="AI",
        origin="DEL",
        destination="BOM",
        cabin_class="ECONOMY",
        booking_start_date=date(2026, 1, 1),
        booking_end_date=date(2026, 3, 31),
        travel_start_date=date(2026, 2, 1),
        travel_end_date=date(2026, 6, 30),
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def test_windows_touching_on_one_day_overlap():
    assert windows_overlap(date(2026, 1, 1), date(2026, 1, 31), date(2026, 1, 31), date(2026, 2, 28))


def test_disjoint_windows_do_not_overlap():
    assert not windows_overlap(date(2026, 1, 1), date(2026, 1, 30), date(2026, 1, 31), date(2026, 2, 28))


def test_fares_on_other_cabin_never_overlap():
    assert not fares_overlap(_fare(), _fare(cabin_class="BUSINESS"))


def test_fares_overlap_on_travel_window_alone():
    other = _fare(
        booking_start_date=date(2026, 4, 1),
        booking_end_date=date(2026, 4, 30),
        travel_start_date=date(2026, 6, 1),
        travel_end_date=date(2026, 7, 31),
    )
    assert fares_overlap(_fare(), other)


def test_fares_with_both_windows_apart_do_not_overlap():
    other = _fare(
        booking_start_date=date(2026, 4, 1),
        booking_end_date=date(2026, 4, 30),
        travel_start_date=date(2026, 7, 1),
        travel_end_date=date(2026, 7, 31),
    )
    assert not fares_overlap(_fare(), other)


@pytest.mark.anyio
async def test_find_fare_conflicts_ignores_inactive_and_excluded(db):
    common = dict(
        airline_code="AI", fare_code="F1", origin="DEL", destination="BOM",
        trip_type="ONE_WAY", cabin_class="ECONOMY", base_net_fare=5000, currency="INR",
        booking_start_date=date(2026, 1, 1), booking_end_date=date(2026, 3, 31),
        travel_start_date=date(2026, 2, 1), travel_end_date=date(2026, 6, 30),
        pos=[], eligible_agent_tiers=["BRONZE"],
    )
    active = NegotiatedFare(**common, status="ACTIVE")
    inactive = NegotiatedFare(**common, status="INACTIVE")
    db.add_all([active, inactive])
    await db.commit()

    conflicts = await find_fare_conflicts(db, _fare())
    assert [c.id for c in conflicts] == [active.id]

    assert await find_fare_conflicts(db, _fare(), exclude_id=active.id) == []
