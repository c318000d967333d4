"""Seed script for OfferDesk development database."""

import asyncio
import logging

from sqlalchemy import select

from offerdesk.database import async_session_factory
from offerdesk.models import Agent, AgentTier, Cohort

logger = logging.getLogger(__name__)

# ── Agent tiers ────────────────────────────────────────────────────────────────

TIERS = [
    {
        "tier_code": "PLATINUM",
        "display_name": "Platinum",
        "kpi_window": "QUARTERLY",
        "kpi_thresholds": {
            "totalBookingValueMin": 5000000,
            "totalBookingsMin": 300,
            "conversionPctMin": 8,
        },
        "default_pricing_policy": {"fareDiscountPct": 6},
        "description": "Top-volume consolidators",
    },
    {
        "tier_code": "GOLD",
        "display_name": "Gold",
        "kpi_window": "QUARTERLY",
        "kpi_thresholds": {
            "totalBookingValueMin": 2000000,
            "totalBookingsMin": 120,
            "conversionPctMin": 5,
        },
        "default_pricing_policy": {"fareDiscountPct": 4},
        "description": "High-volume agencies",
    },
    {
        "tier_code": "SILVER",
        "display_name": "Silver",
        "kpi_window": "QUARTERLY",
        "kpi_thresholds": {
            "totalBookingValueMin": 500000,
            "totalBookingsMin": 40,
        },
        "default_pricing_policy": {"fareDiscountPct": 2},
        "description": "Established agencies",
    },
    {
        "tier_code": "BRONZE",
        "display_name": "Bronze",
        "kpi_window": "QUARTERLY",
        "kpi_thresholds": {},
        "default_pricing_policy": {},
        "description": "Default tier for new agencies",
    },
]

# ── Agents ─────────────────────────────────────────────────────────────────────

AGENTS = [
    {
        "agent_id": "AG001",
        "agency_name": "Skyline Travels",
        "iata_code": "14312345",
        "tier": "GOLD",
        "allowed_channels": ["API", "PORTAL"],
        "pos": ["IN"],
    },
    {
        "agent_id": "AG002",
        "agency_name": "Coastal Holidays",
        "iata_code": "14367890",
        "tier": "BRONZE",
        "allowed_channels": ["PORTAL", "MOBILE"],
        "pos": ["IN", "AE"],
    },
]

# ── Cohorts ────────────────────────────────────────────────────────────────────

COHORTS = [
    {
        "cohort_code": "MOBILE_IN",
        "cohort_name": "Indian mobile shoppers",
        "type": "CHANNEL",
        "criteria": {"pos": ["IN"], "device": ["MOBILE"]},
    },
    {
        "cohort_code": "EARLY_BIRD",
        "cohort_name": "Books 30+ days out",
        "type": "BEHAVIOR",
        "criteria": {"bookingWindow": {"min": 30}},
    },
]


async def seed():
    async with async_session_factory() as db:
        # Check if already seeded
        result = await db.execute(select(AgentTier).limit(1))
        if result.scalar_one_or_none():
            logger.info("Database already seeded. Skipping.")
            return

        for t in TIERS:
            db.add(AgentTier(**t, created_by="seed"))
        logger.info(f"Created {len(TIERS)} agent tiers")

        for a in AGENTS:
            db.add(Agent(**a))
        logger.info(f"Created {len(AGENTS)} agents")

        for c in COHORTS:
            db.add(Cohort(**c, created_by="seed"))
        logger.info(f"Created {len(COHORTS)} cohorts")

        await db.commit()
        logger.info("Seed complete.")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed())
