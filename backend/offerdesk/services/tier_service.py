"""Tier evaluator — agent KPIs, tier recommendation, and tier assignment."""

import logging
from datetime import date, datetime, timedelta, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from offerdesk.config import settings
from offerdesk.errors import BadRequestError
from offerdesk.models.agents import Agent, AgentBooking, AgentTier, AgentTierAssignment
from offerdesk.models.offer import OfferTrace
from offerdesk.services import audit_service as audit
from offerdesk.services.audit_service import AuditContext, audit_recorder, snapshot
from offerdesk.services.pricing import round_money

logger = logging.getLogger(__name__)

# Highest first
TIER_RANK = ("PLATINUM", "GOLD", "SILVER", "BRONZE")

# KPI window -> (days, months)
KPI_WINDOWS = {
    "MONTHLY": (30, 1),
    "QUARTERLY": (90, 3),
}


def tier_qualifies(kpis: dict, thresholds: dict) -> bool:
    """Every ``<kpi>Min`` threshold is met by the matching KPI."""
    for key, minimum in (thresholds or {}).items():
        if minimum is None:
            continue
        kpi = key[:-3] if key.endswith("Min") else key
        if float(kpis.get(kpi, 0)) < float(minimum):
            return False
    return True


def recommend_tier(kpis: dict, tiers: list[AgentTier]) -> str:
    """Highest-ranked tier whose thresholds are all met."""
    by_code = {t.tier_code: t for t in tiers}
    for code in TIER_RANK:
        tier = by_code.get(code)
        if tier is not None and tier_qualifies(kpis, tier.kpi_thresholds):
            return code
    return settings.default_agent_tier


class TierService:
    async def current_tier(self, db: AsyncSession, agent_id: str) -> str:
        """ACTIVE assignment, else the agent record's tier, else the default tier."""
        result = await db.execute(
            select(AgentTierAssignment).where(
                AgentTierAssignment.agent_id == agent_id,
                AgentTierAssignment.status == "ACTIVE",
            )
        )
        assignment = result.scalars().first()
        if assignment:
            return assignment.tier_code

        agent = await self._get_agent(db, agent_id)
        if agent and agent.tier:
            return agent.tier
        return settings.default_agent_tier

    async def _get_agent(self, db: AsyncSession, agent_id: str) -> Agent | None:
        result = await db.execute(
            select(Agent).where(Agent.agent_id == agent_id, Agent.status == "ACTIVE")
        )
        return result.scalars().first()

    async def list_bookings(self, db: AsyncSession, agent_id: str) -> list[AgentBooking]:
        result = await db.execute(
            select(AgentBooking)
            .where(AgentBooking.agent_id == agent_id)
            .order_by(AgentBooking.booked_at.desc())
        )
        return list(result.scalars().all())

    async def record_booking(self, db: AsyncSession, agent_id: str, data: dict) -> AgentBooking:
        """Store one booking fact for KPI aggregation."""
        data = {k: v for k, v in data.items() if v is not None}
        data.setdefault("booked_at", datetime.now(timezone.utc))
        booking = AgentBooking(agent_id=agent_id, **data)
        db.add(booking)
        await db.flush()
        await db.refresh(booking)
        await db.commit()
        logger.info(f"Booking {booking.booking_ref} recorded for agent {agent_id}")
        return booking

    async def compute_kpis(
        self, db: AsyncSession, agent_id: str, window: str, as_of: datetime | None = None
    ) -> dict:
        if window not in KPI_WINDOWS:
            raise BadRequestError(f"Unknown KPI window: {window}")
        days, months = KPI_WINDOWS[window]
        as_of = as_of or datetime.now(timezone.utc)
        since = as_of - timedelta(days=days)

        result = await db.execute(
            select(func.count(AgentBooking.id), func.coalesce(func.sum(AgentBooking.amount), 0)).where(
                AgentBooking.agent_id == agent_id,
                AgentBooking.booked_at >= since,
                AgentBooking.booked_at <= as_of,
            )
        )
        bookings, value = result.one()

        searches = (
            await db.execute(
                select(func.count(OfferTrace.id)).where(
                    OfferTrace.agent_id == agent_id,
                    OfferTrace.created_at >= since,
                    OfferTrace.created_at <= as_of,
                )
            )
        ).scalar() or 0

        return {
            "totalBookingValue": round_money(value or 0),
            "totalBookings": bookings,
            "avgBookingsPerMonth": round_money(bookings / months),
            "avgSearchesPerMonth": round_money(searches / months),
            "conversionPct": round_money(bookings / searches * 100) if searches else 0.0,
        }

    async def evaluate(self, db: AsyncSession, agent_id: str, window: str = "QUARTERLY") -> dict:
        kpis = await self.compute_kpis(db, agent_id, window)
        result = await db.execute(select(AgentTier).where(AgentTier.status == "ACTIVE"))
        tiers = list(result.scalars().all())

        current = await self.current_tier(db, agent_id)
        recommended = recommend_tier(kpis, tiers)
        return {
            "agentId": agent_id,
            "kpiWindow": window,
            "kpiData": kpis,
            "currentTier": current,
            "recommendedTier": recommended,
            "tierChangeRequired": current != recommended,
        }

    async def _assign(
        self,
        db: AsyncSession,
        ctx: AuditContext,
        agent_id: str,
        tier_code: str,
        assignment_type: str,
        effective_from: date,
        *,
        kpi_snapshot: dict | None = None,
        justification: str | None = None,
        assigned_by: str | None = None,
    ) -> AgentTierAssignment:
        """Supersede the ACTIVE assignment and insert the new one, audited as one change."""
        result = await db.execute(
            select(AgentTierAssignment).where(
                AgentTierAssignment.agent_id == agent_id,
                AgentTierAssignment.status == "ACTIVE",
            )
        )
        previous = result.scalars().first()

        async def before():
            return snapshot(previous) if previous else None

        async def mutation():
            if previous:
                previous.status = "SUPERSEDED"
                previous.effective_to = effective_from
                await db.flush()

            assignment = AgentTierAssignment(
                agent_id=agent_id,
                tier_code=tier_code,
                assignment_type=assignment_type,
                effective_from=effective_from,
                kpi_snapshot=kpi_snapshot,
                justification=justification,
                assigned_by=assigned_by or ctx.user,
                status="ACTIVE",
            )
            db.add(assignment)

            agent = await self._get_agent(db, agent_id)
            if agent:
                agent.tier = tier_code

            await db.flush()
            await db.refresh(assignment)
            return assignment

        action = audit.AUTO_ASSIGNED if assignment_type == "AUTO" else audit.MANUAL_OVERRIDE
        assignment = await audit_recorder.audited(
            db, ctx, audit.AGENT_TIER_ASSIGNMENT, action, mutation,
            before=before, justification=justification,
        )
        logger.info(
            f"Agent {agent_id} tier {previous.tier_code if previous else '-'} -> {tier_code} ({assignment_type})"
        )
        return assignment

    async def auto_assign(
        self,
        db: AsyncSession,
        ctx: AuditContext,
        agent_ids: list[str],
        window: str = "QUARTERLY",
        effective_from: date | None = None,
    ) -> dict:
        """Re-evaluate each agent and assign only where the tier changes."""
        effective_from = effective_from or date.today()
        results = []
        assignments = []
        for agent_id in agent_ids:
            evaluation = await self.evaluate(db, agent_id, window)
            if evaluation["tierChangeRequired"]:
                assignment = await self._assign(
                    db, ctx, agent_id, evaluation["recommendedTier"], "AUTO", effective_from,
                    kpi_snapshot=evaluation["kpiData"],
                )
                assignments.append(assignment)
            results.append({
                "agentId": agent_id,
                "previousTier": evaluation["currentTier"],
                "recommendedTier": evaluation["recommendedTier"],
                "changed": evaluation["tierChangeRequired"],
            })

        logger.info(f"Tier auto-assign: {len(agent_ids)} processed, {len(assignments)} changed")
        return {"processed": len(agent_ids), "assignments": assignments, "results": results}

    async def override(
        self,
        db: AsyncSession,
        ctx: AuditContext,
        agent_id: str,
        tier_code: str,
        effective_from: date,
        justification: str,
        assigned_by: str | None = None,
    ) -> AgentTierAssignment:
        if tier_code not in TIER_RANK:
            raise BadRequestError(f"Invalid tier. Must be one of: {', '.join(TIER_RANK)}")
        if not justification or len(justification.strip()) < 10:
            raise BadRequestError("Justification must be at least 10 characters")
        return await self._assign(
            db, ctx, agent_id, tier_code, "MANUAL_OVERRIDE", effective_from,
            justification=justification, assigned_by=assigned_by,
        )


tier_service = TierService()
