"""Offer composer — prices one search for one agent and records the trace.

One synchronous pass through:
  FARE_RESOLUTION -> DISCOUNT_APPLICATION -> ANCILLARY_PRICING
  -> BUNDLE_PRICING -> FINALIZATION

Nothing is persisted until every stage has succeeded; any failure leaves no
OfferTrace behind.
"""

import logging
import secrets
import string
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from offerdesk.config import settings
from offerdesk.models.bundles import Bundle, BundlePricingRule
from offerdesk.models.fares import NegotiatedFare
from offerdesk.models.offer import OfferTrace
from offerdesk.models.rules import AirAncillaryRule, DynamicDiscountRule
from offerdesk.services.cohort_service import cohort_service
from offerdesk.services.pricing import apply_discount, round_money
from offerdesk.services.providers import (
    AncillaryPriceProvider,
    BundlePriceProvider,
    FareSourceProvider,
)
from offerdesk.services.rule_matcher import RuleContext, match_rules
from offerdesk.services.tier_service import tier_service

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_uppercase + string.digits


def generate_trace_id(prefix: str) -> str:
    """PREFIX-XXXXX with 5 random base36 characters."""
    return f"{prefix}-" + "".join(secrets.choice(_ID_ALPHABET) for _ in range(5))


class OfferComposer:
    def __init__(
        self,
        fare_provider: FareSourceProvider | None = None,
        ancillary_provider: AncillaryPriceProvider | None = None,
        bundle_provider: BundlePriceProvider | None = None,
        commission_rate: float | None = None,
    ):
        self.fare_provider = fare_provider or FareSourceProvider()
        self.ancillary_provider = ancillary_provider or AncillaryPriceProvider()
        self.bundle_provider = bundle_provider or BundlePriceProvider()
        self.commission_rate = commission_rate if commission_rate is not None else settings.commission_rate

    async def resolve_fare(self, db: AsyncSession, params: dict) -> tuple[str, float]:
        fares = await match_rules(
            db,
            NegotiatedFare,
            RuleContext(
                origin=params["origin"],
                destination=params["destination"],
                cabin_class=params.get("cabinClass"),
                trip_type=params.get("tripType"),
            ),
        )
        if fares:
            return "NEGOTIATED", float(fares[0].base_net_fare)
        return "API", await self.fare_provider.get_base_fare(params)

    async def apply_discounts(
        self, db: AsyncSession, params: dict, agent_tier: str, base_price: float
    ) -> tuple[float, list[dict]]:
        """Stack every matching discount rule in priority order."""
        rules = await match_rules(
            db,
            DynamicDiscountRule,
            RuleContext(
                origin=params["origin"],
                destination=params["destination"],
                cabin_class=params.get("cabinClass"),
                trip_type=params.get("tripType"),
                channel=params.get("channel"),
                agent_tier=agent_tier,
                pos=params.get("pos"),
            ),
        )

        price = base_price
        steps = []
        for rule in rules:
            adj = apply_discount(price, rule.adjustment_type, rule.adjustment_value)
            steps.append({
                "rule": rule.rule_code,
                "type": rule.adjustment_type,
                "value": float(rule.adjustment_value),
                "priority": rule.priority,
                "before": adj.before,
                "after": adj.after,
            })
            price = adj.after
        return price, steps

    async def price_ancillaries(
        self, db: AsyncSession, agent_tier: str, pos: str | None = None
    ) -> list[dict]:
        rules = await match_rules(db, AirAncillaryRule, RuleContext(agent_tier=agent_tier, pos=pos))
        items = []
        for rule in rules:
            base = await self.ancillary_provider.get_base_price(rule.ancillary_code)
            adj = apply_discount(base, rule.adjustment_type, rule.adjustment_value)
            items.append({
                "code": rule.ancillary_code,
                "rule": rule.rule_code,
                "base": adj.before,
                "discount": adj.discount,
                "sell": adj.after,
            })
        return items

    async def price_bundles(
        self, db: AsyncSession, agent_tier: str, pos: str | None = None
    ) -> list[dict]:
        """First pricing rule by priority per bundle; unpriced bundles sell at base."""
        bundles = await match_rules(db, Bundle, RuleContext(agent_tier=agent_tier, pos=pos))
        items = []
        for bundle in bundles:
            base = await self.bundle_provider.get_base_price(bundle.bundle_code)
            pricing = await match_rules(
                db, BundlePricingRule, RuleContext(filters={"bundle_code": bundle.bundle_code})
            )
            if pricing:
                rule = pricing[0]
                adj = apply_discount(base, rule.discount_type, rule.discount_value)
                rule_code, discount, sell = rule.rule_code, adj.discount, adj.after
            else:
                rule_code, discount, sell = None, 0.0, round_money(base)
            items.append({
                "code": bundle.bundle_code,
                "rule": rule_code,
                "base": round_money(base),
                "discount": discount,
                "sell": sell,
                "saveVsIndiv": round_money(base - sell),
            })
        return items

    async def compose(self, db: AsyncSession, params: dict) -> OfferTrace:
        agent_id = params["agentId"]
        agent_tier = await tier_service.current_tier(db, agent_id)

        cohort_context = {
            "pos": params.get("pos"),
            "channel": params.get("channel"),
            "device": params.get("device"),
            "cabinClass": params.get("cabinClass"),
            "departureDate": (params.get("dates") or {}).get("departure"),
        }
        cohorts = [c.cohort_code for c in await cohort_service.match(db, cohort_context)]

        fare_source, base_price = await self.resolve_fare(db, params)
        discounted_fare, adjustments = await self.apply_discounts(db, params, agent_tier, base_price)
        ancillaries = await self.price_ancillaries(db, agent_tier, params.get("pos"))
        bundles = await self.price_bundles(db, agent_tier, params.get("pos"))

        final_price = round_money(
            base_price
            + sum(a["sell"] for a in ancillaries)
            + sum(b["sell"] for b in bundles)
        )
        commission = round_money(final_price * self.commission_rate)

        trace = OfferTrace(
            trace_id=generate_trace_id("TRC"),
            agent_id=agent_id,
            search_params=params,
            agent_tier=agent_tier,
            cohorts=cohorts,
            fare_source=fare_source,
            base_price=Decimal(str(round_money(base_price))),
            adjustments=adjustments,
            ancillaries=ancillaries,
            bundles=bundles,
            final_offer_price=Decimal(str(final_price)),
            commission=Decimal(str(commission)),
            audit_trace_id=generate_trace_id("AUD"),
        )
        db.add(trace)
        await db.flush()
        await db.refresh(trace)
        await db.commit()

        logger.info(
            f"Composed offer {trace.trace_id} for agent {agent_id} ({agent_tier}): "
            f"{fare_source} {base_price} (discounted {discounted_fare}, traced only) -> {final_price}"
        )
        return trace


offer_composer = OfferComposer()
