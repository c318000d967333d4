"""One RuleStore per audited entity."""

from offerdesk.models import (
    Agent,
    AgentTier,
    AirAncillaryRule,
    Bundle,
    BundlePricingRule,
    Campaign,
    ChannelPriceOverride,
    Cohort,
    DynamicDiscountRule,
    NegotiatedFare,
    NonAirMarkupRule,
    NonAirRate,
    OfferRule,
)
from offerdesk.services import audit_service as audit
from offerdesk.services.conflict_checker import find_fare_conflicts, find_rate_conflicts
from offerdesk.services.rule_store import RuleStore

fare_store = RuleStore(
    NegotiatedFare, audit.NEGOTIATED_FARE, "Negotiated fare",
    statuses=("ACTIVE", "INACTIVE", "CONFLICTED"),
    conflict_finder=find_fare_conflicts,
)
discount_store = RuleStore(
    DynamicDiscountRule, audit.DYNAMIC_DISCOUNT_RULE, "Dynamic discount rule", code_field="rule_code"
)
ancillary_store = RuleStore(
    AirAncillaryRule, audit.AIR_ANCILLARY_RULE, "Air ancillary rule", code_field="rule_code"
)
rate_store = RuleStore(
    NonAirRate, audit.NONAIR_RATE, "Non-air rate", conflict_finder=find_rate_conflicts
)
nonair_rule_store = RuleStore(
    NonAirMarkupRule, audit.NONAIR_RULE, "Non-air markup rule", code_field="rule_code"
)
bundle_store = RuleStore(Bundle, audit.BUNDLE, "Bundle", code_field="bundle_code")
bundle_pricing_store = RuleStore(
    BundlePricingRule, audit.BUNDLE_PRICING_RULE, "Bundle pricing rule", code_field="rule_code"
)
offer_rule_store = RuleStore(
    OfferRule, audit.OFFER_RULE, "Offer rule", code_field="rule_code",
    statuses=("DRAFT", "PENDING_APPROVAL", "ACTIVE", "INACTIVE"),
)
channel_override_store = RuleStore(
    ChannelPriceOverride, audit.CHANNEL_OVERRIDE, "Channel override", code_field="override_code"
)
agent_store = RuleStore(Agent, audit.AGENT, "Agent", code_field="agent_id")
tier_store = RuleStore(AgentTier, audit.AGENT_TIER, "Agent tier", code_field="tier_code")
cohort_store = RuleStore(Cohort, audit.COHORT, "Cohort", code_field="cohort_code")
campaign_store = RuleStore(
    Campaign, audit.CAMPAIGN, "Campaign", code_field="campaign_code",
    statuses=("DRAFT", "ACTIVE", "PAUSED", "COMPLETED", "CANCELLED"),
)

# Modules whose audit history can be replayed
ROLLBACK_STORES = {
    audit.NEGOTIATED_FARE: fare_store,
    audit.DYNAMIC_DISCOUNT_RULE: discount_store,
}
