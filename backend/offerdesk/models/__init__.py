from offerdesk.models.agents import Agent, AgentBooking, AgentTier, AgentTierAssignment
from offerdesk.models.audit import AuditLog
from offerdesk.models.bundles import Bundle, BundlePricingRule
from offerdesk.models.campaigns import Campaign, CampaignDelivery, CampaignMetrics
from offerdesk.models.cohorts import Cohort
from offerdesk.models.fares import NegotiatedFare
from offerdesk.models.nonair import NonAirMarkupRule, NonAirRate
from offerdesk.models.offer import OfferTrace
from offerdesk.models.rules import (
    AirAncillaryRule,
    ChannelPriceOverride,
    DynamicDiscountRule,
    OfferRule,
)

__all__ = [
    "Agent",
    "AgentBooking",
    "AgentTier",
    "AgentTierAssignment",
    "AirAncillaryRule",
    "AuditLog",
    "Bundle",
    "BundlePricingRule",
    "Campaign",
    "CampaignDelivery",
    "CampaignMetrics",
    "ChannelPriceOverride",
    "Cohort",
    "DynamicDiscountRule",
    "NegotiatedFare",
    "NonAirMarkupRule",
    "NonAirRate",
    "OfferRule",
    "OfferTrace",
]
