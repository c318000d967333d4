"""Request payload builders shared by the API tests."""

from datetime import date, timedelta


def window(days_before: int = 10, days_after: int = 60) -> tuple[str, str]:
    start = date.today() - timedelta(days=days_before)
    end = date.today() + timedelta(days=days_after)
    return start.isoformat(), end.isoformat()


def fare_payload(**overrides) -> dict:
    start, end = window()
    payload = {
        "airlineCode": "AI",
        "fareCode": "DEL100",
        "origin": "DEL",
        "destination": "BOM",
        "tripType": "ONE_WAY",
        "cabinClass": "ECONOMY",
        "baseNetFare": 5000,
        "currency": "INR",
        "bookingStartDate": start,
        "bookingEndDate": end,
        "travelStartDate": start,
        "travelEndDate": end,
        "eligibleAgentTiers": ["BRONZE"],
    }
    payload.update(overrides)
    return payload


def discount_payload(**overrides) -> dict:
    start, end = window()
    payload = {
        "ruleCode": "DISC10",
        "origin": "DEL",
        "destination": "BOM",
        "cabinClass": "ECONOMY",
        "tripType": "ONE_WAY",
        "channel": "API",
        "agentTier": ["PLATINUM"],
        "adjustmentType": "PERCENT",
        "adjustmentValue": 10,
        "priority": 1,
        "validFrom": start,
        "validTo": end,
    }
    payload.update(overrides)
    return payload


def ancillary_payload(**overrides) -> dict:
    start, end = window()
    payload = {
        "ruleCode": "BAG50",
        "ancillaryCode": "BAG20",
        "channel": "API",
        "agentTier": ["PLATINUM"],
        "adjustmentType": "PERCENT",
        "adjustmentValue": 50,
        "validFrom": start,
        "validTo": end,
    }
    payload.update(overrides)
    return payload


def bundle_payload(**overrides) -> dict:
    start, end = window()
    payload = {
        "bundleCode": "COMFORT",
        "bundleName": "Comfort pack",
        "components": [{"type": "AIR", "code": "SEAT_STD"}, {"type": "AIR", "code": "MEAL_STD"}],
        "bundleType": "AIR_AIR",
        "agentTier": ["PLATINUM"],
        "channel": "API",
        "validFrom": start,
        "validTo": end,
    }
    payload.update(overrides)
    return payload


def bundle_pricing_payload(**overrides) -> dict:
    start, end = window()
    payload = {
        "ruleCode": "COMFORT20",
        "bundleCode": "COMFORT",
        "discountType": "PERCENT",
        "discountValue": 20,
        "validFrom": start,
        "validTo": end,
    }
    payload.update(overrides)
    return payload


def agent_payload(**overrides) -> dict:
    payload = {
        "agentId": "AG900",
        "agencyName": "Test Travels",
        "tier": "BRONZE",
        "allowedChannels": ["API"],
        "pos": ["IN"],
    }
    payload.update(overrides)
    return payload
