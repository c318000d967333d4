import logging
import re

import pytest

from payloads import (
    agent_payload,
    ancillary_payload,
    bundle_payload,
    bundle_pricing_payload,
    discount_payload,
    fare_payload,
)

pytestmark = pytest.mark.anyio

COMPOSE = {
    "origin": "DEL",
    "destination": "BOM",
    "agentId": "AG900",
    "cabinClass": "ECONOMY",
    "tripType": "ONE_WAY",
    "channel": "API",
}


async def test_unknown_route_falls_back_to_placeholder_fare(client):
    resp = await client.post("/api/offer/compose", json={"origin": "DEL", "destination": "BOM", "agentId": "A1"})
    assert resp.status_code == 200, resp.text
    offer = resp.json()
    assert offer["fareSource"] == "API"
    assert offer["basePrice"] == 8500
    assert offer["agentTier"] == "BRONZE"
    assert offer["finalOfferPrice"] == 8500
    assert offer["commission"] == 255
    assert offer["status"] == "COMPOSED"
    assert re.fullmatch(r"TRC-[0-9A-Z]{5}", offer["traceId"])
    assert re.fullmatch(r"AUD-[0-9A-Z]{5}", offer["auditTraceId"])

    resp = await client.get(f"/api/offer/trace/{offer['traceId']}")
    assert resp.status_code == 200
    assert resp.json()["id"] == offer["id"]
    assert (await client.get(f"/api/offer/traces/{offer['id']}")).json()["traceId"] == offer["traceId"]


async def test_full_composition_for_platinum_agent(client):
    await client.post("/api/agents", json=agent_payload(tier="PLATINUM"))
    await client.post("/api/negofares", json=fare_payload())
    await client.post("/api/dynamic-discount-rules", json=discount_payload())
    await client.post(
        "/api/dynamic-discount-rules",
        json=discount_payload(ruleCode="LESS100", adjustmentType="AMOUNT", adjustmentValue=100, priority=2),
    )
    # Other tier; must not apply
    await client.post(
        "/api/dynamic-discount-rules", json=discount_payload(ruleCode="GOLDONLY", agentTier=["GOLD"])
    )
    await client.post("/api/air-ancillary-rules", json=ancillary_payload())
    await client.post("/api/bundles", json=bundle_payload())
    await client.post("/api/bundles", json=bundle_payload(bundleCode="LOUNGE", bundleName="Lounge"))
    await client.post("/api/bundles/pricing", json=bundle_pricing_payload())

    resp = await client.post("/api/offer/compose", json=COMPOSE)
    assert resp.status_code == 200, resp.text
    offer = resp.json()

    assert offer["fareSource"] == "NEGOTIATED"
    assert offer["agentTier"] == "PLATINUM"
    assert offer["basePrice"] == 5000
    assert [(a["rule"], a["before"], a["after"]) for a in offer["adjustments"]] == [
        ("DISC10", 5000, 4500),
        ("LESS100", 4500, 4400),
    ]
    assert offer["ancillaries"] == [
        {"code": "BAG20", "rule": "BAG50", "base": 2000, "discount": 1000, "sell": 1000}
    ]
    bundles = {b["code"]: b for b in offer["bundles"]}
    assert bundles["COMFORT"]["sell"] == 2400
    assert bundles["COMFORT"]["saveVsIndiv"] == 600
    assert bundles["LOUNGE"]["rule"] is None
    assert bundles["LOUNGE"]["sell"] == 3000

    # Discount steps are traced; the final price builds on the undiscounted base
    assert offer["finalOfferPrice"] == 5000 + 1000 + 2400 + 3000
    assert offer["commission"] == 342


async def test_composition_is_deterministic_apart_from_ids(client):
    await client.post("/api/negofares", json=fare_payload())
    first = (await client.post("/api/offer/compose", json=COMPOSE)).json()
    second = (await client.post("/api/offer/compose", json=COMPOSE)).json()

    assert first["traceId"] != second["traceId"]
    for key in ("fareSource", "basePrice", "adjustments", "finalOfferPrice", "commission"):
        assert first[key] == second[key]

    traces = (await client.get("/api/offer/traces", params={"agentId": "AG900"})).json()
    assert len(traces) == 2


async def test_tier_assignment_takes_precedence_over_agent_record(client):
    await client.post("/api/agents", json=agent_payload(tier="BRONZE"))
    await client.post(
        "/api/tiers/override",
        json={
            "agentId": "AG900",
            "tierCode": "PLATINUM",
            "effectiveFrom": "2026-01-01",
            "justification": "Strategic partner agreement",
        },
    )
    await client.post("/api/dynamic-discount-rules", json=discount_payload())

    offer = (await client.post("/api/offer/compose", json=COMPOSE)).json()
    assert offer["agentTier"] == "PLATINUM"
    assert offer["adjustments"][0]["after"] == 7650


async def test_missing_required_fields_is_400(client):
    resp = await client.post("/api/offer/compose", json={"origin": "DEL"})
    assert resp.status_code == 400
    fields = {e["field"] for e in resp.json()["errors"]}
    assert {"destination", "agentId"} <= fields


async def test_unknown_trace_is_404(client):
    assert (await client.get("/api/offer/trace/TRC-XXXXX")).status_code == 404


async def test_rules_targeting_another_pos_are_skipped(client):
    await client.post("/api/agents", json=agent_payload(tier="PLATINUM"))
    await client.post("/api/dynamic-discount-rules", json=discount_payload(pos=["IN"]))
    await client.post(
        "/api/dynamic-discount-rules",
        json=discount_payload(ruleCode="US50", adjustmentType="AMOUNT", adjustmentValue=50, pos=["US"]),
    )
    await client.post("/api/air-ancillary-rules", json=ancillary_payload(pos=["IN"]))
    await client.post("/api/bundles", json=bundle_payload(pos=["IN"]))

    offer = (await client.post("/api/offer/compose", json={**COMPOSE, "pos": "US"})).json()
    assert [a["rule"] for a in offer["adjustments"]] == ["US50"]
    assert offer["ancillaries"] == []
    assert offer["bundles"] == []

    offer = (await client.post("/api/offer/compose", json={**COMPOSE, "pos": "IN"})).json()
    assert [a["rule"] for a in offer["adjustments"]] == ["DISC10"]
    assert [a["code"] for a in offer["ancillaries"]] == ["BAG20"]
    assert [b["code"] for b in offer["bundles"]] == ["COMFORT"]


async def test_compose_log_shows_discounted_fare_next_to_charged_price(client, caplog):
    await client.post("/api/agents", json=agent_payload(tier="PLATINUM"))
    await client.post("/api/dynamic-discount-rules", json=discount_payload())

    with caplog.at_level(logging.INFO, logger="offerdesk.services.offer_composer"):
        offer = (await client.post("/api/offer/compose", json=COMPOSE)).json()

    line = next(r.getMessage() for r in caplog.records if offer["traceId"] in r.getMessage())
    assert "API 8500.0 (discounted 7650.0, traced only) -> 8500.0" in line
