"""Simulate endpoints across rule groups, cohorts, rate upload and health."""

import pytest

from payloads import ancillary_payload, bundle_pricing_payload, window

pytestmark = pytest.mark.anyio


async def _create(client, path: str, payload: dict) -> dict:
    resp = await client.post(path, json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def _audit_count(client) -> int:
    return len((await client.get("/api/audit-logs", params={"limit": 1000})).json())


async def test_health(client):
    resp = await client.get("/api/health")
    assert resp.json() == {"status": "ok", "service": "offerdesk"}


async def test_ancillary_simulate_discounts(client):
    rule = await _create(client, "/api/air-ancillary-rules", ancillary_payload())
    resp = await client.post(
        "/api/air-ancillary-rules/simulate", json={"basePrice": 1800, "ruleId": rule["id"]}
    )
    assert resp.json() == {
        "ancillaryCode": "BAG20",
        "basePrice": 1800,
        "discount": 900,
        "adjustedPrice": 900,
        "delta": -900,
        "currency": "INR",
        "ruleApplied": "BAG50",
    }


async def test_free_ancillary_needs_no_value(client):
    payload = ancillary_payload(ruleCode="SEATFREE", adjustmentType="FREE")
    del payload["adjustmentValue"]
    rule = await _create(client, "/api/air-ancillary-rules", payload)

    resp = await client.post(
        "/api/air-ancillary-rules/simulate", json={"basePrice": 600, "ruleId": rule["id"]}
    )
    assert resp.json()["adjustedPrice"] == 0

    missing = ancillary_payload(ruleCode="NOVALUE")
    del missing["adjustmentValue"]
    assert (await client.post("/api/air-ancillary-rules", json=missing)).status_code == 400


async def test_nonair_markup_simulate(client):
    start, end = window()
    rule = await _create(
        client,
        "/api/nonair/rules",
        {
            "ruleCode": "HTL250",
            "productCode": "HOTEL_STD",
            "channel": "PORTAL",
            "adjustmentType": "AMOUNT",
            "adjustmentValue": 250,
            "validFrom": start,
            "validTo": end,
        },
    )
    before = await _audit_count(client)

    resp = await client.post(
        "/api/nonair/rules/simulate", json={"baseRate": 4000, "currency": "USD", "ruleId": rule["id"]}
    )
    assert resp.json() == {
        "baseRate": 4000,
        "markup": 250,
        "adjustedRate": 4250,
        "delta": 250,
        "currency": "USD",
        "ruleApplied": "HTL250",
    }
    assert await _audit_count(client) == before


async def test_bundle_pricing_simulate(client):
    rule = await _create(
        client, "/api/bundles/pricing", bundle_pricing_payload(discountType="AMOUNT", discountValue=500)
    )
    resp = await client.post("/api/bundles/pricing/simulate", json={"basePrice": 3000, "ruleId": rule["id"]})
    body = resp.json()
    assert body["bundleCode"] == "COMFORT"
    assert (body["discount"], body["adjustedPrice"]) == (500, 2500)

    listed = (await client.get("/api/bundles/pricing", params={"bundleCode": "COMFORT"})).json()
    assert [r["ruleCode"] for r in listed] == ["COMFORT20"]


async def test_channel_override_simulate(client):
    start, end = window()
    override = await _create(
        client,
        "/api/channel-overrides",
        {
            "overrideCode": "MOB5",
            "channel": "MOBILE",
            "productScope": "FARE",
            "adjustmentType": "PERCENT",
            "adjustmentValue": 5,
            "validFrom": start,
            "validTo": end,
        },
    )
    resp = await client.post(
        "/api/channel-overrides/simulate", json={"baseValue": 1000, "ruleId": override["id"]}
    )
    assert resp.json() == {
        "baseValue": 1000,
        "adjustedValue": 1050,
        "delta": 50,
        "currency": "INR",
        "ruleApplied": "MOB5",
    }


async def test_offer_rule_simulate_and_approval(client):
    start, end = window()
    rule = await _create(
        client,
        "/api/offer-rules",
        {
            "ruleCode": "FESTIVE",
            "ruleName": "Festive fare",
            "ruleType": "FARE_DISCOUNT",
            "conditions": {"origin": "DEL", "agentTier": ["GOLD"]},
            "actions": [
                {"type": "DISCOUNT", "valueType": "PERCENT", "value": 10},
                {"type": "ADD_BANNER", "target": "HOME"},
                {"type": "MARKUP", "valueType": "AMOUNT", "value": 50},
            ],
            "validFrom": start,
            "validTo": end,
        },
    )
    assert rule["status"] == "DRAFT"
    assert rule["approvedBy"] is None

    resp = await client.post("/api/offer-rules/simulate", json={"basePrice": 1000, "ruleId": rule["id"]})
    body = resp.json()
    assert [(s["type"], s["after"]) for s in body["steps"]] == [("DISCOUNT", 900), ("MARKUP", 950)]
    assert body["adjustedPrice"] == 950
    assert body["delta"] == -50

    await client.patch(f"/api/offer-rules/{rule['id']}/status", json={"status": "PENDING_APPROVAL"})
    resp = await client.patch(
        f"/api/offer-rules/{rule['id']}/status", json={"status": "ACTIVE", "approver": "revenue-head"}
    )
    approved = resp.json()
    assert approved["status"] == "ACTIVE"
    assert approved["approvedBy"] == "revenue-head"
    assert approved["approvedAt"] is not None

    bad = await client.patch(f"/api/offer-rules/{rule['id']}/status", json={"status": "ARCHIVED"})
    assert bad.status_code == 400


async def test_simulate_unknown_rule_is_404(client):
    resp = await client.post(
        "/api/channel-overrides/simulate",
        json={"baseValue": 1000, "ruleId": "00000000-0000-0000-0000-000000000000"},
    )
    assert resp.status_code == 404


async def test_cohort_simulate_and_list(client):
    await _create(
        client,
        "/api/cohorts",
        {"cohortCode": "MOBILE_IN", "cohortName": "Mobile India", "type": "CHANNEL",
         "criteria": {"pos": ["IN"], "device": ["MOBILE"]}},
    )
    await _create(
        client,
        "/api/cohorts",
        {"cohortCode": "BIZ", "cohortName": "Business flyers", "type": "BEHAVIOR",
         "criteria": {"behavior": {"preferredCabinClass": ["BUSINESS"]}}},
    )
    await _create(
        client,
        "/api/cohorts",
        {"cohortCode": "OLD", "cohortName": "Retired", "type": "MARKET", "status": "INACTIVE"},
    )

    resp = await client.post(
        "/api/cohorts/simulate",
        json={"searchContext": {"pos": "IN", "device": "MOBILE", "cabinClass": "ECONOMY"}},
    )
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["count"] == 1
    assert body["matchedCohorts"] == [
        {"cohortCode": "MOBILE_IN", "cohortName": "Mobile India", "type": "CHANNEL"}
    ]

    summaries = (await client.get("/api/cohorts/list")).json()
    assert sorted(c["cohortCode"] for c in summaries) == ["BIZ", "MOBILE_IN"]

    behavior = (await client.get("/api/cohorts", params={"type": "BEHAVIOR"})).json()
    assert [c["cohortCode"] for c in behavior] == ["BIZ"]


async def test_rate_upload(client):
    content = (
        "supplierCode,productCode,productName,netRate,currency,region,validFrom,validTo\n"
        "TAJ,HOTEL_STD,Standard room,4000,INR,IN|AE,2026-01-01,2026-06-30\n"
        "TAJ,HOTEL_STD,Standard room,3900,INR,IN,2026-03-01,2026-03-31\n"
        "TAJ,HOTEL_DLX,Deluxe room,6500,INR,,2026-01-01,2026-06-30\n"
    ).encode("utf-8")

    resp = await client.post("/api/nonair/rates/upload", files={"file": ("rates.csv", content, "text/csv")})
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert (body["inserted"], body["conflicts"], body["errors"]) == (2, 1, 0)
    assert body["data"]["conflicts"][0]["row"] == 2

    rates = (await client.get("/api/nonair/rates", params={"supplierCode": "TAJ"})).json()
    assert {r["productCode"]: r["region"] for r in rates} == {"HOTEL_STD": ["IN", "AE"], "HOTEL_DLX": []}

    # Overlaps the uploaded HOTEL_STD rate
    start, end = "2026-02-01", "2026-02-28"
    clash = await client.post(
        "/api/nonair/rates",
        json={"supplierCode": "TAJ", "productCode": "HOTEL_STD", "productName": "Std",
              "netRate": 4100, "currency": "INR", "validFrom": start, "validTo": end},
    )
    assert clash.status_code == 409
    assert len(clash.json()["conflicts"]) == 1
