import uuid

import pytest

from payloads import discount_payload

pytestmark = pytest.mark.anyio


async def test_simulate_applies_percent_as_markup(client):
    rule = (await client.post("/api/dynamic-discount-rules", json=discount_payload())).json()

    resp = await client.post(
        "/api/dynamic-discount-rules/simulate",
        json={"baseFare": 1000, "currency": "INR", "ruleId": rule["id"]},
    )
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["adjustedFare"] == 1100
    assert body["delta"] == 100
    assert body["adjustment"] == {"type": "PERCENT", "value": 10.0}
    assert body["ruleApplied"] == "DISC10"


async def test_simulate_writes_nothing(client):
    rule = (await client.post("/api/dynamic-discount-rules", json=discount_payload())).json()
    before = (await client.get("/api/audit-logs")).json()

    payload = {"baseFare": 1000, "currency": "INR", "ruleId": rule["id"]}
    first = (await client.post("/api/dynamic-discount-rules/simulate", json=payload)).json()
    second = (await client.post("/api/dynamic-discount-rules/simulate", json=payload)).json()

    assert first == second
    assert len((await client.get("/api/audit-logs")).json()) == len(before)


async def test_simulate_unknown_rule_is_404(client):
    resp = await client.post(
        "/api/dynamic-discount-rules/simulate",
        json={"baseFare": 1000, "currency": "INR", "ruleId": str(uuid.uuid4())},
    )
    assert resp.status_code == 404


async def test_duplicate_active_rule_code_conflicts(client):
    assert (await client.post("/api/dynamic-discount-rules", json=discount_payload())).status_code == 201
    resp = await client.post("/api/dynamic-discount-rules", json=discount_payload(origin="BLR"))
    assert resp.status_code == 409
    assert len(resp.json()["conflicts"]) == 1

    # An inactive copy may share the code
    resp = await client.post("/api/dynamic-discount-rules", json=discount_payload(status="INACTIVE"))
    assert resp.status_code == 201


async def test_list_filters_by_agent_tier(client):
    await client.post("/api/dynamic-discount-rules", json=discount_payload())
    await client.post(
        "/api/dynamic-discount-rules", json=discount_payload(ruleCode="DISC5", agentTier=["GOLD"])
    )

    resp = await client.get("/api/dynamic-discount-rules", params={"agentTier": "GOLD"})
    assert [r["ruleCode"] for r in resp.json()] == ["DISC5"]


async def test_rollback_restores_previous_values(client):
    rule = (await client.post("/api/dynamic-discount-rules", json=discount_payload())).json()
    await client.put(f"/api/dynamic-discount-rules/{rule['id']}", json={"adjustmentValue": 25})

    logs = (await client.get("/api/audit-logs", params={"entityId": rule["id"], "action": "UPDATED"})).json()
    assert len(logs) == 1

    resp = await client.post(
        f"/api/audit-logs/{logs[0]['id']}/rollback", json={"justification": "Wrong value entered"}
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["data"]["adjustmentValue"] == 10

    restored = (await client.get(f"/api/dynamic-discount-rules/{rule['id']}")).json()
    assert restored["adjustmentValue"] == 10

    rollbacks = (await client.get("/api/audit-logs", params={"action": "ROLLBACK"})).json()
    assert rollbacks[0]["justification"] == "Wrong value entered"


async def test_partial_update_cannot_end_validity_before_it_starts(client):
    rule = (await client.post("/api/dynamic-discount-rules", json=discount_payload())).json()

    resp = await client.put(f"/api/dynamic-discount-rules/{rule['id']}", json={"validTo": "2000-01-01"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "validTo must be on or after validFrom"

    stored = (await client.get(f"/api/dynamic-discount-rules/{rule['id']}")).json()
    assert stored["validTo"] == rule["validTo"]
