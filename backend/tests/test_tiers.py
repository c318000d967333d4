import pytest

from payloads import agent_payload

pytestmark = pytest.mark.anyio


def override(tier_code: str, **extra) -> dict:
    return {
        "agentId": "AG900",
        "tierCode": tier_code,
        "effectiveFrom": "2026-01-01",
        "justification": "Quarterly business review",
        **extra,
    }


async def _setup_tiers(client):
    await client.post(
        "/api/tiers",
        json={"tierCode": "GOLD", "displayName": "Gold", "kpiThresholds": {"totalBookingsMin": 2}},
    )
    await client.post("/api/tiers", json={"tierCode": "BRONZE", "displayName": "Bronze"})


async def test_override_keeps_a_single_active_assignment(client):
    await client.post("/api/agents", json=agent_payload())

    first = await client.post("/api/tiers/override", json=override("GOLD"))
    assert first.status_code == 201, first.text
    second = await client.post("/api/tiers/override", json=override("PLATINUM", assignedBy="ops-lead"))
    assert second.status_code == 201
    assert second.json()["assignedBy"] == "ops-lead"
    assert second.json()["assignmentType"] == "MANUAL_OVERRIDE"

    active = (await client.get("/api/tiers/assignments", params={"agentId": "AG900", "status": "ACTIVE"})).json()
    assert [a["tierCode"] for a in active] == ["PLATINUM"]

    superseded = (
        await client.get("/api/tiers/assignments", params={"agentId": "AG900", "status": "SUPERSEDED"})
    ).json()
    assert [a["tierCode"] for a in superseded] == ["GOLD"]
    assert superseded[0]["effectiveTo"] == "2026-01-01"

    agents = (await client.get("/api/agents")).json()
    assert agents[0]["tier"] == "PLATINUM"

    logs = (await client.get("/api/audit-logs", params={"module": "AGENT_TIER_ASSIGNMENT"})).json()
    assert {log["action"] for log in logs} == {"MANUAL_OVERRIDE"}
    assert len(logs) == 2


async def test_override_requires_justification(client):
    resp = await client.post("/api/tiers/override", json=override("GOLD", justification="too short"))
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "justification"


async def test_override_rejects_unknown_tier(client):
    resp = await client.post("/api/tiers/override", json=override("DIAMOND"))
    assert resp.status_code == 400


async def test_evaluate_reports_kpis_without_writing(client):
    await _setup_tiers(client)
    await client.post("/api/agents", json=agent_payload())
    for ref in ("PNR001", "PNR002"):
        resp = await client.post("/api/agents/AG900/bookings", json={"bookingRef": ref, "amount": 12000})
        assert resp.status_code == 201, resp.text

    resp = await client.post("/api/tiers/evaluate", json={"agentId": "AG900"})
    assert resp.status_code == 200
    result = resp.json()
    assert result["kpiData"]["totalBookings"] == 2
    assert result["kpiData"]["totalBookingValue"] == 24000
    assert result["currentTier"] == "BRONZE"
    assert result["recommendedTier"] == "GOLD"
    assert result["tierChangeRequired"] is True

    assert (await client.get("/api/tiers/assignments")).json() == []


async def test_auto_assign_only_changes_when_needed(client):
    await _setup_tiers(client)
    await client.post("/api/agents", json=agent_payload())
    await client.post("/api/agents", json=agent_payload(agentId="AG901"))
    for ref in ("PNR001", "PNR002"):
        await client.post("/api/agents/AG900/bookings", json={"bookingRef": ref, "amount": 5000})

    resp = await client.post("/api/tiers/assign", json={"agentIds": ["AG900", "AG901"]})
    assert resp.status_code == 200, resp.text
    outcome = resp.json()
    assert outcome["processed"] == 2
    assert [a["tierCode"] for a in outcome["assignments"]] == ["GOLD"]
    assert outcome["assignments"][0]["assignmentType"] == "AUTO"
    assert outcome["assignments"][0]["kpiSnapshot"]["totalBookings"] == 2
    assert {r["agentId"]: r["changed"] for r in outcome["results"]} == {"AG900": True, "AG901": False}

    again = (await client.post("/api/tiers/assign", json={"agentIds": ["AG900"]})).json()
    assert again["assignments"] == []
    assert again["results"][0]["previousTier"] == "GOLD"


async def test_bookings_need_a_known_agent(client):
    resp = await client.post("/api/agents/NOPE/bookings", json={"bookingRef": "PNR1", "amount": 100})
    assert resp.status_code == 404


async def test_tier_crud(client):
    resp = await client.post("/api/tiers", json={"tierCode": "SILVER", "displayName": "Silver"}, headers={"x-user": "admin"})
    assert resp.status_code == 201
    tier = resp.json()
    assert tier["createdBy"] == "admin"
    assert tier["kpiWindow"] == "QUARTERLY"

    resp = await client.put(f"/api/tiers/{tier['id']}", json={"kpiThresholds": {"totalBookingValueMin": 100000}})
    assert resp.json()["kpiThresholds"]["totalBookingValueMin"] == 100000

    assert (await client.delete(f"/api/tiers/{tier['id']}")).status_code == 204
    assert (await client.get(f"/api/tiers/{tier['id']}")).status_code == 404


async def _active_assignments(client, agent_id: str) -> list[dict]:
    resp = await client.get("/api/tiers/assignments", params={"agentId": agent_id, "status": "ACTIVE"})
    return resp.json()


async def test_auto_assign_leaves_exactly_one_active_assignment(client):
    await _setup_tiers(client)
    await client.post("/api/agents", json=agent_payload())
    await client.post("/api/tiers/override", json=override("SILVER"))
    for ref in ("PNR001", "PNR002"):
        await client.post("/api/agents/AG900/bookings", json={"bookingRef": ref, "amount": 5000})

    await client.post("/api/tiers/assign", json={"agentIds": ["AG900"]})
    active = await _active_assignments(client, "AG900")
    assert [a["tierCode"] for a in active] == ["GOLD"]
    assert active[0]["assignmentType"] == "AUTO"

    # A rerun with unchanged KPIs keeps the same single row
    await client.post("/api/tiers/assign", json={"agentIds": ["AG900"]})
    assert [a["id"] for a in await _active_assignments(client, "AG900")] == [active[0]["id"]]

    all_rows = (await client.get("/api/tiers/assignments", params={"agentId": "AG900"})).json()
    assert sorted(a["status"] for a in all_rows) == ["ACTIVE", "SUPERSEDED"]
