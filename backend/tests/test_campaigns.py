import pytest

pytestmark = pytest.mark.anyio


def campaign_payload(**overrides) -> dict:
    payload = {
        "campaignCode": "DIWALI26",
        "campaignName": "Diwali getaways",
        "target": {"agentTiers": ["GOLD"], "pos": ["IN"]},
        "products": {"bundles": ["COMFORT"]},
        "offer": {"type": "PERCENT", "value": 15},
        "lifecycle": {"startDate": "2026-10-20", "endDate": "2026-11-10"},
    }
    payload.update(overrides)
    return payload


def day(date: str, **counts) -> dict:
    return {"metricDate": date, "sent": 100, "delivered": 90, "opened": 45, "clicked": 9, **counts}


async def test_create_campaign(client):
    resp = await client.post("/api/campaigns", json=campaign_payload(), headers={"x-user": "marketing"})
    assert resp.status_code == 201, resp.text
    campaign = resp.json()
    assert campaign["status"] == "DRAFT"
    assert campaign["createdBy"] == "marketing"
    assert campaign["target"]["agentTiers"] == ["GOLD"]
    assert campaign["lifecycle"]["frequency"] == "ONCE"

    resp = await client.patch(f"/api/campaigns/{campaign['id']}/status", json={"status": "ACTIVE"})
    assert resp.json()["status"] == "ACTIVE"


async def test_metrics_upsert_and_totals(client):
    await client.post("/api/campaigns", json=campaign_payload())

    await client.post("/api/campaigns/DIWALI26/metrics", json=day("2026-10-20", purchased=1))
    # Same day again replaces the counters
    resp = await client.post(
        "/api/campaigns/DIWALI26/metrics", json=day("2026-10-20", purchased=3, revenue=1500.5)
    )
    assert resp.status_code == 200
    assert resp.json()["purchased"] == 3
    await client.post("/api/campaigns/DIWALI26/metrics", json=day("2026-10-21"))

    metrics = (await client.get("/api/campaigns/DIWALI26/metrics")).json()
    assert [d["metricDate"] for d in metrics["daily"]] == ["2026-10-20", "2026-10-21"]
    totals = metrics["totals"]
    assert totals["sent"] == 200
    assert totals["purchased"] == 3
    assert totals["revenue"] == 1500.5
    assert totals["openRate"] == 50.0
    assert totals["clickRate"] == 20.0
    assert totals["conversionRate"] == 16.67

    ranged = (await client.get("/api/campaigns/DIWALI26/metrics", params={"startDate": "2026-10-21"})).json()
    assert len(ranged["daily"]) == 1


async def test_metrics_for_unknown_campaign_is_404(client):
    assert (await client.get("/api/campaigns/NOPE/metrics")).status_code == 404


async def test_delivery_events_move_forward_only(client):
    await client.post("/api/campaigns", json=campaign_payload())
    resp = await client.post(
        "/api/campaigns/DIWALI26/deliveries", json={"recipient": "agent@example.com", "channel": "EMAIL"}
    )
    assert resp.status_code == 201
    delivery = resp.json()
    assert delivery["status"] == "SENT"

    events = f"/api/campaigns/deliveries/{delivery['id']}/events"
    opened = (await client.post(events, json={"event": "OPENED"})).json()
    assert opened["status"] == "OPENED"
    assert opened["openedAt"] is not None

    late = (await client.post(events, json={"event": "DELIVERED"})).json()
    assert late["status"] == "OPENED"

    bought = (await client.post(events, json={"event": "PURCHASED", "purchaseAmount": 2500})).json()
    assert bought["status"] == "PURCHASED"
    assert bought["purchaseAmount"] == 2500

    assert (await client.post(events, json={"event": "FAILED"})).status_code == 400

    listed = (await client.get("/api/campaigns/DIWALI26/deliveries")).json()
    assert [d["id"] for d in listed] == [delivery["id"]]


async def test_failed_delivery_takes_no_further_events(client):
    await client.post("/api/campaigns", json=campaign_payload())
    delivery = (
        await client.post("/api/campaigns/DIWALI26/deliveries", json={"recipient": "+9100000", "channel": "WHATSAPP"})
    ).json()

    events = f"/api/campaigns/deliveries/{delivery['id']}/events"
    assert (await client.post(events, json={"event": "FAILED"})).json()["status"] == "FAILED"
    assert (await client.post(events, json={"event": "OPENED"})).status_code == 400


async def test_unknown_delivery_is_404(client):
    resp = await client.post(
        "/api/campaigns/deliveries/00000000-0000-0000-0000-000000000000/events", json={"event": "OPENED"}
    )
    assert resp.status_code == 404
