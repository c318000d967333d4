import csv
import io

import pytest

from payloads import agent_payload, fare_payload

pytestmark = pytest.mark.anyio


async def _fare_with_history(client):
    fare = (await client.post("/api/negofares", json=fare_payload(), headers={"x-user": "maker"})).json()
    await client.put(
        f"/api/negofares/{fare['id']}",
        json={"baseNetFare": 5200},
        headers={"x-user": "checker"},
    )
    return fare


async def test_every_mutation_is_logged_with_request_metadata(client):
    fare = await _fare_with_history(client)

    logs = (await client.get("/api/audit-logs", params={"entityId": fare["id"]})).json()
    assert sorted(log["action"] for log in logs) == ["CREATED", "UPDATED"]

    created = next(log for log in logs if log["action"] == "CREATED")
    assert created["user"] == "maker"
    assert created["module"] == "NEGOTIATED_FARE"
    assert created["beforeData"] is None
    assert created["afterData"]["fareCode"] == "DEL100"
    assert created["ipAddress"]


async def test_filters_by_module_user_and_search(client):
    await _fare_with_history(client)
    await client.post("/api/agents", json=agent_payload())

    by_module = (await client.get("/api/audit-logs", params={"module": "AGENT"})).json()
    assert [log["module"] for log in by_module] == ["AGENT"]

    by_user = (await client.get("/api/audit-logs", params={"user": "checker"})).json()
    assert [log["action"] for log in by_user] == ["UPDATED"]

    by_search = (await client.get("/api/audit-logs", params={"search": "checker"})).json()
    assert len(by_search) == 1

    limited = (await client.get("/api/audit-logs", params={"limit": 1})).json()
    assert len(limited) == 1


async def test_entity_history_and_single_log(client):
    fare = await _fare_with_history(client)

    history = (await client.get(f"/api/audit-logs/entity/{fare['id']}")).json()
    assert len(history) == 2

    resp = await client.get(f"/api/audit-logs/{history[0]['id']}")
    assert resp.status_code == 200
    assert resp.json()["entityId"] == fare["id"]


async def test_unknown_log_is_404(client):
    resp = await client.get("/api/audit-logs/00000000-0000-0000-0000-000000000000")
    assert resp.status_code == 404


async def test_csv_export(client):
    await _fare_with_history(client)

    resp = await client.get("/api/audit-logs/export", params={"format": "csv"})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    disposition = resp.headers["content-disposition"]
    assert disposition.startswith('attachment; filename="audit-logs-')
    assert disposition.endswith('.csv"')

    rows = list(csv.reader(io.StringIO(resp.text)))
    assert rows[0] == ["timestamp", "user", "module", "entityId", "action", "justification", "changes"]
    assert len(rows) == 3
    updated = next(r for r in rows[1:] if r[4] == "UPDATED")
    assert "baseNetFare: 5000.0 -> 5200.0" in updated[6]


async def test_pdf_export(client):
    await _fare_with_history(client)

    resp = await client.get("/api/audit-logs/export", params={"format": "pdf", "module": "NEGOTIATED_FARE"})
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"
    assert resp.content.startswith(b"%PDF")


async def test_unknown_export_format_is_400(client):
    resp = await client.get("/api/audit-logs/export", params={"format": "xml"})
    assert resp.status_code == 400


async def test_rollback_restores_fare(client):
    fare = await _fare_with_history(client)
    logs = (await client.get("/api/audit-logs", params={"entityId": fare["id"], "action": "UPDATED"})).json()

    resp = await client.post(
        f"/api/audit-logs/{logs[0]['id']}/rollback",
        json={"justification": "Wrong contract version"},
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["data"]["baseNetFare"] == 5000.0
    assert (await client.get(f"/api/negofares/{fare['id']}")).json()["baseNetFare"] == 5000


async def test_rollback_needs_a_before_snapshot(client):
    fare = (await client.post("/api/negofares", json=fare_payload())).json()
    logs = (await client.get("/api/audit-logs", params={"entityId": fare["id"]})).json()

    resp = await client.post(f"/api/audit-logs/{logs[0]['id']}/rollback", json={"justification": "undo"})
    assert resp.status_code == 400


async def test_rollback_unsupported_module(client):
    agent = (await client.post("/api/agents", json=agent_payload())).json()
    await client.put(f"/api/agents/{agent['id']}", json={"agencyName": "Renamed"})
    logs = (await client.get("/api/audit-logs", params={"module": "AGENT", "action": "UPDATED"})).json()

    resp = await client.post(f"/api/audit-logs/{logs[0]['id']}/rollback", json={"justification": "undo"})
    assert resp.status_code == 400
    assert "AGENT" in resp.json()["message"]


async def test_pdf_export_escapes_markup_in_user_text(client):
    fare = (await client.post("/api/negofares", json=fare_payload())).json()
    await client.put(f"/api/negofares/{fare['id']}", json={"remarks": "net < gross & <b"})
    updated = (await client.get("/api/audit-logs", params={"action": "UPDATED"})).json()[0]
    await client.post(
        f"/api/audit-logs/{updated['id']}/rollback", json={"justification": "<i>typo</i> & cleanup"}
    )

    resp = await client.get("/api/audit-logs/export", params={"format": "pdf", "search": "<b"})
    assert resp.status_code == 200, resp.text
    assert resp.content.startswith(b"%PDF")

    resp = await client.get("/api/audit-logs/export", params={"format": "pdf"})
    assert resp.status_code == 200, resp.text
