import pytest

from payloads import fare_payload

pytestmark = pytest.mark.anyio


async def test_overlapping_fare_is_rejected_with_conflict_list(client):
    resp = await client.post("/api/negofares", json=fare_payload(), headers={"x-user": "pricing.admin"})
    assert resp.status_code == 201, resp.text
    first = resp.json()
    assert first["status"] == "ACTIVE"
    assert first["baseNetFare"] == 5000
    assert first["eligibleAgentTiers"] == ["BRONZE"]

    resp = await client.post("/api/negofares", json=fare_payload(fareCode="DEL200", baseNetFare=4800))
    assert resp.status_code == 409, resp.text
    body = resp.json()
    assert len(body["conflicts"]) == 1
    assert body["conflicts"][0]["id"] == first["id"]


async def test_other_cabin_does_not_conflict(client):
    assert (await client.post("/api/negofares", json=fare_payload())).status_code == 201
    resp = await client.post("/api/negofares", json=fare_payload(cabinClass="BUSINESS"))
    assert resp.status_code == 201, resp.text


async def test_inactive_fare_skips_conflict_check(client):
    assert (await client.post("/api/negofares", json=fare_payload())).status_code == 201
    resp = await client.post("/api/negofares", json=fare_payload(status="INACTIVE"))
    assert resp.status_code == 201, resp.text

    # Reactivating it would overlap the active fare
    resp = await client.patch(f"/api/negofares/{resp.json()['id']}/status", json={"status": "ACTIVE"})
    assert resp.status_code == 409


async def test_invalid_payload_is_400(client):
    resp = await client.post("/api/negofares", json=fare_payload(airlineCode="AIR", tripType="SPACE"))
    assert resp.status_code == 400
    body = resp.json()
    assert body["message"] == "Validation failed"
    fields = {e["field"] for e in body["errors"]}
    assert "airlineCode" in fields
    assert "tripType" in fields


async def test_window_ending_before_start_is_400(client):
    resp = await client.post(
        "/api/negofares",
        json=fare_payload(bookingStartDate="2026-05-01", bookingEndDate="2026-04-01"),
    )
    assert resp.status_code == 400


async def test_update_status_and_delete_are_audited(client):
    fare = (await client.post("/api/negofares", json=fare_payload())).json()

    resp = await client.put(f"/api/negofares/{fare['id']}", json={"baseNetFare": 5200})
    assert resp.status_code == 200, resp.text
    assert resp.json()["baseNetFare"] == 5200

    resp = await client.patch(f"/api/negofares/{fare['id']}/status", json={"status": "ARCHIVED"})
    assert resp.status_code == 400

    resp = await client.patch(f"/api/negofares/{fare['id']}/status", json={"status": "INACTIVE"})
    assert resp.json()["status"] == "INACTIVE"

    assert (await client.delete(f"/api/negofares/{fare['id']}")).status_code == 204
    assert (await client.get(f"/api/negofares/{fare['id']}")).status_code == 404

    logs = (await client.get("/api/audit-logs", params={"entityId": fare["id"]})).json()
    assert sorted(log["action"] for log in logs) == ["CREATED", "DELETED", "STATUS_CHANGED", "UPDATED"]
    update = next(log for log in logs if log["action"] == "UPDATED")
    assert update["diff"]["baseNetFare"] == {"from": 5000.0, "to": 5200.0}


async def test_list_filters(client):
    await client.post("/api/negofares", json=fare_payload())
    await client.post("/api/negofares", json=fare_payload(origin="BLR", destination="DEL"))

    resp = await client.get("/api/negofares", params={"origin": "BLR"})
    assert [f["origin"] for f in resp.json()] == ["BLR"]
    assert len((await client.get("/api/negofares")).json()) == 2


async def test_upload_reports_inserted_conflicts_and_errors(client):
    header = (
        "airlineCode,fareCode,origin,destination,tripType,cabinClass,baseNetFare,currency,"
        "bookingStartDate,bookingEndDate,travelStartDate,travelEndDate,pos,eligibleAgentTiers\n"
    )
    rows = [
        "AI,F1,DEL,BOM,ONE_WAY,ECONOMY,5000,INR,2026-01-01,2026-03-31,2026-01-01,2026-06-30,IN|AE,GOLD|SILVER",
        # overlaps row 1 within the file
        "AI,F2,DEL,BOM,ONE_WAY,ECONOMY,4900,INR,2026-02-01,2026-02-28,2026-02-01,2026-02-28,IN,",
        "AI,F3,DEL,BOM,ONE_WAY,ECONOMY,-1,INR,2026-01-01,2026-03-31,2026-01-01,2026-06-30,IN,",
        "AI,F4,BOM,DEL,ROUND_TRIP,BUSINESS,15000,inr,2026-01-01,2026-03-31,2026-01-01,2026-06-30,,",
    ]
    content = (header + "\n".join(rows) + "\n").encode("utf-8")

    resp = await client.post(
        "/api/negofares/upload", files={"file": ("fares.csv", content, "text/csv")}
    )
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert (body["inserted"], body["conflicts"], body["errors"]) == (2, 1, 1)
    assert body["data"]["conflicts"][0]["row"] == 2
    assert body["data"]["errors"][0]["row"] == 3

    inserted = {f["fareCode"]: f for f in body["data"]["inserted"]}
    assert inserted["F1"]["pos"] == ["IN", "AE"]
    assert inserted["F1"]["eligibleAgentTiers"] == ["GOLD", "SILVER"]
    assert inserted["F4"]["eligibleAgentTiers"] == ["BRONZE"]
    assert inserted["F4"]["currency"] == "INR"

    logs = (await client.get("/api/audit-logs", params={"action": "UPLOADED"})).json()
    assert len(logs) == 2


async def test_upload_without_file_is_400(client):
    resp = await client.post("/api/negofares/upload")
    assert resp.status_code == 400


@pytest.mark.parametrize(
    "change, field",
    [
        ({"bookingEndDate": "2000-01-01"}, "bookingEndDate"),
        ({"travelStartDate": "2099-01-01"}, "travelEndDate"),
    ],
)
async def test_partial_update_cannot_invert_a_window(client, change, field):
    fare = (await client.post("/api/negofares", json=fare_payload())).json()

    resp = await client.put(f"/api/negofares/{fare['id']}", json=change)
    assert resp.status_code == 400
    assert field in resp.json()["message"]

    stored = (await client.get(f"/api/negofares/{fare['id']}")).json()
    assert stored["bookingEndDate"] == fare["bookingEndDate"]
    assert stored["travelStartDate"] == fare["travelStartDate"]
    logs = (await client.get("/api/audit-logs", params={"entityId": fare["id"]})).json()
    assert [log["action"] for log in logs] == ["CREATED"]


async def test_partial_update_moving_one_end_is_accepted(client):
    fare = (await client.post("/api/negofares", json=fare_payload())).json()

    resp = await client.put(f"/api/negofares/{fare['id']}", json={"travelEndDate": "2099-12-31"})
    assert resp.status_code == 200, resp.text
    assert resp.json()["travelEndDate"] == "2099-12-31"
