from datetime import datetime, timedelta, timezone


def _schedule(hours=8):
    start = datetime.now(timezone.utc).replace(microsecond=0)
    return {
        "scheduled_start": start.isoformat(),
        "scheduled_end": (start + timedelta(hours=hours)).isoformat(),
    }


def _open_shift(client, staff_id="S1", opening="500.00"):
    r = client.post("/shifts/", json={"staff_id": staff_id, **_schedule()})
    assert r.status_code == 200, r.text
    shift_id = r.json()["id"]
    r = client.post(f"/shifts/{shift_id}/start", json={"opening_cash_amount": opening})
    assert r.status_code == 200, r.text
    return r.json()


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_shift_lifecycle_over_http(client):
    shift = _open_shift(client)
    assert shift["status"] == "Active"
    assert shift["shift_type"] == "Regular"

    r = client.post(
        "/cash/transactions",
        json={
            "shift_id": shift["id"],
            "staff_id": "S1",
            "type": "Sale",
            "amount": "25.00",
            "previous_balance": "500.00",
            "new_balance": "525.00",
            "reference_id": "INV-1",
            "reference_type": "Invoice",
        },
    )
    assert r.status_code == 200, r.text
    sale = r.json()

    r = client.get(f"/cash/shifts/{shift['id']}/balance")
    assert r.json()["balance"] == "525.00"

    r = client.get("/shifts/active", params={"staff_id": "S1"})
    active = r.json()
    assert active["id"] == shift["id"]
    assert [t["type"] for t in active["recent_transactions"]] == ["Sale", "Opening"]

    r = client.post(f"/cash/transactions/{sale['id']}/verify", json={"verified_by": "M1"})
    assert r.json()["verified_by"] == "M1"

    r = client.post(f"/shifts/{shift['id']}/end", json={"closing_cash_amount": "480.00"})
    assert r.status_code == 200, r.text
    ended = r.json()
    assert ended["status"] == "Completed"
    assert ended["expected_cash_amount"] == "500.00"
    assert ended["cash_discrepancy"] == "-20.00"

    r = client.get(f"/shifts/{shift['id']}")
    detail = r.json()
    assert [t["type"] for t in detail["transactions"]] == ["Closing", "Sale", "Opening"]

    assert client.get("/shifts/active", params={"staff_id": "S1"}).json() is None


def test_cash_drawer_handover_over_http(client):
    sending = _open_shift(client, "S1")
    r = client.post(
        "/handovers/cash-drawer",
        json={"from_staff_id": "S1", "to_staff_id": "S2", "from_shift_id": sending["id"], "cash_amount": "600.00"},
    )
    assert r.status_code == 200, r.text
    handover = r.json()
    assert handover["important_notes"][0]["kind"] == "cash_snapshot"

    pending = client.get("/handovers/pending", params={"staff_id": "S2"}).json()
    assert [h["id"] for h in pending] == [handover["id"]]

    receiving = client.post("/shifts/", json={"staff_id": "S2", **_schedule()}).json()
    r = client.post(
        f"/handovers/{handover['id']}/cash-drawer/complete",
        json={"to_shift_id": receiving["id"], "confirmed_cash_amount": "600.00"},
    )
    assert r.status_code == 200, r.text
    assert r.json()["status"] == "Completed"

    txs = client.get(f"/cash/shifts/{receiving['id']}/transactions").json()
    assert [(t["type"], t["previous_balance"], t["new_balance"]) for t in txs] == [
        ("Handover", "0.00", "600.00"),
    ]

    history = client.get("/handovers/", params={"type": "CashDrawer", "staff_id": "S2"}).json()
    assert [h["id"] for h in history] == [handover["id"]]


def test_general_handover_over_http(client):
    r = client.post(
        "/handovers/",
        json={
            "from_staff_id": "S1",
            "to_staff_id": "S2",
            "pending_tasks": [{"task": "Call back Mrs. Ito"}],
            "important_notes": [{"kind": "note", "note": "X-ray room closed", "level": "warning"}],
        },
    )
    assert r.status_code == 200, r.text
    handover = r.json()
    assert handover["pending_tasks"][0]["priority"] == "medium"

    assert client.post(f"/handovers/{handover['id']}/accept", json={}).json()["status"] == "Accepted"
    assert client.post(f"/handovers/{handover['id']}/complete").json()["status"] == "Completed"


def test_reports_over_http(client):
    shift = _open_shift(client)
    client.post("/handovers/", json={"from_staff_id": "S1", "to_staff_id": "S2"})

    today = client.get("/reports/today").json()
    assert today == {"active_shifts": 1, "completed_shifts": 0, "pending_handovers": 1}

    now = datetime.now(timezone.utc)
    r = client.get(
        "/reports/shifts",
        params={
            "start_date": (now - timedelta(hours=1)).isoformat(),
            "end_date": (now + timedelta(hours=1)).isoformat(),
        },
    )
    assert r.status_code == 200, r.text
    report = r.json()
    assert [s["id"] for s in report["shifts"]] == [shift["id"]]
    assert report["summary"]["total_shifts"] == 1
    assert report["summary"]["average_shift_duration"] == 0


def test_not_found_maps_to_404(client):
    r = client.get("/shifts/424242")
    assert r.status_code == 404
    body = r.json()
    assert body["ok"] is False
    assert body["error"]["code"] == "not_found"
    assert body["error"]["details"] == {"entity": "Shift", "id": 424242}


def test_invalid_state_maps_to_409(client):
    _open_shift(client, "S1")
    r = client.post("/shifts/", json={"staff_id": "S1", **_schedule()})
    assert r.status_code == 409
    assert r.json()["error"]["code"] == "invalid_state"


def test_balance_mismatch_maps_to_422(client):
    shift = _open_shift(client)
    r = client.post(
        "/cash/transactions",
        json={
            "shift_id": shift["id"],
            "staff_id": "S1",
            "type": "Sale",
            "amount": "10.00",
            "previous_balance": "400.00",
            "new_balance": "410.00",
        },
    )
    assert r.status_code == 422
    error = r.json()["error"]
    assert error["code"] == "balance_mismatch"
    assert error["details"]["expected"] == "500.00"
    assert client.get(f"/cash/shifts/{shift['id']}/transactions").json()[0]["type"] == "Opening"
