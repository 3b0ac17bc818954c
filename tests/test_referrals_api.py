from __future__ import annotations

import pytest


REQUIRED_FIELDS = (
    "referrerName",
    "referrerEmail",
    "referrerPhone",
    "refereeName",
    "refereeEmail",
    "refereePhone",
    "course",
)


def _payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "referrerName": "Asha Rao",
        "referrerEmail": "asha@example.com",
        "referrerPhone": "9876543210",
        "refereeName": "Vikram Shah",
        "refereeEmail": "vikram@example.com",
        "refereePhone": "9123456780",
        "course": "Data Science",
    }
    payload.update(overrides)
    return payload


def _create(api_client, **overrides: object) -> int:
    resp = api_client.post("/api/referrals", json=_payload(**overrides))
    assert resp.status_code == 201, resp.text
    return int(resp.json()["id"])


def test_create_then_list_shows_pending_referral(api_client) -> None:
    resp = api_client.post("/api/referrals", json=_payload())
    assert resp.status_code == 201
    body = resp.json()
    assert isinstance(body["id"], int) and body["id"] > 0
    assert body["message"] == "Referral created successfully"

    listed = api_client.get("/api/referrals")
    assert listed.status_code == 200
    rows = listed.json()
    assert len(rows) == 1
    row = rows[0]
    assert row["id"] == body["id"]
    assert row["status"] == "pending"
    assert row["referrer_name"] == "Asha Rao"
    assert row["referrer_email"] == "asha@example.com"
    assert row["referrer_phone"] == "9876543210"
    assert row["referee_name"] == "Vikram Shah"
    assert row["referee_email"] == "vikram@example.com"
    assert row["referee_phone"] == "9123456780"
    assert row["course"] == "Data Science"
    assert row["created_at"]
    assert row["updated_at"]


def test_create_rejects_short_phone(api_client) -> None:
    resp = api_client.post("/api/referrals", json=_payload(referrerPhone="12345"))
    assert resp.status_code == 400
    assert resp.json() == {"error": "Phone number must be 10 digits"}


def test_create_rejects_bad_email(api_client) -> None:
    resp = api_client.post("/api/referrals", json=_payload(refereeEmail="vikram"))
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid email format"}


@pytest.mark.parametrize("field", REQUIRED_FIELDS)
def test_create_missing_field_persists_nothing(api_client, field: str) -> None:
    payload = _payload()
    del payload[field]
    resp = api_client.post("/api/referrals", json=payload)
    assert resp.status_code == 400
    assert resp.json() == {"error": "All fields are required"}
    assert api_client.get("/api/referrals").json() == []


def test_create_reports_first_failing_rule_across_types(api_client) -> None:
    resp = api_client.post(
        "/api/referrals",
        json=_payload(referrerName="", referrerEmail="nope", refereePhone=9876543210),
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "All fields are required"}

    resp = api_client.post(
        "/api/referrals", json=_payload(referrerEmail="nope", refereePhone="123")
    )
    assert resp.json() == {"error": "Invalid email format"}


def test_create_without_body_reports_required_fields(api_client) -> None:
    resp = api_client.post("/api/referrals")
    assert resp.status_code == 400
    assert resp.json() == {"error": "All fields are required"}


def test_create_with_non_string_field_counts_as_missing(api_client) -> None:
    resp = api_client.post("/api/referrals", json=_payload(referrerPhone=9876543210))
    assert resp.status_code == 400
    assert resp.json() == {"error": "All fields are required"}
    assert api_client.get("/api/referrals").json() == []


@pytest.mark.parametrize("body", [["referrerName"], "referral", 42])
def test_create_with_non_object_body_is_bad_request(api_client, body: object) -> None:
    resp = api_client.post("/api/referrals", json=body)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid request body"}


def test_list_by_referrer_filters_and_keeps_order(api_client) -> None:
    a1 = _create(api_client, referrerEmail="a@example.com")
    _create(api_client, referrerEmail="b@example.com")
    a2 = _create(api_client, referrerEmail="a@example.com")

    resp = api_client.get("/api/referrals/referrer/a@example.com")
    assert resp.status_code == 200
    ids = [r["id"] for r in resp.json()]
    assert set(ids) == {a1, a2}

    everything = [
        r["id"]
        for r in api_client.get("/api/referrals").json()
        if r["referrer_email"] == "a@example.com"
    ]
    assert ids == everything


def test_list_by_unknown_referrer_is_empty(api_client) -> None:
    _create(api_client)
    resp = api_client.get("/api/referrals/referrer/nobody@example.com")
    assert resp.status_code == 200
    assert resp.json() == []


def test_update_status_success(api_client) -> None:
    rid = _create(api_client)
    resp = api_client.patch(f"/api/referrals/{rid}", json={"status": "contacted"})
    assert resp.status_code == 200
    assert resp.json() == {"message": "Referral status updated successfully"}

    row = api_client.get("/api/referrals").json()[0]
    assert row["status"] == "contacted"


def test_update_status_can_move_backwards(api_client) -> None:
    rid = _create(api_client)
    assert api_client.patch(f"/api/referrals/{rid}", json={"status": "completed"}).status_code == 200
    assert api_client.patch(f"/api/referrals/{rid}", json={"status": "pending"}).status_code == 200
    assert api_client.get("/api/referrals").json()[0]["status"] == "pending"


@pytest.mark.parametrize(
    "status", ["cancelled", "", "Pending", None, 1, ["pending"], {"status": "pending"}]
)
def test_update_status_rejects_unknown_values(api_client, status: object) -> None:
    rid = _create(api_client)
    api_client.patch(f"/api/referrals/{rid}", json={"status": "enrolled"})

    resp = api_client.patch(f"/api/referrals/{rid}", json={"status": status})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Valid status is required"}
    assert api_client.get("/api/referrals").json()[0]["status"] == "enrolled"


def test_update_status_without_body(api_client) -> None:
    rid = _create(api_client)
    resp = api_client.patch(f"/api/referrals/{rid}")
    assert resp.status_code == 400
    assert resp.json() == {"error": "Valid status is required"}


def test_update_missing_referral_is_not_found(api_client) -> None:
    resp = api_client.patch("/api/referrals/999999", json={"status": "enrolled"})
    assert resp.status_code == 404
    assert resp.json() == {"error": "Referral not found"}
    assert api_client.get("/api/referrals").json() == []


@pytest.mark.parametrize("raw_id", ["abc", "1abc", "12abc", "1.0", "-1"])
def test_update_non_numeric_id_is_not_found(api_client, raw_id: str) -> None:
    rid = _create(api_client)
    assert rid == 1
    resp = api_client.patch(f"/api/referrals/{raw_id}", json={"status": "enrolled"})
    assert resp.status_code == 404
    assert resp.json() == {"error": "Referral not found"}
    assert api_client.get("/api/referrals").json()[0]["status"] == "pending"


def test_status_is_validated_before_id_lookup(api_client) -> None:
    resp = api_client.patch("/api/referrals/999999", json={"status": "lost"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Valid status is required"}


def test_statistics_after_three_referrals_and_one_completed(api_client) -> None:
    ids = [_create(api_client, refereeName=f"Referee {i}") for i in range(3)]
    api_client.patch(f"/api/referrals/{ids[1]}", json={"status": "completed"})

    resp = api_client.get("/api/statistics")
    assert resp.status_code == 200
    assert resp.json() == {
        "total_referrals": 3,
        "pending_referrals": 2,
        "contacted_referrals": 0,
        "enrolled_referrals": 0,
        "completed_referrals": 1,
    }


def test_statistics_on_empty_store(api_client) -> None:
    resp = api_client.get("/api/statistics")
    assert resp.status_code == 200
    assert resp.json() == {
        "total_referrals": 0,
        "pending_referrals": 0,
        "contacted_referrals": 0,
        "enrolled_referrals": 0,
        "completed_referrals": 0,
    }


def test_statistics_sum_matches_total(api_client) -> None:
    ids = [_create(api_client, refereeName=f"Referee {i}") for i in range(8)]
    for rid, status in zip(ids, ["contacted", "enrolled", "completed", "enrolled"]):
        api_client.patch(f"/api/referrals/{rid}", json={"status": status})

    stats = api_client.get("/api/statistics").json()
    assert stats["total_referrals"] == 8
    assert (
        stats["pending_referrals"]
        + stats["contacted_referrals"]
        + stats["enrolled_referrals"]
        + stats["completed_referrals"]
        == stats["total_referrals"]
    )
    assert stats["pending_referrals"] == 4
    assert stats["enrolled_referrals"] == 2
