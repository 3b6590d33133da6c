import pytest

from backend.errors import NotFoundError


def test_contact_without_witnesses(client, advocate, event_id, notifier):
    _, headers = advocate
    response = client.post(
        f"/api/events/{event_id}/contact-witnesses",
        json={"message": "check-in"},
        headers=headers,
    )

    assert response.status_code == 400
    assert response.get_json()["error"] == "no witnesses subscribed to this event"
    assert notifier.calls == []

    # The count on the same event is simply zero
    count = client.get(f"/api/events/{event_id}/witness-count", headers=headers)
    assert count.status_code == 200
    assert count.get_json() == {"count": 0}


def test_witness_count_for_missing_event_is_zero(client, advocate):
    _, headers = advocate
    response = client.get("/api/events/404/witness-count", headers=headers)
    assert response.status_code == 200
    assert response.get_json() == {"count": 0}


def test_contact_missing_event(client, advocate):
    _, headers = advocate
    response = client.post("/api/events/404/contact-witnesses", json={"message": "hi"}, headers=headers)
    assert response.status_code == 404
    assert response.get_json()["error"] == "event not found"


@pytest.mark.parametrize("payload", [{}, {"message": ""}, {"message": 42}])
def test_contact_requires_message(client, advocate, event_id, payload):
    _, headers = advocate
    response = client.post(f"/api/events/{event_id}/contact-witnesses", json=payload, headers=headers)
    assert response.status_code == 400
    assert response.get_json()["error"] == "message is required"


def test_contact_dispatches_to_subscribers(client, make_user, advocate, event_id, notifier):
    _, advocate_headers = advocate
    for email in ["w1@example.com", "w2@example.com"]:
        _, headers = make_user(email)
        client.post(f"/api/events/{event_id}/subscribe", headers=headers)

    response = client.post(
        f"/api/events/{event_id}/contact-witnesses",
        json={"message": "please get in touch"},
        headers=advocate_headers,
    )

    assert response.status_code == 200
    assert response.get_json() == {"message": "Witnesses notified", "count": 2}
    assert notifier.calls == [(event_id, ["w1@example.com", "w2@example.com"], "please get in touch")]


def test_unsubscribed_witness_is_not_contacted(client, make_user, advocate, event_id, notifier):
    _, advocate_headers = advocate
    _, stays = make_user("stays@example.com")
    _, leaves = make_user("leaves@example.com")
    client.post(f"/api/events/{event_id}/subscribe", headers=stays)
    client.post(f"/api/events/{event_id}/subscribe", headers=leaves)
    client.delete(f"/api/events/{event_id}/subscribe", headers=leaves)

    client.post(f"/api/events/{event_id}/contact-witnesses", json={"message": "hi"}, headers=advocate_headers)

    assert notifier.calls[0][1] == ["stays@example.com"]


def test_log_notifier_reports_recipients(caplog):
    from backend.witness_service.notifier import LogNotifier

    with caplog.at_level("INFO"):
        sent = LogNotifier().dispatch(3, ["a@x.com"], "hello")

    assert sent == 1
    assert "a@x.com" in caplog.text
    assert "hello" in caplog.text


def test_reporting_scenario(client, context):
    # Spotter A registers, logs in and reports an arrest
    client.post("/api/register", json={"email": "a@x.com", "password": "pw1", "role": "spotter"})
    token_a = client.post("/api/login", json={"email": "a@x.com", "password": "pw1"}).get_json()["token"]
    headers_a = {"Authorization": f"Bearer {token_a}"}

    created = client.post("/api/events", json={"latitude": 1.0, "longitude": 2.0}, headers=headers_a)
    assert created.status_code == 201
    n = created.get_json()["id"]

    # User B subscribes twice
    client.post("/api/register", json={"email": "b@x.com", "password": "pw2"})
    token_b = client.post("/api/login", json={"email": "b@x.com", "password": "pw2"}).get_json()["token"]
    headers_b = {"Authorization": f"Bearer {token_b}"}
    assert client.post(f"/api/events/{n}/subscribe", headers=headers_b).status_code == 200
    assert client.post(f"/api/events/{n}/subscribe", headers=headers_b).status_code == 200

    # Advocate C reviews
    client.post("/api/register", json={"email": "c@x.com", "password": "pw3", "role": "advocate"})
    token_c = client.post("/api/login", json={"email": "c@x.com", "password": "pw3"}).get_json()["token"]
    headers_c = {"Authorization": f"Bearer {token_c}"}

    count = client.get(f"/api/events/{n}/witness-count", headers=headers_c)
    assert count.get_json() == {"count": 1}

    contacted = client.post(f"/api/events/{n}/contact-witnesses", json={"message": "check-in"}, headers=headers_c)
    assert contacted.status_code == 200

    # Contacting witnesses of an event that does not exist
    missing = client.post(f"/api/events/{n + 1}/contact-witnesses", json={"message": "check-in"}, headers=headers_c)
    assert missing.status_code == 404
    with pytest.raises(NotFoundError):
        context.witnesses.contact_witnesses(n + 1, "check-in")

    # Spotter A is stopped by the role check before the event lookup
    blocked = client.post(f"/api/events/{n + 1}/contact-witnesses", json={"message": "check-in"}, headers=headers_a)
    assert blocked.status_code == 403
