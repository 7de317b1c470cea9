import logging

import pytest


@pytest.fixture
def subscribers(client, make_user, camera_id):
    gate_watcher = make_user("viewer", open_id="gate-watcher")
    everything = make_user("viewer", open_id="everything")
    loiter_only = make_user("viewer", open_id="loiter-only")

    client.post(
        "/api/alerts/subscriptions",
        json={"camera_id": camera_id, "rule_type": "intrusion"},
        headers=gate_watcher["headers"],
    )
    # Two matching subscriptions still yield a single notification
    client.post("/api/alerts/subscriptions", json={"rule_type": "all"}, headers=everything["headers"])
    client.post("/api/alerts/subscriptions", json={"rule_type": "intrusion"}, headers=everything["headers"])
    client.post("/api/alerts/subscriptions", json={"rule_type": "loitering"}, headers=loiter_only["headers"])
    return {"gate_watcher": gate_watcher, "everything": everything, "loiter_only": loiter_only}


def _ingest_intrusion(client, operator, camera_id):
    response = client.post(
        "/api/events",
        json={"camera_id": camera_id, "rule_type": "intrusion", "object_type": "person", "confidence": 0.88},
        headers=operator["headers"],
    )
    assert response.status_code == 201
    return response.json()["id"]


def test_event_notifies_matching_subscribers(client, operator, camera_id, subscribers):
    event_id = _ingest_intrusion(client, operator, camera_id)

    for name in ("gate_watcher", "everything"):
        notifications = client.get("/api/notifications", headers=subscribers[name]["headers"]).json()
        assert len(notifications) == 1
        notification = notifications[0]
        assert notification["event_id"] == event_id
        assert notification["severity"] == "critical"
        assert notification["type"] == "intrusion"
        assert notification["read"] is False
        assert notification["title"] == "Intrusion detected on Gate"
        assert notification["metadata"]["object_type"] == "person"

    assert client.get("/api/notifications", headers=subscribers["loiter_only"]["headers"]).json() == []


def test_subscription_for_other_camera_does_not_match(client, operator, admin, camera_id, subscribers):
    other_site = client.post("/api/sites", json={"name": "Other"}, headers=admin["headers"]).json()["id"]
    other_camera = client.post(
        "/api/cameras",
        json={"site_id": other_site, "name": "Other cam", "rtsp_url": "rtsp://other/live"},
        headers=operator["headers"],
    ).json()["id"]
    _ingest_intrusion(client, operator, other_camera)

    assert client.get("/api/notifications", headers=subscribers["gate_watcher"]["headers"]).json() == []
    assert len(client.get("/api/notifications", headers=subscribers["everything"]["headers"]).json()) == 1


def test_mark_read_and_unread_count(client, operator, camera_id, subscribers):
    _ingest_intrusion(client, operator, camera_id)
    _ingest_intrusion(client, operator, camera_id)
    headers = subscribers["everything"]["headers"]

    assert client.get("/api/notifications/unread-count", headers=headers).json() == {"unread": 2}

    first = client.get("/api/notifications", headers=headers).json()[0]
    response = client.post(f"/api/notifications/{first['id']}/read", headers=headers)
    assert response.status_code == 200
    assert client.get("/api/notifications/unread-count", headers=headers).json() == {"unread": 1}

    unread = client.get("/api/notifications", params={"unread_only": True}, headers=headers).json()
    assert len(unread) == 1
    assert unread[0]["id"] != first["id"]

    assert client.post("/api/notifications/read-all", headers=headers).status_code == 200
    assert client.get("/api/notifications/unread-count", headers=headers).json() == {"unread": 0}
    assert all(n["read_at"] is not None for n in client.get("/api/notifications", headers=headers).json())


def test_cannot_mark_other_users_notification(client, operator, camera_id, subscribers):
    _ingest_intrusion(client, operator, camera_id)
    notification = client.get("/api/notifications", headers=subscribers["everything"]["headers"]).json()[0]

    response = client.post(
        f"/api/notifications/{notification['id']}/read",
        headers=subscribers["gate_watcher"]["headers"],
    )
    assert response.status_code == 404


def test_notifications_require_authentication(client):
    assert client.get("/api/notifications").status_code == 401


def test_reads_are_logged_with_user(client, operator, camera_id, subscribers, caplog):
    caplog.set_level(logging.INFO, logger="sentinelsight.routes")
    event_id = _ingest_intrusion(client, operator, camera_id)
    user = subscribers["everything"]
    notification = client.get("/api/notifications", headers=user["headers"]).json()[0]

    client.post(f"/api/notifications/{notification['id']}/read", headers=user["headers"])
    client.post("/api/notifications/read-all", headers=user["headers"])

    messages = [r.getMessage() for r in caplog.records if r.levelno == logging.INFO]
    assert f"Event {event_id} (intrusion) stored for camera {camera_id} by user id={operator['id']}" in messages
    assert f"Notification {notification['id']} marked read by user id={user['id']}" in messages
    assert f"Marked 0 notification(s) read for user id={user['id']}" in messages
