from datetime import datetime, timezone


def test_create_camera_starts_offline(client, camera_id):
    response = client.get(f"/api/cameras/{camera_id}")
    assert response.status_code == 200
    camera = response.json()
    assert camera["status"] == "offline"
    assert camera["enabled"] is True
    assert camera["rtsp_url"] == "rtsp://10.0.0.5:554/stream1"
    assert camera["fps"] is None


def test_create_camera_rejects_invalid_url(client, operator, site_id):
    payload = {"site_id": site_id, "name": "Bad", "rtsp_url": "not a url"}
    response = client.post("/api/cameras", json=payload, headers=operator["headers"])
    assert response.status_code == 422


def test_create_camera_for_unknown_site(client, operator):
    payload = {"site_id": 777, "name": "Orphan", "rtsp_url": "rtsp://cam.local/live"}
    response = client.post("/api/cameras", json=payload, headers=operator["headers"])
    assert response.status_code == 404
    assert response.json()["detail"] == "Site not found"


def test_viewer_cannot_create_camera(client, viewer, site_id):
    payload = {"site_id": site_id, "name": "Cam", "rtsp_url": "rtsp://cam.local/live"}
    response = client.post("/api/cameras", json=payload, headers=viewer["headers"])
    assert response.status_code == 403
    assert response.json()["detail"] == "Operator or Admin access required"


def test_list_cameras_filtered_by_site(client, admin, operator, site_id, camera_id):
    other = client.post("/api/sites", json={"name": "Annex"}, headers=admin["headers"]).json()["id"]
    client.post(
        "/api/cameras",
        json={"site_id": other, "name": "Annex door", "rtsp_url": "rtsp://annex/live"},
        headers=operator["headers"],
    )

    all_cameras = client.get("/api/cameras").json()
    assert len(all_cameras) == 2

    site_cameras = client.get("/api/cameras", params={"site_id": site_id}).json()
    assert [c["id"] for c in site_cameras] == [camera_id]


def test_update_camera(client, operator, camera_id):
    response = client.patch(
        f"/api/cameras/{camera_id}",
        json={"name": "Gate (east)", "enabled": False},
        headers=operator["headers"],
    )
    assert response.status_code == 200

    camera = client.get(f"/api/cameras/{camera_id}").json()
    assert camera["name"] == "Gate (east)"
    assert camera["enabled"] is False


def test_update_camera_status(client, operator, camera_id):
    frame_time = datetime(2026, 3, 1, 12, 30, tzinfo=timezone.utc)
    response = client.patch(
        f"/api/cameras/{camera_id}/status",
        json={"status": "online", "last_frame_time": frame_time.isoformat(), "fps": 24.5},
        headers=operator["headers"],
    )
    assert response.status_code == 200

    camera = client.get(f"/api/cameras/{camera_id}").json()
    assert camera["status"] == "online"
    assert camera["fps"] == 24.5
    assert camera["last_frame_time"].startswith("2026-03-01T12:30:00")

    # last_frame_time is kept when omitted
    client.patch(f"/api/cameras/{camera_id}/status", json={"status": "error"}, headers=operator["headers"])
    camera = client.get(f"/api/cameras/{camera_id}").json()
    assert camera["status"] == "error"
    assert camera["last_frame_time"].startswith("2026-03-01T12:30:00")


def test_update_camera_status_rejects_unknown_status(client, operator, camera_id):
    response = client.patch(
        f"/api/cameras/{camera_id}/status",
        json={"status": "sleeping"},
        headers=operator["headers"],
    )
    assert response.status_code == 422


def test_delete_camera(client, operator, camera_id):
    response = client.delete(f"/api/cameras/{camera_id}", headers=operator["headers"])
    assert response.status_code == 200
    assert client.get(f"/api/cameras/{camera_id}").status_code == 404

    response = client.delete(f"/api/cameras/{camera_id}", headers=operator["headers"])
    assert response.status_code == 404


def test_recent_detections(client, operator, camera_id):
    for frame in range(3):
        response = client.post(
            "/api/detections",
            json={
                "camera_id": camera_id,
                "frame_number": frame,
                "timestamp": f"2026-03-01T12:00:0{frame}Z",
                "object_type": "person",
                "confidence": 0.8,
                "bounding_box": {"x": 10, "y": 20, "width": 30, "height": 60},
                "track_id": "track-7",
            },
            headers=operator["headers"],
        )
        assert response.status_code == 201

    response = client.get(f"/api/cameras/{camera_id}/detections", params={"limit": 2})
    assert response.status_code == 200
    detections = response.json()
    assert [d["frame_number"] for d in detections] == [2, 1]
    assert detections[0]["track_id"] == "track-7"


def test_detection_for_unknown_camera(client, operator):
    response = client.post(
        "/api/detections",
        json={"camera_id": 404, "object_type": "person", "confidence": 0.5},
        headers=operator["headers"],
    )
    assert response.status_code == 404
