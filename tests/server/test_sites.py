def test_health_check(client):
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "service" in data


def test_create_and_get_site(client, admin):
    response = client.post(
        "/api/sites",
        json={"name": "HQ", "location": "Main street", "description": "Head office"},
        headers=admin["headers"],
    )
    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True
    assert "id" in data

    response = client.get(f"/api/sites/{data['id']}")
    assert response.status_code == 200
    site = response.json()
    assert site["name"] == "HQ"
    assert site["location"] == "Main street"
    assert "created_at" in site


def test_list_sites_ordered_by_name(client, admin):
    for name in ["Zulu yard", "Alpha depot", "Mike tower"]:
        client.post("/api/sites", json={"name": name}, headers=admin["headers"])

    response = client.get("/api/sites")
    assert response.status_code == 200
    assert [s["name"] for s in response.json()] == ["Alpha depot", "Mike tower", "Zulu yard"]


def test_site_name_required(client, admin):
    response = client.post("/api/sites", json={"name": ""}, headers=admin["headers"])
    assert response.status_code == 422


def test_get_missing_site_returns_404(client):
    response = client.get("/api/sites/9999")
    assert response.status_code == 404
    assert response.json()["detail"] == "Site not found"


def test_site_writes_require_admin(client, operator, site_id):
    response = client.post("/api/sites", json={"name": "Nope"}, headers=operator["headers"])
    assert response.status_code == 403
    assert response.json()["detail"] == "Admin access required"

    response = client.delete(f"/api/sites/{site_id}", headers=operator["headers"])
    assert response.status_code == 403


def test_site_writes_require_authentication(client):
    response = client.post("/api/sites", json={"name": "Anonymous"})
    assert response.status_code == 401


def test_update_site_partial(client, admin, site_id):
    response = client.patch(
        f"/api/sites/{site_id}",
        json={"description": "Night shift only"},
        headers=admin["headers"],
    )
    assert response.status_code == 200

    site = client.get(f"/api/sites/{site_id}").json()
    assert site["name"] == "Warehouse 1"
    assert site["description"] == "Night shift only"


def test_update_site_rejects_null_name(client, admin, site_id):
    response = client.patch(f"/api/sites/{site_id}", json={"name": None}, headers=admin["headers"])
    assert response.status_code == 422


def test_update_missing_site_returns_404(client, admin):
    response = client.patch("/api/sites/4242", json={"name": "Ghost"}, headers=admin["headers"])
    assert response.status_code == 404


def test_delete_site_cascades_to_cameras(client, admin, site_id, camera_id):
    response = client.delete(f"/api/sites/{site_id}", headers=admin["headers"])
    assert response.status_code == 200
    assert response.json() == {"success": True, "id": site_id}

    assert client.get(f"/api/sites/{site_id}").status_code == 404
    assert client.get(f"/api/cameras/{camera_id}").status_code == 404
