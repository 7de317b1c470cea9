from sentinelsight.auth import create_access_token
from sentinelsight.config import settings


def test_me_anonymous_returns_null(client):
    response = client.get("/api/auth/me")
    assert response.status_code == 200
    assert response.json() is None


def test_me_with_bearer_token(client, operator):
    response = client.get("/api/auth/me", headers=operator["headers"])
    assert response.status_code == 200
    body = response.json()
    assert body["id"] == operator["id"]
    assert body["open_id"] == "operator-user"
    assert body["role"] == "operator"


def test_me_with_session_cookie(client, viewer):
    client.cookies.set(settings.session_cookie_name, viewer["token"])
    response = client.get("/api/auth/me")
    assert response.json()["role"] == "viewer"


def test_invalid_token_is_rejected(client):
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Could not validate credentials"


def test_expired_token_is_rejected(client, viewer):
    token = create_access_token("viewer-user", "viewer", expires_minutes=-1)
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_token_for_unknown_user(client):
    token = create_access_token("ghost", "admin")
    response = client.get("/api/sites", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["detail"] == "User not found"


def test_role_comes_from_database_not_token(client, viewer):
    # A viewer cannot escalate by forging the role claim in a validly signed token
    token = create_access_token("viewer-user", "admin")
    response = client.post(
        "/api/sites",
        json={"name": "Nope"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 403


def test_logout_clears_cookie(client):
    response = client.post("/api/auth/logout")
    assert response.status_code == 200
    assert response.json() == {"success": True, "id": None}
    assert settings.session_cookie_name in response.headers["set-cookie"]
