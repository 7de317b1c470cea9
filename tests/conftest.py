import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from sentinelsight import queries
from sentinelsight.auth import create_access_token
from sentinelsight.db import get_db, init_db, make_engine
from sentinelsight.main import app


@pytest.fixture
def engine(tmp_path):
    test_engine = make_engine(f"sqlite:///{tmp_path / 'test.db'}")
    init_db(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session_factory):
    """Create a user with ``role`` and return its id, token and auth headers."""

    def _make(role: str, open_id: str | None = None):
        session = session_factory()
        try:
            user = queries.upsert_user(session, open_id or f"{role}-user", role=role, name=f"{role.title()} User")
            session.commit()
            token = create_access_token(user.open_id, user.role)
            return {
                "id": user.id,
                "token": token,
                "headers": {"Authorization": f"Bearer {token}"},
            }
        finally:
            session.close()

    return _make


@pytest.fixture
def admin(make_user):
    return make_user("admin")


@pytest.fixture
def operator(make_user):
    return make_user("operator")


@pytest.fixture
def viewer(make_user):
    return make_user("viewer")


@pytest.fixture
def site_id(client, admin):
    response = client.post(
        "/api/sites",
        json={"name": "Warehouse 1", "location": "Dock road"},
        headers=admin["headers"],
    )
    assert response.status_code == 201
    return response.json()["id"]


@pytest.fixture
def camera_id(client, operator, site_id):
    response = client.post(
        "/api/cameras",
        json={
            "site_id": site_id,
            "name": "Gate",
            "location_tag": "north",
            "rtsp_url": "rtsp://10.0.0.5:554/stream1",
        },
        headers=operator["headers"],
    )
    assert response.status_code == 201
    return response.json()["id"]


@pytest.fixture
def zone_id(client, operator, camera_id):
    response = client.post(
        "/api/zones",
        json={
            "camera_id": camera_id,
            "name": "Fence line",
            "zone_type": "intrusion",
            "polygon_points": [{"x": 0, "y": 0}, {"x": 100, "y": 0}, {"x": 100, "y": 50}],
        },
        headers=operator["headers"],
    )
    assert response.status_code == 201
    return response.json()["id"]
