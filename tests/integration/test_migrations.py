from pathlib import Path
import sqlite3

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

ALEMBIC_INI = Path(__file__).resolve().parents[2] / "alembic.ini"

EXPECTED_TABLES = {
    "users",
    "sites",
    "cameras",
    "zones",
    "rules",
    "events",
    "detections",
    "alert_subscriptions",
    "notifications",
    "audit_logs",
}


def _upgrade(tmp_path, monkeypatch):
    db_file = tmp_path / "migrated.db"
    db_url = f"sqlite:///{db_file}"
    monkeypatch.setenv("DATABASE_URL", db_url)

    # Run alembic upgrade head programmatically so we don't rely on console scripts
    command.upgrade(Config(str(ALEMBIC_INI)), "head")
    return db_file, db_url


def test_upgrade_creates_schema(tmp_path, monkeypatch):
    _, db_url = _upgrade(tmp_path, monkeypatch)

    engine = create_engine(db_url)
    try:
        inspector = inspect(engine)
        assert EXPECTED_TABLES <= set(inspector.get_table_names())
        event_indexes = {ix["name"] for ix in inspector.get_indexes("events")}
        assert {"ix_events_timestamp", "ix_events_camera_id", "ix_events_camera_timestamp"} <= event_indexes
    finally:
        engine.dispose()


def test_fk_cascade_after_migrations(tmp_path, monkeypatch):
    db_file, _ = _upgrade(tmp_path, monkeypatch)

    conn = sqlite3.connect(str(db_file))
    conn.execute("PRAGMA foreign_keys=ON")
    cur = conn.cursor()
    cur.execute("INSERT INTO sites(id, name) VALUES(1, 'HQ')")
    cur.execute(
        "INSERT INTO cameras(id, site_id, name, rtsp_url, status, enabled) "
        "VALUES(1, 1, 'Gate', 'rtsp://gate/live', 'offline', 1)"
    )
    cur.execute(
        "INSERT INTO events(camera_id, rule_type, object_type, confidence) VALUES(1, 'intrusion', 'person', 0.9)"
    )
    conn.commit()

    cur.execute("DELETE FROM sites WHERE id = 1")
    conn.commit()
    assert cur.execute("SELECT COUNT(*) FROM cameras").fetchone()[0] == 0
    assert cur.execute("SELECT COUNT(*) FROM events").fetchone()[0] == 0
    conn.close()


def test_downgrade_to_base(tmp_path, monkeypatch):
    _, db_url = _upgrade(tmp_path, monkeypatch)
    command.downgrade(Config(str(ALEMBIC_INI)), "base")

    engine = create_engine(db_url)
    try:
        assert not EXPECTED_TABLES & set(inspect(engine).get_table_names())
    finally:
        engine.dispose()
