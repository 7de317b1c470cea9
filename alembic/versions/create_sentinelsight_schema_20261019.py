"""Create SentinelSight schema

Revision ID: create_sentinelsight_schema_20261019
Revises:
Create Date: 2026-10-19 09:00:00.000000

Creates users, sites, cameras, zones, rules, events, detections,
alert_subscriptions, notifications and audit_logs.
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "create_sentinelsight_schema_20261019"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ENUM_TYPES = (
    "user_role",
    "camera_status",
    "zone_type",
    "rule_type",
    "object_type",
    "notification_severity",
    "notification_type",
)


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    """Upgrade schema: create all tables."""
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("open_id", sa.String(64), nullable=False, unique=True),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("email", sa.String(320), nullable=True),
        sa.Column("login_method", sa.String(64), nullable=True),
        sa.Column(
            "role",
            sa.Enum("user", "admin", "operator", "viewer", name="user_role"),
            nullable=False,
        ),
        *_timestamps(),
        sa.Column("last_signed_in", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "sites",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "cameras",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("site_id", sa.Integer(), sa.ForeignKey("sites.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("location_tag", sa.String(255), nullable=True),
        sa.Column("rtsp_url", sa.String(512), nullable=False),
        sa.Column(
            "status",
            sa.Enum("online", "offline", "error", name="camera_status"),
            nullable=False,
        ),
        sa.Column("fps", sa.Numeric(5, 2), nullable=True),
        sa.Column("last_frame_time", sa.DateTime(), nullable=True),
        sa.Column("enabled", sa.Boolean(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "zones",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("camera_id", sa.Integer(), sa.ForeignKey("cameras.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("polygon_points", sa.JSON(), nullable=True),
        sa.Column(
            "zone_type",
            sa.Enum("intrusion", "loitering", "counting", "general", name="zone_type"),
            nullable=False,
        ),
        sa.Column("enabled", sa.Boolean(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "rules",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("zone_id", sa.Integer(), sa.ForeignKey("zones.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "rule_type",
            sa.Enum("intrusion", "loitering", "counting", "custom", name="rule_type"),
            nullable=False,
        ),
        sa.Column(
            "object_type",
            sa.Enum("person", "vehicle", "any", name="object_type"),
            nullable=False,
        ),
        sa.Column("threshold_seconds", sa.Integer(), nullable=True),
        sa.Column("confidence_threshold", sa.Numeric(3, 2), nullable=True),
        sa.Column("enabled", sa.Boolean(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("camera_id", sa.Integer(), sa.ForeignKey("cameras.id", ondelete="CASCADE"), nullable=False),
        sa.Column("zone_id", sa.Integer(), sa.ForeignKey("zones.id", ondelete="SET NULL"), nullable=True),
        sa.Column("rule_id", sa.Integer(), sa.ForeignKey("rules.id", ondelete="SET NULL"), nullable=True),
        sa.Column("timestamp", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("rule_type", sa.String(64), nullable=False),
        sa.Column("object_type", sa.String(64), nullable=False),
        sa.Column("confidence", sa.Numeric(3, 2), nullable=False),
        sa.Column("bounding_box", sa.JSON(), nullable=True),
        sa.Column("snapshot_url", sa.String(512), nullable=True),
        sa.Column("clip_url", sa.String(512), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "detections",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("camera_id", sa.Integer(), sa.ForeignKey("cameras.id", ondelete="CASCADE"), nullable=False),
        sa.Column("frame_number", sa.Integer(), nullable=True),
        sa.Column("timestamp", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("object_type", sa.String(64), nullable=False),
        sa.Column("confidence", sa.Numeric(3, 2), nullable=False),
        sa.Column("bounding_box", sa.JSON(), nullable=True),
        sa.Column("track_id", sa.String(128), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "alert_subscriptions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("camera_id", sa.Integer(), sa.ForeignKey("cameras.id", ondelete="CASCADE"), nullable=True),
        sa.Column("rule_type", sa.String(64), nullable=False),
        sa.Column("enabled", sa.Boolean(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("event_id", sa.Integer(), sa.ForeignKey("events.id", ondelete="SET NULL"), nullable=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column(
            "severity",
            sa.Enum("info", "warning", "critical", name="notification_severity"),
            nullable=False,
        ),
        sa.Column(
            "type",
            sa.Enum("intrusion", "loitering", "counting", "system", name="notification_type"),
            nullable=False,
        ),
        sa.Column("camera_id", sa.Integer(), nullable=True),
        sa.Column("read", sa.Boolean(), nullable=False),
        sa.Column("action_url", sa.String(512), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("read_at", sa.DateTime(), nullable=True),
    )

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("action", sa.String(255), nullable=False),
        sa.Column("resource_type", sa.String(128), nullable=False),
        sa.Column("resource_id", sa.Integer(), nullable=True),
        sa.Column("details", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )


def downgrade() -> None:
    """Downgrade schema: drop all tables (children first)."""
    for table in (
        "audit_logs",
        "notifications",
        "alert_subscriptions",
        "detections",
        "events",
        "rules",
        "zones",
        "cameras",
        "sites",
        "users",
    ):
        op.drop_table(table)

    # Postgres keeps named ENUM types after the tables are gone.
    if op.get_bind().dialect.name == "postgresql":
        for enum_name in ENUM_TYPES:
            op.execute(f"DROP TYPE IF EXISTS {enum_name}")
