"""Add lookup indexes

Revision ID: add_indexes_20261019
Revises: create_sentinelsight_schema_20261019
Create Date: 2026-10-19 09:30:00.000000

"""

from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "add_indexes_20261019"
down_revision: Union[str, Sequence[str], None] = "create_sentinelsight_schema_20261019"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# (index name, table, columns)
INDEXES = (
    ("ix_cameras_site_id", "cameras", ["site_id"]),
    ("ix_zones_camera_id", "zones", ["camera_id"]),
    ("ix_rules_zone_id", "rules", ["zone_id"]),
    ("ix_events_timestamp", "events", ["timestamp"]),
    ("ix_events_camera_id", "events", ["camera_id"]),
    ("ix_events_camera_timestamp", "events", ["camera_id", "timestamp"]),
    ("ix_detections_camera_timestamp", "detections", ["camera_id", "timestamp"]),
    ("ix_alert_subscriptions_user_id", "alert_subscriptions", ["user_id"]),
    ("ix_notifications_user_id", "notifications", ["user_id"]),
    ("ix_audit_logs_created_at", "audit_logs", ["created_at"]),
)


def upgrade() -> None:
    """Upgrade schema: create indexes used by list filters and FK lookups."""
    for name, table, columns in INDEXES:
        op.create_index(name, table, columns)


def downgrade() -> None:
    """Downgrade schema: drop the lookup indexes."""
    for name, table, _columns in reversed(INDEXES):
        op.drop_index(name, table_name=table)
