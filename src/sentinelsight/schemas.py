from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator
from typing import Annotated, Any, ClassVar, Dict, List, Literal, Optional, Tuple, Union
from datetime import datetime, timezone
from urllib.parse import urlsplit

CameraStatus = Literal["online", "offline", "error"]
ZoneType = Literal["intrusion", "loitering", "counting", "general"]
RuleType = Literal["intrusion", "loitering", "counting", "custom"]
ObjectType = Literal["person", "vehicle", "any"]
SubscriptionRuleType = Literal["intrusion", "loitering", "counting", "custom", "all"]

STREAM_URL_SCHEMES = ("rtsp", "rtsps", "http", "https")


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps are stored as naive UTC; convert aware values before they reach the DB."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(to_naive_utc)]
Confidence = Annotated[float, Field(ge=0, le=1)]
BoundingBox = Union[Dict[str, float], List[float]]


class PartialUpdate(BaseModel):
    """PATCH body: any field may be omitted, but NOT NULL columns cannot be set to null."""

    required_fields: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def check_required_not_null(self):
        for name in self.required_fields:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class MutationOut(BaseModel):
    success: bool = True
    id: Optional[int] = None


# Users
class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    open_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    login_method: Optional[str] = None
    role: str
    created_at: datetime
    updated_at: datetime
    last_signed_in: datetime


# Sites
class SiteCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None


class SiteUpdate(PartialUpdate):
    required_fields = ("name",)

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None


class SiteOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    location: Optional[str] = None
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# Cameras
def _check_stream_url(value: str) -> str:
    parts = urlsplit(value)
    if parts.scheme.lower() not in STREAM_URL_SCHEMES or not parts.hostname:
        raise ValueError("Invalid RTSP URL")
    return value


StreamUrl = Annotated[str, Field(max_length=512), AfterValidator(_check_stream_url)]


class CameraCreate(BaseModel):
    site_id: int
    name: str = Field(..., min_length=1, max_length=255)
    location_tag: Optional[str] = Field(None, max_length=255)
    rtsp_url: StreamUrl


class CameraUpdate(PartialUpdate):
    required_fields = ("site_id", "name", "rtsp_url", "enabled")

    site_id: Optional[int] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    location_tag: Optional[str] = Field(None, max_length=255)
    rtsp_url: Optional[StreamUrl] = None
    enabled: Optional[bool] = None


class CameraStatusUpdate(BaseModel):
    status: CameraStatus
    last_frame_time: Optional[UtcDatetime] = None
    fps: Optional[float] = Field(None, ge=0, le=999.99)


class CameraOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    site_id: int
    name: str
    location_tag: Optional[str] = None
    rtsp_url: str
    status: CameraStatus
    fps: Optional[float] = None
    last_frame_time: Optional[datetime] = None
    enabled: bool
    created_at: datetime
    updated_at: datetime


# Zones
class Point(BaseModel):
    x: float
    y: float


class ZoneCreate(BaseModel):
    camera_id: int
    name: str = Field(..., min_length=1, max_length=255)
    polygon_points: Optional[List[Point]] = None
    zone_type: ZoneType


class ZoneUpdate(PartialUpdate):
    required_fields = ("camera_id", "name", "zone_type", "enabled")

    camera_id: Optional[int] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    polygon_points: Optional[List[Point]] = None
    zone_type: Optional[ZoneType] = None
    enabled: Optional[bool] = None


class ZoneOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    camera_id: int
    name: str
    polygon_points: Optional[List[Point]] = None
    zone_type: ZoneType
    enabled: bool
    created_at: datetime
    updated_at: datetime


# Rules
class RuleCreate(BaseModel):
    zone_id: int
    rule_type: RuleType
    object_type: ObjectType = "any"
    threshold_seconds: int = Field(0, ge=0)
    confidence_threshold: Confidence = 0.5


class RuleUpdate(PartialUpdate):
    required_fields = ("zone_id", "rule_type", "object_type", "enabled")

    zone_id: Optional[int] = None
    rule_type: Optional[RuleType] = None
    object_type: Optional[ObjectType] = None
    threshold_seconds: Optional[int] = Field(None, ge=0)
    confidence_threshold: Optional[Confidence] = None
    enabled: Optional[bool] = None


class RuleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    zone_id: int
    rule_type: RuleType
    object_type: ObjectType
    threshold_seconds: Optional[int] = None
    confidence_threshold: Optional[float] = None
    enabled: bool
    created_at: datetime
    updated_at: datetime


# Events
class EventCreate(BaseModel):
    camera_id: int
    zone_id: Optional[int] = None
    rule_id: Optional[int] = None
    timestamp: Optional[UtcDatetime] = None
    rule_type: str = Field(..., min_length=1, max_length=64)
    object_type: str = Field(..., min_length=1, max_length=64)
    confidence: Confidence
    bounding_box: Optional[BoundingBox] = None
    snapshot_url: Optional[str] = Field(None, max_length=512)
    clip_url: Optional[str] = Field(None, max_length=512)


class EventOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    camera_id: int
    zone_id: Optional[int] = None
    rule_id: Optional[int] = None
    timestamp: datetime
    rule_type: str
    object_type: str
    confidence: float
    bounding_box: Optional[BoundingBox] = None
    snapshot_url: Optional[str] = None
    clip_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class EventCount(BaseModel):
    count: int


# Detections
class DetectionCreate(BaseModel):
    camera_id: int
    frame_number: Optional[int] = Field(None, ge=0)
    timestamp: Optional[UtcDatetime] = None
    object_type: str = Field(..., min_length=1, max_length=64)
    confidence: Confidence
    bounding_box: Optional[BoundingBox] = None
    track_id: Optional[str] = Field(None, max_length=128)


class DetectionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    camera_id: int
    frame_number: Optional[int] = None
    timestamp: datetime
    object_type: str
    confidence: float
    bounding_box: Optional[BoundingBox] = None
    track_id: Optional[str] = None
    created_at: datetime


# Alert subscriptions
class SubscriptionCreate(BaseModel):
    camera_id: Optional[int] = None
    rule_type: SubscriptionRuleType


class SubscriptionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    camera_id: Optional[int] = None
    rule_type: str
    enabled: bool
    created_at: datetime
    updated_at: datetime


# Notifications
class NotificationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    event_id: Optional[int] = None
    title: str
    message: Optional[str] = None
    severity: Literal["info", "warning", "critical"]
    type: Literal["intrusion", "loitering", "counting", "system"]
    camera_id: Optional[int] = None
    read: bool
    action_url: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = Field(None, validation_alias="extra")
    created_at: datetime
    read_at: Optional[datetime] = None


class UnreadCount(BaseModel):
    unread: int


# Audit logs
class AuditLogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: Optional[int] = None
    action: str
    resource_type: str
    resource_id: Optional[int] = None
    details: Optional[Dict[str, Any]] = None
    created_at: datetime


# Dashboard
class DashboardSummary(BaseModel):
    total_sites: int
    total_cameras: int
    online_cameras: int
    total_events: int
    events_last_hour: int
