from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from .. import queries
from ..auth import require_operator_or_admin
from ..db import get_db
from ..models.user import User
from ..schemas import (
    CameraCreate,
    CameraOut,
    CameraStatusUpdate,
    CameraUpdate,
    DetectionOut,
    MutationOut,
)
from .utils import not_found, record_audit, strip_url_credentials, write_transaction

logger = logging.getLogger(__name__)

# Camera configuration plus the status/fps feed reported by the detection service.
# Prefix: /api/cameras
router = APIRouter(prefix="/api/cameras", tags=["cameras"])


def _audit_details(data):
    if "rtsp_url" in data:
        return {**data, "rtsp_url": strip_url_credentials(data["rtsp_url"])}
    return data


@router.get("", response_model=List[CameraOut])
def list_cameras(site_id: Optional[int] = None, db: Session = Depends(get_db)):
    return queries.get_cameras(db, site_id)


@router.get("/{camera_id}", response_model=CameraOut)
def get_camera(camera_id: int, db: Session = Depends(get_db)):
    camera = queries.get_camera_by_id(db, camera_id)
    if not camera:
        raise not_found("Camera")
    return camera


@router.get("/{camera_id}/detections", response_model=List[DetectionOut])
def recent_detections(
    camera_id: int,
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    """Most recent raw detections for a camera, newest first."""
    if not queries.get_camera_by_id(db, camera_id):
        raise not_found("Camera")
    return queries.get_recent_detections(db, camera_id, limit)


@router.post("", response_model=MutationOut, status_code=status.HTTP_201_CREATED)
def create_camera(
    payload: CameraCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_operator_or_admin),
):
    data = payload.model_dump()
    with write_transaction(db, "Failed to create camera"):
        if not queries.get_site_by_id(db, payload.site_id):
            raise not_found("Site")
        camera = queries.create_camera(db, data)
        camera_id = camera.id
        record_audit(db, user, "camera.create", "camera", camera_id, _audit_details(data))
    logger.info("Camera %s created on site %s by user id=%s", camera_id, payload.site_id, user.id)
    return {"success": True, "id": camera_id}


@router.patch("/{camera_id}", response_model=MutationOut)
def update_camera(
    camera_id: int,
    payload: CameraUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_operator_or_admin),
):
    data = payload.model_dump(exclude_unset=True)
    with write_transaction(db, "Failed to update camera"):
        camera = queries.get_camera_by_id(db, camera_id)
        if not camera:
            raise not_found("Camera")
        if "site_id" in data and not queries.get_site_by_id(db, data["site_id"]):
            raise not_found("Site")
        queries.update_camera(db, camera, data)
        record_audit(db, user, "camera.update", "camera", camera_id, _audit_details(data))
    logger.info("Camera %s updated by user id=%s", camera_id, user.id)
    return {"success": True, "id": camera_id}


@router.patch("/{camera_id}/status", response_model=MutationOut)
def update_camera_status(
    camera_id: int,
    payload: CameraStatusUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_operator_or_admin),
):
    """
    Record connectivity reported for a camera.

    Expected: status (online/offline/error) and optionally last_frame_time and fps.
    Omitted optional fields keep their stored values.
    """
    with write_transaction(db, "Failed to update camera status"):
        camera = queries.get_camera_by_id(db, camera_id)
        if not camera:
            raise not_found("Camera")
        previous = camera.status
        queries.update_camera_status(db, camera, payload.status, payload.last_frame_time, payload.fps)
        record_audit(
            db,
            user,
            "camera.update_status",
            "camera",
            camera_id,
            {"from": previous, "to": payload.status},
        )
    logger.info("Camera %s status %s -> %s", camera_id, previous, payload.status)
    return {"success": True, "id": camera_id}


@router.delete("/{camera_id}", response_model=MutationOut)
def delete_camera(
    camera_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_operator_or_admin),
):
    with write_transaction(db, "Failed to delete camera"):
        camera = queries.get_camera_by_id(db, camera_id)
        if not camera:
            raise not_found("Camera")
        details = {"name": camera.name, "site_id": camera.site_id}
        queries.delete_camera(db, camera)
        record_audit(db, user, "camera.delete", "camera", camera_id, details)
    logger.info("Camera %s deleted by user id=%s", camera_id, user.id)
    return {"success": True, "id": camera_id}
