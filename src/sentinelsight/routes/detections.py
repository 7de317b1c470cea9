import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import queries
from ..auth import require_operator_or_admin
from ..db import get_db
from ..models.user import User
from ..schemas import MutationOut, DetectionCreate
from .utils import not_found, write_transaction

logger = logging.getLogger(__name__)

# Raw per-frame observations. Reading them goes through /api/cameras/{id}/detections.
router = APIRouter(prefix="/api/detections", tags=["detections"])


@router.post("", response_model=MutationOut, status_code=status.HTTP_201_CREATED)
def ingest_detection(
    payload: DetectionCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_operator_or_admin),
):
    # Detections arrive at frame rate, so they are not audited.
    with write_transaction(db, "Failed to save detection"):
        if not queries.get_camera_by_id(db, payload.camera_id):
            raise not_found("Camera")
        detection = queries.create_detection(db, payload.model_dump())
        detection_id = detection.id
    logger.debug("Detection %s stored for camera %s", detection_id, payload.camera_id)
    return {"success": True, "id": detection_id}
