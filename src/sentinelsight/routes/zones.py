from typing import List
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import queries
from ..auth import require_operator_or_admin
from ..db import get_db
from ..models.user import User
from ..schemas import MutationOut, ZoneCreate, ZoneOut, ZoneUpdate
from .utils import not_found, record_audit, write_transaction

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/zones", tags=["zones"])


@router.get("", response_model=List[ZoneOut])
def list_zones(camera_id: int, db: Session = Depends(get_db)):
    return queries.get_zones(db, camera_id)


@router.get("/{zone_id}", response_model=ZoneOut)
def get_zone(zone_id: int, db: Session = Depends(get_db)):
    zone = queries.get_zone_by_id(db, zone_id)
    if not zone:
        raise not_found("Zone")
    return zone


@router.post("", response_model=MutationOut, status_code=status.HTTP_201_CREATED)
def create_zone(
    payload: ZoneCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_operator_or_admin),
):
    data = payload.model_dump()
    with write_transaction(db, "Failed to create zone"):
        if not queries.get_camera_by_id(db, payload.camera_id):
            raise not_found("Camera")
        zone = queries.create_zone(db, data)
        zone_id = zone.id
        record_audit(db, user, "zone.create", "zone", zone_id, data)
    logger.info("Zone %s created on camera %s by user id=%s", zone_id, payload.camera_id, user.id)
    return {"success": True, "id": zone_id}


@router.patch("/{zone_id}", response_model=MutationOut)
def update_zone(
    zone_id: int,
    payload: ZoneUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_operator_or_admin),
):
    data = payload.model_dump(exclude_unset=True)
    with write_transaction(db, "Failed to update zone"):
        zone = queries.get_zone_by_id(db, zone_id)
        if not zone:
            raise not_found("Zone")
        if "camera_id" in data and not queries.get_camera_by_id(db, data["camera_id"]):
            raise not_found("Camera")
        queries.update_zone(db, zone, data)
        record_audit(db, user, "zone.update", "zone", zone_id, data)
    logger.info("Zone %s updated by user id=%s", zone_id, user.id)
    return {"success": True, "id": zone_id}


@router.delete("/{zone_id}", response_model=MutationOut)
def delete_zone(
    zone_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_operator_or_admin),
):
    with write_transaction(db, "Failed to delete zone"):
        zone = queries.get_zone_by_id(db, zone_id)
        if not zone:
            raise not_found("Zone")
        details = {"name": zone.name, "camera_id": zone.camera_id}
        queries.delete_zone(db, zone)
        record_audit(db, user, "zone.delete", "zone", zone_id, details)
    logger.info("Zone %s deleted by user id=%s", zone_id, user.id)
    return {"success": True, "id": zone_id}
