from typing import List
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import queries
from ..auth import require_admin
from ..db import get_db
from ..models.user import User
from ..schemas import MutationOut, SiteCreate, SiteOut, SiteUpdate
from .utils import not_found, record_audit, write_transaction

logger = logging.getLogger(__name__)

# Sites group cameras by physical location. Reads are public, writes are admin only.
router = APIRouter(prefix="/api/sites", tags=["sites"])


@router.get("", response_model=List[SiteOut])
def list_sites(db: Session = Depends(get_db)):
    return queries.get_sites(db)


@router.get("/{site_id}", response_model=SiteOut)
def get_site(site_id: int, db: Session = Depends(get_db)):
    site = queries.get_site_by_id(db, site_id)
    if not site:
        raise not_found("Site")
    return site


@router.post("", response_model=MutationOut, status_code=status.HTTP_201_CREATED)
def create_site(
    payload: SiteCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
):
    data = payload.model_dump()
    with write_transaction(db, "Failed to create site"):
        site = queries.create_site(db, data)
        site_id = site.id
        record_audit(db, user, "site.create", "site", site_id, data)
    logger.info("Site %s created by user id=%s", site_id, user.id)
    return {"success": True, "id": site_id}


@router.patch("/{site_id}", response_model=MutationOut)
def update_site(
    site_id: int,
    payload: SiteUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
):
    data = payload.model_dump(exclude_unset=True)
    with write_transaction(db, "Failed to update site"):
        site = queries.get_site_by_id(db, site_id)
        if not site:
            raise not_found("Site")
        queries.update_site(db, site, data)
        record_audit(db, user, "site.update", "site", site_id, data)
    logger.info("Site %s updated by user id=%s", site_id, user.id)
    return {"success": True, "id": site_id}


@router.delete("/{site_id}", response_model=MutationOut)
def delete_site(
    site_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
):
    with write_transaction(db, "Failed to delete site"):
        site = queries.get_site_by_id(db, site_id)
        if not site:
            raise not_found("Site")
        details = {"name": site.name}
        queries.delete_site(db, site)
        record_audit(db, user, "site.delete", "site", site_id, details)
    logger.info("Site %s deleted by user id=%s", site_id, user.id)
    return {"success": True, "id": site_id}
