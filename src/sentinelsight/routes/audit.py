from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from .. import queries
from ..auth import require_admin
from ..db import get_db
from ..models.user import User
from ..schemas import AuditLogOut

router = APIRouter(prefix="/api/audit", tags=["audit"])


@router.get("/logs", response_model=List[AuditLogOut])
def get_logs(
    user_id: Optional[int] = None,
    resource_type: Optional[str] = None,
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
):
    """Audit trail, newest first. Admin only."""
    return queries.get_audit_logs(
        db,
        user_id=user_id,
        resource_type=resource_type,
        limit=limit,
        offset=offset,
    )
