from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import queries
from ..db import get_db
from ..schemas import DashboardSummary

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=DashboardSummary)
def summary(db: Session = Depends(get_db)):
    """Counts shown on the dashboard stat cards."""
    return queries.get_dashboard_summary(db)
