from typing import List
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import queries
from ..auth import require_operator_or_admin
from ..db import get_db
from ..models.user import User
from ..schemas import MutationOut, RuleCreate, RuleOut, RuleUpdate
from .utils import not_found, record_audit, write_transaction

logger = logging.getLogger(__name__)

# Rules are evaluated by the detection service; this router only stores them.
router = APIRouter(prefix="/api/rules", tags=["rules"])


@router.get("", response_model=List[RuleOut])
def list_rules(zone_id: int, db: Session = Depends(get_db)):
    return queries.get_rules(db, zone_id)


@router.get("/{rule_id}", response_model=RuleOut)
def get_rule(rule_id: int, db: Session = Depends(get_db)):
    rule = queries.get_rule_by_id(db, rule_id)
    if not rule:
        raise not_found("Rule")
    return rule


@router.post("", response_model=MutationOut, status_code=status.HTTP_201_CREATED)
def create_rule(
    payload: RuleCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_operator_or_admin),
):
    data = payload.model_dump()
    with write_transaction(db, "Failed to create rule"):
        if not queries.get_zone_by_id(db, payload.zone_id):
            raise not_found("Zone")
        rule = queries.create_rule(db, data)
        rule_id = rule.id
        record_audit(db, user, "rule.create", "rule", rule_id, data)
    logger.info("Rule %s (%s) created on zone %s by user id=%s", rule_id, payload.rule_type, payload.zone_id, user.id)
    return {"success": True, "id": rule_id}


@router.patch("/{rule_id}", response_model=MutationOut)
def update_rule(
    rule_id: int,
    payload: RuleUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_operator_or_admin),
):
    data = payload.model_dump(exclude_unset=True)
    with write_transaction(db, "Failed to update rule"):
        rule = queries.get_rule_by_id(db, rule_id)
        if not rule:
            raise not_found("Rule")
        if "zone_id" in data and not queries.get_zone_by_id(db, data["zone_id"]):
            raise not_found("Zone")
        queries.update_rule(db, rule, data)
        record_audit(db, user, "rule.update", "rule", rule_id, data)
    logger.info("Rule %s updated by user id=%s", rule_id, user.id)
    return {"success": True, "id": rule_id}


@router.delete("/{rule_id}", response_model=MutationOut)
def delete_rule(
    rule_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_operator_or_admin),
):
    with write_transaction(db, "Failed to delete rule"):
        rule = queries.get_rule_by_id(db, rule_id)
        if not rule:
            raise not_found("Rule")
        details = {"rule_type": rule.rule_type, "zone_id": rule.zone_id}
        queries.delete_rule(db, rule)
        record_audit(db, user, "rule.delete", "rule", rule_id, details)
    logger.info("Rule %s deleted by user id=%s", rule_id, user.id)
    return {"success": True, "id": rule_id}
