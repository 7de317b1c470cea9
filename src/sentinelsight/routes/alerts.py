from typing import List
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import queries
from ..auth import get_current_user
from ..db import get_db
from ..models.user import User
from ..schemas import MutationOut, SubscriptionCreate, SubscriptionOut
from .utils import not_found, record_audit, write_transaction

logger = logging.getLogger(__name__)

# Alert subscriptions belong to the signed-in user.
# Prefix: /api/alerts
router = APIRouter(prefix="/api/alerts", tags=["alerts"])


@router.get("/subscriptions", response_model=List[SubscriptionOut])
def list_subscriptions(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return queries.get_user_alert_subscriptions(db, user.id)


@router.post("/subscriptions", response_model=MutationOut, status_code=status.HTTP_201_CREATED)
def subscribe(
    payload: SubscriptionCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """
    Subscribe the current user to alerts.

    Omitting camera_id subscribes to every camera; rule_type "all" matches every rule type.
    """
    data = {"user_id": user.id, **payload.model_dump()}
    with write_transaction(db, "Failed to save subscription"):
        if payload.camera_id is not None and not queries.get_camera_by_id(db, payload.camera_id):
            raise not_found("Camera")
        subscription = queries.create_alert_subscription(db, data)
        subscription_id = subscription.id
        record_audit(db, user, "subscription.create", "alert_subscription", subscription_id, payload.model_dump())
    logger.info("User id=%s subscribed to %s alerts (camera=%s)", user.id, payload.rule_type, payload.camera_id)
    return {"success": True, "id": subscription_id}


@router.delete("/subscriptions/{subscription_id}", response_model=MutationOut)
def unsubscribe(
    subscription_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    with write_transaction(db, "Failed to delete subscription"):
        subscription = queries.get_alert_subscription_by_id(db, subscription_id)
        # Other users' subscriptions are reported as missing.
        if not subscription or subscription.user_id != user.id:
            raise not_found("Subscription")
        queries.delete_alert_subscription(db, subscription)
        record_audit(db, user, "subscription.delete", "alert_subscription", subscription_id)
    logger.info("User id=%s removed subscription %s", user.id, subscription_id)
    return {"success": True, "id": subscription_id}
