"""Manual-payment subscription requests."""
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import NotFound, ValidationError
from app.core.security import as_utc, now_utc
from app.models import SubscriptionRequest, User
from app.services.entitlement import (
    PAID_PLANS,
    Plan,
    apply_plan,
    get_user_by_email,
    parse_plan,
    require_admin,
)

logger = logging.getLogger(__name__)

PENDING = "pending"
APPROVED = "approved"

# Manual-payment prices, in Kenyan shillings.
PLAN_PRICES = {Plan.WEEKLY: 500, Plan.MONTHLY: 1000, Plan.VIP: 1500}


def serialize_request(req: SubscriptionRequest) -> Dict[str, Any]:
    created_at = as_utc(req.created_at)
    approved_at = as_utc(req.approved_at)
    return {
        "id": str(req.id),
        "email": req.email,
        "plan": req.plan,
        "amount": req.amount,
        "contact": req.contact,
        "message": req.message,
        "status": req.status,
        "createdAt": created_at.isoformat() if created_at else None,
        "approvedAt": approved_at.isoformat() if approved_at else None,
    }


def request_subscription(
    db: Session,
    email: Optional[str],
    plan_name: Optional[str],
    contact: Optional[str] = None,
    message: Optional[str] = None,
) -> SubscriptionRequest:
    user = get_user_by_email(db, email or "")
    plan = parse_plan(plan_name)
    if plan not in PAID_PLANS:
        raise ValidationError("Choose a paid plan")

    req = (
        db.query(SubscriptionRequest)
        .filter(SubscriptionRequest.email == user.email, SubscriptionRequest.status == PENDING)
        .first()
    )
    if req is None:
        req = SubscriptionRequest(email=user.email, status=PENDING)
        db.add(req)
    req.plan = plan.value
    req.amount = PLAN_PRICES[plan]
    req.contact = contact
    req.message = message
    db.commit()
    db.refresh(req)
    logger.info("Subscription request from %s for %s (Ksh %d)", user.email, plan.value, req.amount)
    return req


def list_requests(db: Session, actor: User, status: Optional[str] = None) -> List[Dict[str, Any]]:
    require_admin(actor)
    query = db.query(SubscriptionRequest)
    if status:
        query = query.filter(SubscriptionRequest.status == status)
    rows = query.order_by(SubscriptionRequest.created_at.desc()).all()
    return [serialize_request(r) for r in rows]


def approve_request(db: Session, actor: User, request_id: Optional[str]) -> User:
    """Confirm payment: put the requester on the plan and approve them in one step."""
    require_admin(actor)
    try:
        key = uuid.UUID(str(request_id))
    except ValueError:
        raise NotFound("Request not found") from None
    req = db.get(SubscriptionRequest, key)
    if req is None:
        raise NotFound("Request not found")
    if req.status != PENDING:
        raise ValidationError("Request already approved")

    user = get_user_by_email(db, req.email)
    now = now_utc()
    apply_plan(user, parse_plan(req.plan), now)
    user.approved = True
    req.status = APPROVED
    req.approved_at = now
    db.commit()
    db.refresh(user)
    logger.info("%s approved %s request for %s", actor.email, req.plan, user.email)
    return user
