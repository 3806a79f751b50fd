from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.dependencies import get_current_admin
from app.database import get_db
from app.models import User
from app.schemas.subscription import ApproveRequestIn, SubscriptionRequestIn
from app.services import subscription_service
from app.services.account_service import public_profile

router = APIRouter()


@router.post("/request-subscription")
async def request_subscription(payload: SubscriptionRequestIn, db: Session = Depends(get_db)) -> dict:
    req = subscription_service.request_subscription(
        db, payload.email, payload.plan, contact=payload.contact, message=payload.message
    )
    return {
        "success": True,
        "message": "Request sent. Your plan will be activated once payment is confirmed.",
        "request": subscription_service.serialize_request(req),
    }


@router.get("/subscription-requests")
async def subscription_requests(
    status: Optional[str] = None,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
) -> dict:
    return {"success": True, "requests": subscription_service.list_requests(db, admin, status)}


@router.post("/approve-request")
async def approve_request(
    payload: ApproveRequestIn,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
) -> dict:
    user = subscription_service.approve_request(db, admin, payload.request_id)
    return {"success": True, "user": public_profile(user, detailed=True)}
