from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.dependencies import get_current_admin
from app.database import get_db
from app.models import User
from app.schemas.user import ActivateRequest, ApproveUserRequest
from app.services.account_service import list_users, public_profile
from app.services.entitlement import activate_user, approve_user

router = APIRouter()


@router.get("/all-users")
async def all_users(admin: User = Depends(get_current_admin), db: Session = Depends(get_db)) -> dict:
    return {"success": True, "users": list_users(db, admin)}


@router.post("/activate")
async def activate(
    payload: ActivateRequest,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
) -> dict:
    user = activate_user(db, admin, payload.user_email, payload.plan)
    return {"success": True, "user": public_profile(user, detailed=True)}


@router.post("/approve-user")
async def approve(
    payload: ApproveUserRequest,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
) -> dict:
    user = approve_user(db, admin, payload.user_email)
    return {"success": True, "message": f"{user.email} approved successfully"}
