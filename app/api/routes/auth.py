from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.dependencies import get_current_user
from app.core.security import create_access_token
from app.database import get_db
from app.models import User
from app.schemas.auth import LoginRequest, RegisterRequest
from app.services.account_service import authenticate, public_profile, register_user
from app.services.entitlement import refresh_expiry

router = APIRouter()


@router.post("/register")
async def register(payload: RegisterRequest, db: Session = Depends(get_db)) -> dict:
    register_user(db, payload.email, payload.password)
    return {
        "success": True,
        "message": "User registered successfully. Await admin approval.",
    }


@router.post("/login")
async def login(payload: LoginRequest, db: Session = Depends(get_db)) -> dict:
    user = authenticate(db, payload.email, payload.password)
    token = create_access_token(user.email, {"role": user.role, "uid": str(user.id)})
    return {"success": True, "user": public_profile(user), "token": token}


@router.get("/profile")
async def profile(user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> dict:
    if refresh_expiry(user):
        db.commit()
        db.refresh(user)
    return {"success": True, "user": public_profile(user, detailed=True)}
