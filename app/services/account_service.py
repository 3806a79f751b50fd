"""Registration, login and public user profiles."""
from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from app.config import settings
from app.core.exceptions import Conflict, InvalidCredentials, NotApproved, ValidationError
from app.core.security import as_utc, hash_password, now_utc, verify_password
from app.models import User
from app.services.entitlement import Plan, refresh_expiry, require_admin

logger = logging.getLogger(__name__)


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def register_user(db: Session, email: str | None, password: str | None) -> User:
    email = normalize_email(email)
    if not email or not password:
        raise ValidationError("Email and password required")
    if "@" not in email or len(email) >= 200:
        raise ValidationError("Please enter a valid email address")
    if len(password) < settings.password_min_length:
        raise ValidationError(
            f"Password must be at least {settings.password_min_length} characters"
        )

    if db.query(User).filter(User.email == email).first():
        raise Conflict("User already exists")

    user = User(
        email=email,
        password_hash=hash_password(password),
        role="user",
        premium=False,
        approved=False,
        plan=Plan.FREE.value,
        expires_at=None,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered %s", email)
    return user


def authenticate(db: Session, email: str | None, password: str | None) -> User:
    email = normalize_email(email)
    user = db.query(User).filter(User.email == email).first() if email else None
    if user is None or not verify_password(password or "", user.password_hash):
        raise InvalidCredentials()

    if refresh_expiry(user):
        db.commit()
        db.refresh(user)

    if not user.approved:
        raise NotApproved()
    return user


def days_remaining(user: User, now: datetime | None = None) -> int:
    expires_at = as_utc(user.expires_at)
    if expires_at is None:
        return 0
    seconds = (expires_at - (now or now_utc())).total_seconds()
    return max(0, math.ceil(seconds / 86400))


def public_profile(user: User, detailed: bool = False) -> Dict[str, Any]:
    profile: Dict[str, Any] = {
        "email": user.email,
        "role": user.role,
        "plan": user.plan,
        "premium": bool(user.premium),
        "approved": bool(user.approved),
    }
    if detailed:
        expires_at = as_utc(user.expires_at)
        profile["expiresAt"] = expires_at.isoformat() if expires_at else None
        profile["daysRemaining"] = days_remaining(user)
    return profile


def list_users(db: Session, actor: User) -> List[Dict[str, Any]]:
    require_admin(actor)
    users = db.query(User).order_by(User.created_at.asc()).all()
    return [public_profile(u, detailed=True) for u in users]
