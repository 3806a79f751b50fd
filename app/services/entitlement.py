"""
Plan tiers, subscription lifecycle and slip visibility.

Tiers are a single ordered enum (free < weekly < monthly < vip). A user sees
a slip when the rank of their effective plan is at least the slip's tier.
Admins see everything.

Subscription lifecycle:
    registered (unapproved) -> approved (free) -> active (plan, expires_at)
    -> [expiry] -> unapproved (free)
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional

from sqlalchemy.orm import Session

from app.config import settings
from app.core.exceptions import Forbidden, NotFound, ValidationError
from app.core.security import as_utc, now_utc
from app.models import Slip, User

logger = logging.getLogger(__name__)


class Plan(str, Enum):
    FREE = "free"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    VIP = "vip"

    @property
    def rank(self) -> int:
        return PLAN_RANK[self]


PLAN_RANK = {Plan.FREE: 0, Plan.WEEKLY: 1, Plan.MONTHLY: 2, Plan.VIP: 3}

PAID_PLANS = (Plan.WEEKLY, Plan.MONTHLY, Plan.VIP)

# "premium" is the old name for the first paid tier.
TIER_ALIASES = {"premium": Plan.WEEKLY}


def parse_plan(value: Optional[str]) -> Plan:
    """Parse a plan or slip tier name; raises ValidationError on unknown names."""
    name = (value or "").strip().lower()
    if name in TIER_ALIASES:
        return TIER_ALIASES[name]
    try:
        return Plan(name)
    except ValueError:
        raise ValidationError(f"Unknown plan '{value}'") from None


def plan_duration_days(plan: Plan | str) -> int:
    if plan in (Plan.MONTHLY, Plan.VIP):
        return 30
    return 7


def _coerce_plan(value: Optional[str]) -> Plan:
    try:
        return Plan(value or Plan.FREE.value)
    except ValueError:
        return Plan.FREE


def _reset_subscription(user: User) -> None:
    user.premium = False
    user.approved = False
    user.plan = Plan.FREE.value
    user.expires_at = None


def is_lapsed(user: User, now: datetime | None = None) -> bool:
    expires_at = as_utc(user.expires_at)
    return expires_at is not None and expires_at < (now or now_utc())


def refresh_expiry(user: User, now: datetime | None = None) -> bool:
    """Apply expiry to a single record as it is read. Returns True if it changed."""
    if not is_lapsed(user, now):
        return False
    if user.premium:
        _reset_subscription(user)
        logger.info("Subscription for %s expired", user.email)
        return True
    if user.plan != Plan.FREE.value:
        user.plan = Plan.FREE.value
        user.expires_at = None
        return True
    return False


def expire_lapsed_users(db: Session, now: datetime | None = None) -> int:
    """Reset every premium user whose plan has lapsed. Idempotent."""
    now = now or now_utc()
    lapsed = (
        db.query(User)
        .filter(User.premium.is_(True), User.expires_at.isnot(None), User.expires_at < now)
        .all()
    )
    for user in lapsed:
        _reset_subscription(user)
    if lapsed:
        db.commit()
        logger.info(
            "Expired %d subscription(s): %s", len(lapsed), ", ".join(u.email for u in lapsed)
        )
    return len(lapsed)


def effective_plan(user: Optional[User], now: datetime | None = None) -> Plan:
    if user is None:
        return Plan.FREE
    plan = _coerce_plan(user.plan)
    if plan is Plan.FREE:
        return plan
    if user.premium and user.expires_at is not None and not is_lapsed(user, now):
        return plan
    return Plan.FREE


def can_view(user: Optional[User], slip: Slip, now: datetime | None = None) -> bool:
    if user is not None and user.is_admin:
        return True
    return effective_plan(user, now).rank >= _coerce_plan(slip.access).rank


def viewable_tiers(user: Optional[User], now: datetime | None = None) -> List[str]:
    if user is not None and user.is_admin:
        return [plan.value for plan in Plan]
    rank = effective_plan(user, now).rank
    return [plan.value for plan in Plan if plan.rank <= rank]


def require_admin(actor: Optional[User]) -> User:
    if actor is None or not actor.is_admin:
        raise Forbidden()
    return actor


def get_user_by_email(db: Session, email: str) -> User:
    normalized = (email or "").strip().lower()
    user = db.query(User).filter(User.email == normalized).first() if normalized else None
    if user is None:
        raise NotFound("User not found")
    return user


def apply_plan(user: User, plan: Plan, now: datetime | None = None) -> None:
    """Put a user on a plan. Paid plans start a new period from ``now``."""
    if plan is Plan.FREE:
        user.plan = plan.value
        user.premium = False
        user.expires_at = None
        return
    now = now or now_utc()
    user.plan = plan.value
    user.premium = True
    user.expires_at = now + timedelta(days=plan_duration_days(plan))


def activate_user(
    db: Session,
    actor: Optional[User],
    email: str,
    plan_name: Optional[str],
    now: datetime | None = None,
) -> User:
    require_admin(actor)
    user = get_user_by_email(db, email)
    plan = parse_plan(plan_name or Plan.WEEKLY.value)

    apply_plan(user, plan, now)
    # Admins keep their approval.
    if settings.activation_requires_reapproval and not user.is_admin:
        user.approved = False
    db.commit()
    db.refresh(user)
    logger.info("%s activated %s on plan %s until %s", actor.email, user.email, user.plan, user.expires_at)
    return user


def approve_user(db: Session, actor: Optional[User], email: str) -> User:
    require_admin(actor)
    user = get_user_by_email(db, email)
    user.approved = True
    db.commit()
    db.refresh(user)
    logger.info("%s approved %s", actor.email, user.email)
    return user
