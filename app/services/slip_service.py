"""Slip content: creation, listing, result marking and tier changes."""
from __future__ import annotations

import logging
import math
import uuid
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from app.config import settings
from app.core.exceptions import Forbidden, NotFound, ValidationError
from app.core.security import as_utc
from app.models import Game, Slip, User
from app.services.entitlement import Plan, can_view, parse_plan, require_admin, viewable_tiers

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


def _odd_value(raw: Any) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 1.0
    if math.isnan(value) or math.isinf(value):
        return 1.0
    return value


def total_odds(games: Iterable[Any]) -> float:
    """Product of every game's odd, rounded to 2 decimals. Missing odds count as 1."""
    total = 1.0
    for game in games:
        raw = game.get("odd") if isinstance(game, dict) else getattr(game, "odd", None)
        total *= _odd_value(raw)
    return round(total, 2)


def resolve_access(
    access: Optional[str] = None,
    premium: bool = False,
    vip: bool = False,
) -> Plan:
    """Pick a slip tier from an explicit name or the legacy premium/vip flags."""
    if access:
        return parse_plan(access)
    if vip:
        return Plan.VIP
    if premium:
        return Plan.WEEKLY
    return Plan.FREE


def serialize_game(game: Game) -> Dict[str, Any]:
    return {
        "home": game.home,
        "away": game.away,
        "odd": game.odd,
        "overUnder": game.over_under,
        "result": game.result,
    }


def serialize_slip(slip: Slip) -> Dict[str, Any]:
    total = total_odds(slip.games)
    created_at = as_utc(slip.created_at)
    return {
        "id": str(slip.id),
        "date": slip.date,
        "access": slip.access,
        "free": slip.access == Plan.FREE.value,
        "premium": slip.access == Plan.WEEKLY.value,
        "monthly": slip.access == Plan.MONTHLY.value,
        "vip": slip.access == Plan.VIP.value,
        "games": [serialize_game(g) for g in slip.games],
        "total": total,
        "totalOdds": total,
        "createdAt": created_at.isoformat() if created_at else None,
    }


def _get_slip(db: Session, slip_id: str | uuid.UUID) -> Slip:
    try:
        key = slip_id if isinstance(slip_id, uuid.UUID) else uuid.UUID(str(slip_id))
    except ValueError:
        raise NotFound("Slip not found") from None
    slip = db.get(Slip, key)
    if slip is None:
        raise NotFound("Slip not found")
    return slip


def create_slip(
    db: Session,
    actor: User,
    date: Optional[str],
    games: List[Dict[str, Any]],
    access: Optional[str] = None,
    premium: bool = False,
    vip: bool = False,
) -> Slip:
    require_admin(actor)
    date = (date or "").strip()
    if not date or not games:
        raise ValidationError("Invalid slip data")

    tier = resolve_access(access, premium=premium, vip=vip)
    slip = Slip(date=date, access=tier.value)
    for position, item in enumerate(games):
        slip.games.append(
            Game(
                position=position,
                home=(item.get("home") or "").strip(),
                away=(item.get("away") or "").strip(),
                odd=_odd_value(item.get("odd")),
                over_under=item.get("overUnder") or "",
                result=item.get("result") or "pending",
            )
        )
    slip.total = total_odds(slip.games)

    if settings.min_slip_total_odds and slip.total < settings.min_slip_total_odds:
        raise ValidationError(f"Minimum total odds is {settings.min_slip_total_odds:g}")

    db.add(slip)
    db.commit()
    db.refresh(slip)
    logger.info("%s created %s slip %s for %s (%d games)", actor.email, slip.access, slip.id, slip.date, len(slip.games))
    return slip


def list_slips(
    db: Session,
    viewer: Optional[User],
    page: int = 1,
    limit: int = 10,
    date: Optional[str] = None,
) -> Dict[str, Any]:
    page = max(1, page)
    limit = min(max(1, limit), MAX_PAGE_SIZE)

    query = db.query(Slip).filter(Slip.access.in_(viewable_tiers(viewer)))
    if date:
        query = query.filter(Slip.date == date.strip())

    count = query.count()
    rows = (
        query.order_by(Slip.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {
        "slips": [serialize_slip(s) for s in rows],
        "page": page,
        "pages": max(1, math.ceil(count / limit)),
        "count": count,
    }


def get_slip(db: Session, viewer: Optional[User], slip_id: str) -> Slip:
    slip = _get_slip(db, slip_id)
    if not can_view(viewer, slip):
        raise Forbidden("Upgrade your plan to view this slip")
    return slip


def update_game(
    db: Session,
    actor: User,
    slip_id: str,
    game_index: int,
    result: Optional[str] = None,
    over_under: Optional[str] = None,
) -> Game:
    require_admin(actor)
    slip = _get_slip(db, slip_id)
    if game_index is None or not 0 <= game_index < len(slip.games):
        raise ValidationError("Invalid slip/game index")

    game = slip.games[game_index]
    if result is not None:
        game.result = result
    if over_under is not None:
        game.over_under = over_under
    db.commit()
    db.refresh(game)
    logger.info("%s updated game %d of slip %s: result=%s", actor.email, game_index, slip.id, game.result)
    return game


def update_slip_type(db: Session, actor: User, slip_id: str, slip_type: Optional[str]) -> Slip:
    require_admin(actor)
    slip = _get_slip(db, slip_id)
    slip.access = parse_plan(slip_type).value
    db.commit()
    db.refresh(slip)
    logger.info("%s set slip %s to %s", actor.email, slip.id, slip.access)
    return slip


def delete_slip(db: Session, actor: User, slip_id: str) -> None:
    require_admin(actor)
    slip = _get_slip(db, slip_id)
    db.delete(slip)
    db.commit()
    logger.info("%s deleted slip %s", actor.email, slip_id)
