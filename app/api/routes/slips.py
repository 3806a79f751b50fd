"""
Slip API Routes
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.dependencies import get_current_admin, get_optional_user
from app.database import get_db
from app.models import User
from app.schemas.slip import AddSlipRequest, SlipResultRequest, UpdateGameRequest, UpdateSlipTypeRequest
from app.services import slip_service
from app.services.entitlement import refresh_expiry

router = APIRouter()


@router.get("/slips")
async def get_slips(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=slip_service.MAX_PAGE_SIZE),
    date: Optional[str] = None,
    viewer: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
) -> dict:
    """Slips visible to the caller, newest first. Anonymous callers see free slips."""
    if viewer is not None and refresh_expiry(viewer):
        db.commit()
    result = slip_service.list_slips(db, viewer, page=page, limit=limit, date=date)
    return {"success": True, **result}


@router.get("/slips/{slip_id}")
async def get_slip(
    slip_id: str,
    viewer: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
) -> dict:
    slip = slip_service.get_slip(db, viewer, slip_id)
    return {"success": True, "slip": slip_service.serialize_slip(slip)}


@router.post("/add-slip")
async def add_slip(
    payload: AddSlipRequest,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
) -> dict:
    body = payload.slip
    slip = slip_service.create_slip(
        db,
        admin,
        date=body.date,
        games=[g.model_dump(by_alias=True) for g in body.games],
        access=body.access or body.type,
        premium=body.premium,
        vip=body.vip,
    )
    return {"success": True, "slip": slip_service.serialize_slip(slip)}


@router.post("/update-game")
async def update_game(
    payload: UpdateGameRequest,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
) -> dict:
    game = slip_service.update_game(
        db,
        admin,
        payload.slip_id,
        payload.game_index,
        result=payload.result,
        over_under=payload.over_under,
    )
    return {"success": True, "game": slip_service.serialize_game(game)}


@router.post("/slip-result")
async def slip_result(
    payload: SlipResultRequest,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
) -> dict:
    game = slip_service.update_game(db, admin, payload.slip_id, payload.game_index, result=payload.result)
    return {"success": True, "game": slip_service.serialize_game(game)}


@router.post("/update-slip-type")
async def update_slip_type(
    payload: UpdateSlipTypeRequest,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
) -> dict:
    slip = slip_service.update_slip_type(db, admin, payload.slip_id, payload.type)
    return {"success": True, "slip": slip_service.serialize_slip(slip)}


@router.delete("/slips/{slip_id}")
async def delete_slip(
    slip_id: str,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
) -> dict:
    slip_service.delete_slip(db, admin, slip_id)
    return {"success": True}
