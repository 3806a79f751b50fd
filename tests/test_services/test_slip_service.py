from __future__ import annotations

import pytest

from app.core.exceptions import Forbidden, NotFound, ValidationError
from app.services import slip_service
from app.services.entitlement import Plan
from app.services.slip_service import create_slip, resolve_access, total_odds, update_game, update_slip_type


def test_total_odds_is_rounded_product():
    assert total_odds([{"odd": 1.5}, {"odd": 2.0}, {"odd": 1.33}]) == 3.99
    assert total_odds([{"odd": "2.5"}, {"odd": 2}]) == 5.0


def test_total_odds_empty_or_neutral():
    assert total_odds([]) == 1.0
    assert total_odds([{"odd": 1.0}, {"odd": 1.0}]) == 1.0
    assert total_odds([{"odd": None}, {"odd": "n/a"}, {}]) == 1.0


def test_resolve_access_from_name_or_legacy_flags():
    assert resolve_access("monthly") is Plan.MONTHLY
    assert resolve_access("premium") is Plan.WEEKLY
    assert resolve_access(vip=True, premium=True) is Plan.VIP
    assert resolve_access(premium=True) is Plan.WEEKLY
    assert resolve_access() is Plan.FREE


def test_create_slip_computes_total_and_keeps_game_order(db, admin):
    games = [
        {"home": "Team A", "away": "Team B", "odd": 1.5, "overUnder": "O2.5"},
        {"home": "Team C", "away": "Team D", "odd": "2.0", "overUnder": "U2.5", "result": "won"},
    ]
    slip = create_slip(db, admin, "2026-10-19", games, premium=True)

    assert slip.access == "weekly"
    assert slip.total == 3.0
    assert [g.home for g in slip.games] == ["Team A", "Team C"]
    assert slip.games[0].result == "pending"
    assert slip.games[1].result == "won"

    data = slip_service.serialize_slip(slip)
    assert data["premium"] is True and data["free"] is False and data["vip"] is False
    assert data["totalOdds"] == 3.0
    assert data["games"][0]["overUnder"] == "O2.5"


@pytest.mark.parametrize("date,games", [("", [{"odd": 2}]), ("2026-10-19", []), (None, None)])
def test_create_slip_requires_date_and_games(db, admin, date, games):
    with pytest.raises(ValidationError):
        create_slip(db, admin, date, games or [])


def test_create_slip_requires_admin(db, make_user):
    user = make_user("u@x.com")
    with pytest.raises(Forbidden):
        create_slip(db, user, "2026-10-19", [{"odd": 2}])


def test_create_slip_enforces_minimum_total_odds(db, admin, monkeypatch):
    monkeypatch.setattr(slip_service.settings, "min_slip_total_odds", 2.0)
    with pytest.raises(ValidationError):
        create_slip(db, admin, "2026-10-19", [{"odd": 1.2}, {"odd": 1.3}])
    assert create_slip(db, admin, "2026-10-19", [{"odd": 1.5}, {"odd": 1.5}]).total == 2.25


def test_update_game_patches_only_given_fields(db, admin, make_slip):
    slip = make_slip(odds=(1.5, 2.0))
    game = update_game(db, admin, str(slip.id), 1, result="won")
    assert game.result == "won"
    assert game.over_under == ""

    game = update_game(db, admin, str(slip.id), 1, over_under="O1.5")
    assert (game.result, game.over_under) == ("won", "O1.5")


def test_update_game_rejects_bad_index_and_unknown_slip(db, admin, make_slip):
    slip = make_slip(odds=(1.5,))
    with pytest.raises(ValidationError):
        update_game(db, admin, str(slip.id), 3, result="lost")
    with pytest.raises(ValidationError):
        update_game(db, admin, str(slip.id), -1, result="lost")
    with pytest.raises(NotFound):
        update_game(db, admin, "not-a-uuid", 0, result="lost")


def test_update_slip_type(db, admin, make_slip):
    slip = make_slip(access="free")
    assert update_slip_type(db, admin, str(slip.id), "vip").access == "vip"
    assert update_slip_type(db, admin, str(slip.id), "premium").access == "weekly"
    with pytest.raises(ValidationError):
        update_slip_type(db, admin, str(slip.id), "gold")
