from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from app.models import User
from app.services.expiry_scheduler import ExpirySweepScheduler


def test_rejects_invalid_cron():
    with pytest.raises(ValueError):
        ExpirySweepScheduler(cron="not a cron")


def test_compute_next_run():
    start = datetime(2026, 10, 19, 12, 1, tzinfo=timezone.utc)
    assert ExpirySweepScheduler._compute_next_run("*/5 * * * *", start) == datetime(
        2026, 10, 19, 12, 5, tzinfo=timezone.utc
    )


@pytest.mark.asyncio
async def test_run_once_expires_lapsed_users(db, make_user):
    past = datetime.now(timezone.utc) - timedelta(hours=1)
    user = make_user("u@x.com", plan="weekly", premium=True, expires_at=past)

    scheduler = ExpirySweepScheduler(poll_seconds=1)
    assert await scheduler.run_once() == 1
    assert scheduler.last_run_at is not None

    db.expire_all()
    user = db.get(User, user.id)
    assert user.premium is False
    assert user.plan == "free"


@pytest.mark.asyncio
async def test_tick_skips_until_next_slot(db):
    scheduler = ExpirySweepScheduler(poll_seconds=1)
    scheduler.next_run_at = datetime.now(timezone.utc) + timedelta(minutes=10)
    await scheduler._tick()
    assert scheduler.last_run_at is None

    scheduler.next_run_at = datetime.now(timezone.utc) - timedelta(seconds=1)
    await scheduler._tick()
    assert scheduler.last_run_at is not None
    assert scheduler.next_run_at > datetime.now(timezone.utc)
