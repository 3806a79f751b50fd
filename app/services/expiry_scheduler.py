"""
Lightweight in-process scheduler for the subscription expiry sweep.
The sweep cadence is a cron expression; next_run_at is recomputed after each run.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from croniter import croniter

from app.core.security import now_utc
from app.database import SessionLocal
from app.services.entitlement import expire_lapsed_users

logger = logging.getLogger(__name__)


class ExpirySweepScheduler:
    """Polls the clock and runs the expiry sweep when its cron slot comes up."""

    def __init__(self, cron: str = "*/5 * * * *", poll_seconds: int = 30):
        if not croniter.is_valid(cron):
            raise ValueError(f"Invalid expiry sweep cron expression: {cron!r}")
        self.cron = cron
        self.poll_seconds = poll_seconds
        self.next_run_at: datetime | None = None
        self.last_run_at: datetime | None = None
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task | None = None

    def start(self) -> None:
        """Start scheduler loop as background task."""
        if self._task and not self._task.done():
            return
        self._stop_event.clear()
        self.next_run_at = now_utc()
        self._task = asyncio.create_task(self._run_loop())
        logger.info("ExpirySweepScheduler started (%s)", self.cron)

    async def stop(self) -> None:
        """Stop scheduler loop and wait for completion."""
        self._stop_event.set()
        if self._task:
            await self._task
        logger.info("ExpirySweepScheduler stopped")

    async def _run_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                await self._tick()
            except Exception as exc:
                logger.exception("ExpirySweepScheduler tick failed: %s", exc)
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.poll_seconds)
            except asyncio.TimeoutError:
                pass

    async def _tick(self) -> None:
        now = now_utc()
        if self.next_run_at is not None and self.next_run_at > now:
            return
        # Ensure next_run_at moves forward even if the sweep fails.
        self.next_run_at = self._compute_next_run(self.cron, now)
        await self.run_once()

    async def run_once(self) -> int:
        """Run a sweep now in a worker thread. Returns the number of users reset."""
        expired = await asyncio.to_thread(self._sweep)
        self.last_run_at = now_utc()
        return expired

    @staticmethod
    def _sweep() -> int:
        db = SessionLocal()
        try:
            return expire_lapsed_users(db)
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    @staticmethod
    def _compute_next_run(cron: str, from_dt: datetime) -> datetime:
        return croniter(cron, from_dt).get_next(datetime)
