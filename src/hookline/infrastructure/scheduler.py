#
# SPDX-License-Identifier: AGPL-3.0-only
# Copyright (c) 2026 m2-eng
# Author: m2-eng
# Co-Author: GitHub Copilot
# License: GNU Affero General Public License v3.0 (AGPL-3.0-only)
# Purpose: Periodic single-flight job runner.
#
"""
Periodic single-flight job runner.
"""

import asyncio
import inspect
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional


logger = logging.getLogger(__name__)

DEFAULT_TICK_SECONDS = 60 * 5


@dataclass
class CronJob:
    id: str
    interval: int
    callback: Callable
    args: tuple = ()
    last_check: float = 0

    def is_due(self, now: float) -> bool:
        return self.last_check + self.interval <= now


class Scheduler:
    """
    Runs registered jobs once their interval has elapsed.

    A tick disarms the timer, runs every due job sequentially and re-arms
    the timer only when all of them have finished, so ticks never overlap.
    """

    def __init__(self, tick_seconds: float = DEFAULT_TICK_SECONDS, clock: Callable[[], float] = time.time):
        """
        Args:
            tick_seconds: Seconds between two ticks
            clock: Returns the current epoch time in seconds
        """
        self.tick_seconds = tick_seconds
        self.clock = clock
        self.cron_jobs: Dict[str, CronJob] = {}
        self.running = False
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._timer: Optional[asyncio.TimerHandle] = None
        self._task: Optional[asyncio.Task] = None
        self._closed = False

    @property
    def armed(self) -> bool:
        return self._timer is not None

    def cron_job(self, id: str = None, interval: int = 0, callback: Callable = None, args=()) -> bool:
        """
        Sets or replaces a job.

        Args:
            id: Unique job id
            interval: Seconds between two runs
            callback: Plain or coroutine function
            args: Positional arguments for the callback

        Returns:
            False if the job was rejected (missing id or callback)
        """
        if not id or callback is None:
            logger.warning("Cron job rejected: id and callback are required")
            return False

        self.cron_jobs[id] = CronJob(id, interval, callback, tuple(args or ()), self.clock())
        return True

    def remove_cron_job(self, id: str) -> None:
        self.cron_jobs.pop(id, None)

    def start(self) -> None:
        """Arms the timer on the running event loop."""
        self._loop = asyncio.get_running_loop()
        self._closed = False
        self._arm()
        logger.info("Scheduler started (tick every %ss, %d jobs)", self.tick_seconds, len(self.cron_jobs))

    def close(self) -> None:
        self._closed = True
        self._disarm()
        if self._task and not self._task.done():
            self._task.cancel()
        self._task = None

    def _arm(self) -> None:
        if self._loop is None or self._closed or self._timer is not None:
            return
        self._timer = self._loop.call_later(self.tick_seconds, self._on_timer)

    def _disarm(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self) -> None:
        self._timer = None
        self._task = self._loop.create_task(self.run_pending())

    async def run_pending(self) -> int:
        """
        Runs one tick.

        Returns:
            Number of jobs executed (0 if a tick is already in flight)
        """
        if self.running:
            return 0

        self.running = True
        # Stop the timer while executing
        self._disarm()
        executed = 0

        try:
            now = self.clock()

            for job_id in list(self.cron_jobs):
                job = self.cron_jobs.get(job_id)
                if job is None or not job.is_due(now):
                    continue

                job.last_check = now

                try:
                    result = job.callback(*job.args)
                    if inspect.isawaitable(result):
                        await result
                except Exception:
                    logger.exception("Cron job '%s' failed", job_id)

                executed += 1
        finally:
            self.running = False
            self._arm()

        return executed
