"""
Recurring mirror runs on a cron schedule (APScheduler, asyncio flavour).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from apscheduler.events import (
    EVENT_JOB_ERROR,
    EVENT_JOB_EXECUTED,
    EVENT_JOB_MISSED,
    JobExecutionEvent,
)
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from ..config import Settings
from .jobs import TASK_NAME, run_mirror
from .types import TaskResult

LOGGER = logging.getLogger(__name__)

# A run that starts more than five minutes late is dropped, not queued.
MISFIRE_GRACE_SECONDS = 300


def create_job_listener() -> Callable[[JobExecutionEvent], None]:
    """Return a listener that reports each mirror run in the log."""

    def on_job_event(event: JobExecutionEvent) -> None:
        if event.code == EVENT_JOB_MISSED:
            LOGGER.warning(
                "Job %s scheduled for %s was missed", event.job_id, event.scheduled_run_time
            )
            return

        if event.exception is not None:
            LOGGER.error(
                "Job %s crashed: %s", event.job_id, event.exception, exc_info=event.exception
            )
            return

        result = event.retval
        if not isinstance(result, TaskResult):
            LOGGER.info("Job %s finished", event.job_id)
            return

        LOGGER.log(
            logging.INFO if result.success else logging.WARNING,
            "Job %s %s in %.2fs: %s",
            event.job_id,
            "succeeded" if result.success else "failed",
            result.duration_seconds,
            result.message,
        )

    return on_job_event


def create_scheduler(settings: Settings) -> AsyncIOScheduler:
    """
    Build a scheduler with the mirror job registered but not yet started.

    At most one run is active at a time and missed runs are coalesced.
    """

    scheduler = AsyncIOScheduler(
        timezone="UTC",
        job_defaults={
            "coalesce": True,
            "max_instances": 1,
            "misfire_grace_time": MISFIRE_GRACE_SECONDS,
        },
    )
    scheduler.add_listener(
        create_job_listener(), EVENT_JOB_EXECUTED | EVENT_JOB_ERROR | EVENT_JOB_MISSED
    )

    options: dict[str, Any] = {}
    if settings.scheduler.run_on_start:
        options["next_run_time"] = datetime.now(UTC)

    scheduler.add_job(
        run_mirror,
        trigger=CronTrigger.from_crontab(settings.scheduler.cron, timezone="UTC"),
        id=TASK_NAME,
        name="Mirror Feed",
        kwargs={"settings": settings},
        replace_existing=True,
        **options,
    )
    return scheduler


async def run_scheduler(settings: Settings, stop: asyncio.Event | None = None) -> None:
    """Run scheduled mirror passes until ``stop`` is set or the task is cancelled."""

    stop = stop or asyncio.Event()
    scheduler = create_scheduler(settings)
    scheduler.start()

    job = scheduler.get_job(TASK_NAME)
    LOGGER.info(
        "Scheduler started with cron '%s'; next run at %s",
        settings.scheduler.cron,
        job.next_run_time if job else None,
    )
    try:
        await stop.wait()
    finally:
        scheduler.shutdown(wait=False)
        LOGGER.info("Scheduler stopped")


__all__ = ["create_job_listener", "create_scheduler", "run_scheduler"]
