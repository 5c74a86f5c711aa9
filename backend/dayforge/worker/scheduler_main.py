"""Scheduler worker: plans tomorrow every evening and logs yesterday every morning."""
from __future__ import annotations

import logging
import signal
import threading
from typing import Callable

from apscheduler.schedulers.background import BackgroundScheduler
from sqlalchemy.orm import Session

from dayforge.core.config import Settings, settings
from dayforge.core.logging import configure_logging
from dayforge.db.session import SessionLocal
from dayforge.services.job_runner import (
    JobRunResult,
    run_day_completion_for_all_users,
    run_day_plan_for_all_users,
)

logger = logging.getLogger(__name__)


def _run_batch(job_name: str, runner: Callable[[Session], JobRunResult]) -> None:
    session = SessionLocal()
    try:
        result = runner(session)
    except Exception:  # pragma: no cover - a failed run must not kill the worker
        logger.exception("%s failed", job_name)
        return
    finally:
        session.close()
    logger.info(
        "%s finished: users=%s days=%s failures=%s",
        job_name,
        result.users_processed,
        result.days_written,
        result.failures,
    )


def run_day_plan_job() -> None:
    _run_batch("day_plan_job", run_day_plan_for_all_users)


def run_day_completion_job() -> None:
    _run_batch("day_completion_job", run_day_completion_for_all_users)


def register_jobs(scheduler: BackgroundScheduler, config: Settings | None = None) -> None:
    config = config or settings
    jobs = (
        ("day_plan_job", run_day_plan_job, config.day_plan_job_hour, config.day_plan_job_minute),
        (
            "day_completion_job",
            run_day_completion_job,
            config.day_completion_job_hour,
            config.day_completion_job_minute,
        ),
    )
    for job_id, func, hour, minute in jobs:
        scheduler.add_job(func, trigger="cron", hour=hour, minute=minute, id=job_id, replace_existing=True)
        logger.info("Scheduled %s daily at %02d:%02d (%s)", job_id, hour, minute, config.scheduler_timezone)


def build_scheduler(config: Settings | None = None) -> BackgroundScheduler:
    config = config or settings
    scheduler = BackgroundScheduler(timezone=config.scheduler_timezone)
    if config.scheduler_enabled:
        register_jobs(scheduler, config)
    return scheduler


def main() -> None:
    configure_logging(log_level=settings.log_level, planner_log_level=settings.planner_log_level)
    scheduler = build_scheduler()
    if not settings.scheduler_enabled:
        logger.warning("SCHEDULER_ENABLED is off; worker idles until stopped")
    else:
        scheduler.start()
        if settings.jobs_run_on_startup:
            # Yesterday first so today's rotation sees it.
            run_day_completion_job()
            run_day_plan_job()

    stopped = threading.Event()

    def shutdown(signum, frame):  # pragma: no cover - signal handler
        logger.info("Stopping scheduler worker (signal %s)", signum)
        if scheduler.running:
            scheduler.shutdown(wait=False)
        stopped.set()

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)
    try:
        stopped.wait()
    except KeyboardInterrupt:  # pragma: no cover - manual stop
        shutdown(signal.SIGINT, None)


if __name__ == "__main__":  # pragma: no cover - manual launch
    main()
