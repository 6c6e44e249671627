"""
SCHEDULER BOOTSTRAP

Initializes and manages the APScheduler instance.
Scheduler is orchestration-only and contains no business logic.
"""

import logging
from decimal import Decimal

import pytz
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from moneywave.domain.services.snapshot_service import SnapshotService
from moneywave.scheduler.jobs import refresh_daily_snapshot_job

_logger = logging.getLogger(__name__)

_SCHEDULER: BackgroundScheduler | None = None


def start_scheduler(
    snapshot_service: SnapshotService,
    annual_ebit: Decimal,
    timezone_name: str = "Asia/Seoul",
    hour: int = 0,
    minute: int = 0,
) -> BackgroundScheduler:
    """
    Start the background scheduler and register all jobs.
    """
    global _SCHEDULER

    if _SCHEDULER is not None:
        return _SCHEDULER

    timezone = pytz.timezone(timezone_name)
    scheduler = BackgroundScheduler(timezone=timezone)

    # ------------------------------------------------------------
    # DAILY SNAPSHOT JOB
    # Every day @ 00:00 KST
    # ------------------------------------------------------------
    scheduler.add_job(
        refresh_daily_snapshot_job,
        trigger=CronTrigger(hour=hour, minute=minute, timezone=timezone),
        args=[snapshot_service, annual_ebit],
        id="daily_snapshot_job",
        replace_existing=True,
    )

    scheduler.start()
    _SCHEDULER = scheduler

    _logger.info("✅ Scheduler started with all jobs registered")
    return scheduler


def shutdown_scheduler():
    """
    Shutdown the scheduler safely.
    """
    global _SCHEDULER

    if _SCHEDULER:
        _SCHEDULER.shutdown(wait=False)
        _SCHEDULER = None
        _logger.info("🛑 Scheduler shut down")
