"""
Periodic jobs: poll, evict, monthly and daily stats.

Each job is a short batch run with no cross-job locking; a job that fails
logs and waits for its next tick, which is the only retry.
"""
import logging
from typing import Any, Callable

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.interval import IntervalTrigger

from ghworld.config import Settings

logger = logging.getLogger(__name__)


def run_job(name: str, func: Callable[[], Any]) -> Any:
    try:
        result = func()
        logger.info(f"[scheduler] {name}: completed ({result})")
        return result
    except Exception as e:
        logger.exception(f"[scheduler] {name}: failed with error: {e}")
        return None


def poll_job(service):
    return run_job("poll github events", lambda: service.poll().to_dict())


def evict_job(service):
    return run_job("delete old commits", service.evict)


def monthly_stats_job(service):
    return run_job("update monthly stats", service.update_monthly_stats)


def daily_stats_job(service):
    return run_job("update daily stats", service.update_daily_stats)


def build_scheduler(service, settings: Settings, blocking: bool = False):
    scheduler = BlockingScheduler(timezone="UTC") if blocking else BackgroundScheduler(timezone="UTC")

    jobs = [
        ("poll_events", poll_job, settings.poll_interval_seconds),
        ("evict_commits", evict_job, settings.eviction_interval_seconds),
        ("monthly_stats", monthly_stats_job, settings.stats_interval_seconds),
        ("daily_stats", daily_stats_job, settings.stats_interval_seconds),
    ]
    for job_id, func, seconds in jobs:
        scheduler.add_job(
            func,
            trigger=IntervalTrigger(seconds=seconds),
            args=[service],
            id=job_id,
            name=job_id,
            replace_existing=True,
            max_instances=1,
            coalesce=True
        )
        logger.info(f"[scheduler] Registered {job_id} every {seconds}s")

    return scheduler
