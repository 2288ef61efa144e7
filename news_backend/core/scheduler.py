from datetime import timezone
from typing import Optional

import structlog
from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from ..config import Settings
from ..services.news_sync_service import NewsSyncService

logger = structlog.get_logger(__name__)

SYNC_JOB_ID = "news_sync_job"


class NewsSyncScheduler:
    """Runs the news sync on a fixed cron cadence inside the API process."""

    def __init__(self, sync_service: NewsSyncService, settings: Settings):
        self.sync_service = sync_service
        self.cron = settings.sync_cron
        self.scheduler: Optional[AsyncIOScheduler] = None

    def build_trigger(self) -> CronTrigger:
        return CronTrigger.from_crontab(self.cron, timezone=timezone.utc)

    def start(self) -> None:
        if self.scheduler and self.scheduler.running:
            return

        self.scheduler = AsyncIOScheduler(timezone=timezone.utc)
        self.scheduler.add_listener(self._job_listener, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR)

        # No catch-up: missed ticks collapse into nothing, the next tick is the retry
        self.scheduler.add_job(
            self.sync_service.run_scheduled,
            trigger=self.build_trigger(),
            id=SYNC_JOB_ID,
            name="News Sync Job",
            replace_existing=True,
            coalesce=True,
            misfire_grace_time=60,
        )
        self.scheduler.start()
        logger.info("news_sync_scheduled", cron=self.cron)

    def shutdown(self) -> None:
        if self.scheduler and self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("news_sync_scheduler_stopped")
        self.scheduler = None

    def _job_listener(self, event):
        if getattr(event, "exception", None):
            logger.error("scheduler_job_error", job_id=event.job_id, error=str(event.exception))
        else:
            logger.debug("scheduler_job_executed", job_id=event.job_id)
