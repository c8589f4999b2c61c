"""Scheduled consolidation passes over the shared grocery list."""

from __future__ import annotations

import logging

from .consolidator import Consolidator

logger = logging.getLogger(__name__)


class ConsolidationScheduler:
    """Runs periodic consolidation passes.

    Uses APScheduler for cron-based scheduling. The periodic pass catches
    duplicates created while no client was around to debounce them.
    """

    def __init__(self, config, consolidator: Consolidator) -> None:
        """Initialize scheduler with a GroceryConfig.

        Args:
            config: GroceryConfig instance.
            consolidator: Consolidator bound to the item store.

        Raises:
            ImportError: If apscheduler is not installed.
        """
        try:
            from apscheduler.schedulers.asyncio import AsyncIOScheduler
            from apscheduler.triggers.cron import CronTrigger
        except ImportError:
            raise ImportError(
                "apscheduler is required: pip install apscheduler"
            )

        self._config = config
        self._consolidator = consolidator
        self._scheduler = AsyncIOScheduler()
        self._CronTrigger = CronTrigger
        self._running = False

    def setup_jobs(self) -> None:
        """Register scheduled jobs based on config."""
        schedule = self._config.consolidation.schedule
        trigger = self._parse_cron(schedule)
        self._scheduler.add_job(
            self._job_consolidate,
            trigger=trigger,
            id="consolidate",
            name="Grocery list consolidation",
            replace_existing=True,
        )
        logger.info("Registered consolidation job: %s", schedule)

    def start(self) -> None:
        """Start the scheduler. Needs a running event loop."""
        self.setup_jobs()
        self._scheduler.start()
        self._running = True
        logger.info("Scheduler started")

    def stop(self) -> None:
        if self._running:
            self._scheduler.shutdown(wait=False)
            self._running = False
            logger.info("Scheduler stopped")

    @property
    def running(self) -> bool:
        return self._running

    def get_jobs(self) -> list[dict]:
        """Return info about scheduled jobs."""
        jobs = []
        for job in self._scheduler.get_jobs():
            next_run = getattr(job, "next_run_time", None)
            jobs.append({
                "id": job.id,
                "name": job.name,
                "next_run": str(next_run) if next_run else None,
            })
        return jobs

    def _parse_cron(self, expr: str):
        """Parse a cron expression into a CronTrigger."""
        parts = expr.split()
        if len(parts) == 5:
            return self._CronTrigger(
                minute=parts[0],
                hour=parts[1],
                day=parts[2],
                month=parts[3],
                day_of_week=parts[4],
            )
        raise ValueError(f"Invalid cron expression: {expr}")

    async def _job_consolidate(self) -> None:
        logger.info("Running scheduled consolidation...")
        try:
            result = await self._consolidator.run()
            if result.changed:
                logger.info(
                    "Scheduled consolidation merged %d records, deleted %d",
                    len(result.merged), len(result.deleted),
                )
        except Exception:
            logger.exception("Scheduled consolidation failed")
