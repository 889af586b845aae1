"""Scheduled expiry checks for the product inventory."""

from __future__ import annotations

import logging

from .alerts import collect_alerts

logger = logging.getLogger(__name__)


class ExpiryScheduler:
    """Runs the expiry sweep and reminder jobs.

    Uses APScheduler for cron-based scheduling.
    """

    def __init__(self, config) -> None:
        """Initialize scheduler with a ScannerConfig.

        Args:
            config: ScannerConfig instance.

        Raises:
            ImportError: If apscheduler is not installed.
        """
        try:
            from apscheduler.schedulers.asyncio import AsyncIOScheduler
            from apscheduler.triggers.cron import CronTrigger
        except ImportError:
            raise ImportError(
                "apscheduler is required: pip install 'shelfwatch[scheduler]'"
            )

        self._config = config
        self._scheduler = AsyncIOScheduler()
        self._CronTrigger = CronTrigger
        self._running = False

    def setup_jobs(self) -> None:
        """Register scheduled jobs based on config."""
        # Expire old products (daily at midnight)
        self._scheduler.add_job(
            self._job_expire_items,
            trigger=self._parse_cron("0 0 * * *"),
            id="expire_items",
            name="Expiry sweep",
            replace_existing=True,
        )
        logger.info("Registered expiry sweep job: 0 0 * * *")

        self._scheduler.add_job(
            self._job_expiry_alerts,
            trigger=self._parse_cron(self._config.alerts.schedule),
            id="expiry_alerts",
            name="Expiry reminders",
            replace_existing=True,
        )
        logger.info(
            "Registered expiry reminder job: %s", self._config.alerts.schedule
        )

    def start(self) -> None:
        """Start the scheduler."""
        self.setup_jobs()
        self._scheduler.start()
        self._running = True
        logger.info("Scheduler started")

    def stop(self) -> None:
        """Stop the scheduler."""
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

    async def _job_expire_items(self) -> None:
        """Mark expired products in the inventory."""
        logger.info("Running expiry sweep...")

        try:
            from .db import ProductDB

            db = ProductDB(self._config.database.path)
            try:
                count = db.mark_expired()
                if count > 0:
                    logger.info("Marked %d product(s) as expired", count)
            finally:
                db.close()
        except Exception:
            logger.exception("Expiry sweep failed")

    async def _job_expiry_alerts(self) -> None:
        """Log reminders for products close to or past their expiry date."""
        try:
            from .db import ProductDB

            db = ProductDB(self._config.database.path)
            try:
                products = db.get_active() + db.get_expired()
            finally:
                db.close()

            for alert in collect_alerts(products):
                logger.warning("[%s] %s", alert.level.value, alert.message)
        except Exception:
            logger.exception("Expiry reminder job failed")
