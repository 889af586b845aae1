"""Tests for ExpiryScheduler."""

import logging
from datetime import date, timedelta

import pytest

from shelfwatch.label.config import load_config
from shelfwatch.label.db import ProductDB


@pytest.fixture
def config(tmp_path):
    config = load_config()
    config.database.path = str(tmp_path / "products.db")
    return config


def _scheduler(config):
    try:
        from shelfwatch.label.scheduler import ExpiryScheduler
    except ImportError:
        pytest.skip("apscheduler not installed")
    try:
        return ExpiryScheduler(config)
    except ImportError:
        pytest.skip("apscheduler not installed")


def test_scheduler_not_running_initially(config):
    scheduler = _scheduler(config)
    assert scheduler.running is False


def test_scheduler_setup_jobs(config):
    """Both the sweep and the reminder job are registered."""
    config.alerts.schedule = "30 8 * * *"
    scheduler = _scheduler(config)
    scheduler.setup_jobs()

    job_ids = {j["id"] for j in scheduler.get_jobs()}
    assert job_ids == {"expire_items", "expiry_alerts"}


def test_scheduler_rejects_bad_cron(config):
    config.alerts.schedule = "every hour"
    scheduler = _scheduler(config)
    with pytest.raises(ValueError, match="Invalid cron expression"):
        scheduler.setup_jobs()


@pytest.mark.asyncio
async def test_expire_job_marks_products(config):
    scheduler = _scheduler(config)
    db = ProductDB(config.database.path)
    old = db.add_product("Bread", expiry_date=(date.today() - timedelta(days=2)).isoformat())
    fresh = db.add_product("Milk", expiry_date=(date.today() + timedelta(days=2)).isoformat())
    db.close()

    await scheduler._job_expire_items()

    db = ProductDB(config.database.path)
    try:
        assert db.get(old)["status"] == "expired"
        assert db.get(fresh)["status"] == "active"
    finally:
        db.close()


@pytest.mark.asyncio
async def test_alerts_job_logs_reminders(config, caplog):
    scheduler = _scheduler(config)
    db = ProductDB(config.database.path)
    db.add_product("Milk", expiry_date=(date.today() + timedelta(days=3)).isoformat())
    db.add_product("Bread", expiry_date=(date.today() - timedelta(days=2)).isoformat())
    db.mark_expired()
    db.close()

    with caplog.at_level(logging.WARNING, logger="shelfwatch.label.scheduler"):
        await scheduler._job_expiry_alerts()

    assert "[warning] Milk expires in 3 days!" in caplog.text
    assert "[expired] Bread expired 2 days ago" in caplog.text
