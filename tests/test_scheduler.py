"""Tests for ConsolidationScheduler."""

import pytest

from navicart.grocery.config import load_config
from navicart.grocery.consolidator import Consolidator
from navicart.grocery.db import MemoryItemStore
from navicart.grocery.models import Item


def _consolidator(items=()):
    return Consolidator(MemoryItemStore(list(items)))


def test_scheduler_import_error():
    """ConsolidationScheduler raises ImportError if apscheduler is missing."""
    try:
        from navicart.grocery.scheduler import ConsolidationScheduler

        scheduler = ConsolidationScheduler(load_config(), _consolidator())
        assert scheduler is not None
        assert scheduler.running is False
    except ImportError:
        pass


def test_scheduler_setup_jobs():
    """The consolidation job is registered on the configured schedule."""
    try:
        from navicart.grocery.scheduler import ConsolidationScheduler

        config = load_config()
        config.consolidation.schedule = "*/15 * * * *"
        scheduler = ConsolidationScheduler(config, _consolidator())
        scheduler.setup_jobs()

        job_ids = {j["id"] for j in scheduler.get_jobs()}
        assert job_ids == {"consolidate"}
    except ImportError:
        pytest.skip("apscheduler not installed")


def test_scheduler_invalid_cron():
    try:
        from navicart.grocery.scheduler import ConsolidationScheduler
    except ImportError:
        pytest.skip("apscheduler not installed")

    config = load_config()
    config.consolidation.schedule = "every half hour"
    scheduler = ConsolidationScheduler(config, _consolidator())
    with pytest.raises(ValueError, match="Invalid cron expression"):
        scheduler.setup_jobs()


def test_stop_when_not_running():
    try:
        from navicart.grocery.scheduler import ConsolidationScheduler
    except ImportError:
        pytest.skip("apscheduler not installed")

    scheduler = ConsolidationScheduler(load_config(), _consolidator())
    scheduler.stop()
    assert scheduler.running is False


@pytest.mark.asyncio
async def test_job_runs_consolidation():
    try:
        from navicart.grocery.scheduler import ConsolidationScheduler
    except ImportError:
        pytest.skip("apscheduler not installed")

    store = MemoryItemStore([
        Item(text="Apple", category="Produce", created_at=1.0),
        Item(text="apple", category="Produce", created_at=2.0),
    ])
    scheduler = ConsolidationScheduler(load_config(), Consolidator(store))
    await scheduler._job_consolidate()

    items = await store.list()
    assert len(items) == 1
    assert items[0].quantity == 2


@pytest.mark.asyncio
async def test_job_failure_is_logged(caplog):
    try:
        from navicart.grocery.scheduler import ConsolidationScheduler
    except ImportError:
        pytest.skip("apscheduler not installed")

    class BrokenConsolidator:
        async def run(self):
            raise RuntimeError("store offline")

    scheduler = ConsolidationScheduler(load_config(), BrokenConsolidator())
    await scheduler._job_consolidate()
    assert "Scheduled consolidation failed" in caplog.text
