import asyncio
import pytest
from unittest.mock import AsyncMock, patch

from cafe_api.models.notification import Notification
from cafe_api.services.reorder_service import check_and_reorder
from cafe_api.workers.reorder_poller import run_reorder_poller, run_reorder_sweep
from factories import make_item


@pytest.mark.asyncio
async def test_sweep_replenishes_only_low_auto_items(db):
    low = await make_item("Cups", "pcs", current_stock=5, reorder_level=10)
    at_level = await make_item("Lids", "pcs", current_stock=10, reorder_level=10)
    healthy = await make_item("Sugar", "g", current_stock=500, reorder_level=100)
    manual = await make_item("Syrup", "ml", current_stock=1, reorder_level=50, auto_reorder_enabled=False)

    replenished = await check_and_reorder(amount=10)

    assert {item.name for item in replenished} == {"Cups", "Lids"}
    for item in (low, at_level, healthy, manual):
        await item.refresh_from_db()
    assert low.current_stock == 15
    assert at_level.current_stock == 20
    assert healthy.current_stock == 500
    assert manual.current_stock == 1

    notices = await Notification.filter(target_role="admin", category="inventory")
    assert len(notices) == 2


@pytest.mark.asyncio
async def test_sweep_with_nothing_low_is_a_no_op(db):
    await make_item("Sugar", "g", current_stock=500, reorder_level=100)
    assert await check_and_reorder() == []
    assert await Notification.all().count() == 0


@pytest.mark.asyncio
@patch('cafe_api.workers.reorder_poller.check_and_reorder', new_callable=AsyncMock)
async def test_sweep_errors_are_logged_not_raised(mock_reorder):
    mock_reorder.side_effect = RuntimeError("db unavailable")
    await run_reorder_sweep()
    mock_reorder.assert_awaited_once()


@pytest.mark.asyncio
@patch('cafe_api.workers.reorder_poller.run_reorder_sweep', new_callable=AsyncMock)
async def test_poller_stops_on_cancel(mock_sweep):
    task = asyncio.create_task(run_reorder_poller(interval=3600))
    await asyncio.sleep(0.05)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    mock_sweep.assert_awaited_once()
