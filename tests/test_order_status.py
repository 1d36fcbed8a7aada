import pytest
from unittest.mock import AsyncMock, patch, MagicMock
from uuid import UUID, uuid4
from cafe_api.core.errors import InvalidOrderStatus, OrderNotFound
from cafe_api.models.notification import Notification
from cafe_api.models.order import Order, OrderStatus
from cafe_api.services.order_service import update_order_status, place_order
from factories import make_product, order_request

# --- CORE MOCKING UTILITIES ---

class AsyncContextManagerMock:
    """Mocks 'async with in_transaction() as conn:' to fulfill the async context manager protocol."""
    async def __aenter__(self):
        return object()
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        pass


class QuerySetMock:
    """Chainable stand-in for a Tortoise queryset: chaining returns itself, awaiting returns the result."""
    def __init__(self, result):
        self.result = result

    def using_db(self, conn):
        return self

    def prefetch_related(self, *args):
        return self

    def __await__(self):
        async def resolve():
            return self.result
        return resolve().__await__()

# --- SETUP FIXTURES ---

@pytest.fixture
def mock_order_preparing():
    """Mock Order in the middle of the kitchen flow."""
    mock_order = MagicMock()
    mock_order.id = UUID("d675f4f3-6c36-46b9-abcf-ba0aa3c60a5e")
    mock_order.order_number = "ORD20261019093015042"
    mock_order.customer_id = "cust-abc"
    mock_order.status = OrderStatus.PREPARING
    mock_order.is_completed = False
    mock_order.save = AsyncMock()
    return mock_order

# --- TESTS ---

@pytest.mark.asyncio
@patch('cafe_api.services.order_service.in_transaction', new_callable=MagicMock)
@patch('cafe_api.services.order_service.create_notification', new_callable=AsyncMock)
async def test_ready_does_not_notify_customer(mock_notify, mock_in_transaction, mock_order_preparing):
    mock_in_transaction.return_value = AsyncContextManagerMock()

    with patch.object(Order, 'get_or_none', MagicMock(return_value=QuerySetMock(mock_order_preparing))):
        updated_order = await update_order_status(mock_order_preparing.id, "Ready")

    assert updated_order.status == OrderStatus.READY
    assert updated_order.is_completed is False
    mock_order_preparing.save.assert_called_once()
    mock_notify.assert_not_called()


@pytest.mark.asyncio
@patch('cafe_api.services.order_service.in_transaction', new_callable=MagicMock)
@patch('cafe_api.services.order_service.create_notification', new_callable=AsyncMock)
async def test_served_completes_and_notifies_customer(mock_notify, mock_in_transaction, mock_order_preparing):
    mock_in_transaction.return_value = AsyncContextManagerMock()

    with patch.object(Order, 'get_or_none', MagicMock(return_value=QuerySetMock(mock_order_preparing))):
        updated_order = await update_order_status(mock_order_preparing.id, "Served")

    assert updated_order.is_completed is True
    mock_notify.assert_called_once()
    args, kwargs = mock_notify.call_args
    assert kwargs['target_role'] == "customer"
    assert kwargs['customer_id'] == "cust-abc"
    assert kwargs['related_id'] == mock_order_preparing.id
    assert "ORD20261019093015042" in kwargs['message']


@pytest.mark.asyncio
@patch('cafe_api.services.order_service.in_transaction', new_callable=MagicMock)
async def test_unknown_order_raises_not_found(mock_in_transaction):
    mock_in_transaction.return_value = AsyncContextManagerMock()

    with patch.object(Order, 'get_or_none', MagicMock(return_value=QuerySetMock(None))):
        with pytest.raises(OrderNotFound):
            await update_order_status(uuid4(), "Ready")


@pytest.mark.asyncio
async def test_unknown_status_is_rejected_before_lookup():
    with patch.object(Order, 'get_or_none') as mock_get:
        with pytest.raises(InvalidOrderStatus):
            await update_order_status(uuid4(), "Delivered")
        mock_get.assert_not_called()


@pytest.mark.asyncio
async def test_served_order_persists_completion_and_notification(db):
    water = await make_product("Water", "25.00")
    order = await place_order(order_request([(water, 1)], "25.00", customer_id="cust-1"))

    await update_order_status(order.id, "Served")

    saved = await Order.get(id=order.id)
    assert saved.status == OrderStatus.SERVED
    assert saved.is_completed is True
    notice = await Notification.get(target_role="customer", related_id=str(order.id))
    assert notice.customer_id == "cust-1"
    assert notice.type == "success"


@pytest.mark.asyncio
async def test_transitions_are_permissive(db):
    water = await make_product("Water", "25.00")
    order = await place_order(order_request([(water, 1)], "25.00"))

    await update_order_status(order.id, "Completed")
    reopened = await update_order_status(order.id, "Preparing")

    assert reopened.status == OrderStatus.PREPARING
    assert reopened.is_completed is False
