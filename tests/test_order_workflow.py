import re
from decimal import Decimal
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from cafe_api.core.errors import (
    CartValidationError,
    InsufficientStock,
    PersistenceError,
    ProductNotFound,
    ProductUnavailable,
    TotalMismatch,
)
from cafe_api.models.inventory import DeliveryZone
from cafe_api.models.notification import Notification
from cafe_api.models.order import Order, OrderStatus
from cafe_api.models.user import Role, User
from cafe_api.schemas.order import CartLineRequest, OrderRequest
from cafe_api.services.order_service import format_order_number, generate_order_number, place_order
from factories import make_item, make_product, order_request, recipe_line


@pytest.mark.asyncio
async def test_premade_shortfall_does_not_fall_back_to_recipe(db):
    milk = await make_item("Milk", "ml", current_stock=1000)
    latte = await make_product("Latte", "100.00", stock_quantity=2, recipe=[recipe_line(milk, 200)])

    with pytest.raises(InsufficientStock) as exc_info:
        await place_order(order_request([(latte, 3)], "300.00"))

    err = exc_info.value
    assert err.item_name == "Latte"
    assert "need 3, have 2" in err.message
    await milk.refresh_from_db()
    await latte.refresh_from_db()
    assert milk.current_stock == 1000
    assert latte.stock_quantity == 2
    assert await Order.all().count() == 0


@pytest.mark.asyncio
async def test_recipe_product_deducts_ingredients(db):
    teabag = await make_item("Teabag", "pcs", current_stock=10, reorder_level=2)
    tea = await make_product("Tea", "50.00", stock_quantity=0, recipe=[recipe_line(teabag, 1)])

    order = await place_order(order_request([(tea, 4)], "200.00"))

    await teabag.refresh_from_db()
    assert teabag.current_stock == 6
    assert order.status == OrderStatus.NEW
    assert order.is_completed is False
    assert order.total_amount == Decimal("200.00")
    assert len(order.items) == 1
    assert order.items[0].name == "Tea"
    assert order.items[0].line_total == Decimal("200.00")


@pytest.mark.asyncio
async def test_total_mismatch_touches_nothing(db):
    teabag = await make_item("Teabag", "pcs", current_stock=10)
    tea = await make_product("Tea", "95.00", recipe=[recipe_line(teabag, 1)])

    with pytest.raises(TotalMismatch):
        await place_order(order_request([(tea, 1)], "100.00"))

    await teabag.refresh_from_db()
    assert teabag.current_stock == 10
    assert await Order.all().count() == 0


@pytest.mark.asyncio
async def test_total_within_tolerance_is_accepted(db):
    water = await make_product("Water", "25.00")
    order = await place_order(order_request([(water, 1)], "25.01"))
    assert order.total_amount == Decimal("25.00")


@pytest.mark.asyncio
async def test_ingredient_shortfall_is_rejected_without_change(db):
    syrup = await make_item("Syrup", "pcs", current_stock=5)
    drink = await make_product("Caramel Shot", "10.00", recipe=[recipe_line(syrup, 1)])

    with pytest.raises(InsufficientStock) as exc_info:
        await place_order(order_request([(drink, 6)], "60.00"))

    assert exc_info.value.item_name == "Syrup"
    assert "need 6" in exc_info.value.message
    assert "have 5" in exc_info.value.message
    await syrup.refresh_from_db()
    assert syrup.current_stock == 5


@pytest.mark.asyncio
async def test_half_piece_recipe_rounds_up(db):
    straws = await make_item("Straw", "pcs", current_stock=10)
    drink = await make_product("Shared Shake", "30.00", recipe=[recipe_line(straws, 0.5)])

    await place_order(order_request([(drink, 3)], "90.00"))

    await straws.refresh_from_db()
    assert straws.current_stock == 8


@pytest.mark.asyncio
async def test_untracked_product_always_succeeds(db):
    water = await make_product("Bottled Water", "20.00", stock_quantity=0)

    order = await place_order(order_request([(water, 1000)], "20000.00"))

    assert order.order_number.startswith("ORD")
    await water.refresh_from_db()
    assert water.stock_quantity == 0


@pytest.mark.asyncio
async def test_failed_second_line_restores_first_line(db):
    teabag = await make_item("Teabag", "pcs", current_stock=10)
    tea = await make_product("Tea", "50.00", recipe=[recipe_line(teabag, 1)])
    cookie = await make_product("Cookie", "40.00", stock_quantity=2)

    with pytest.raises(InsufficientStock):
        await place_order(order_request([(tea, 4), (cookie, 3)], "320.00"))

    await teabag.refresh_from_db()
    await cookie.refresh_from_db()
    assert teabag.current_stock == 10
    assert cookie.stock_quantity == 2


@pytest.mark.asyncio
async def test_insert_failure_restores_stock(db):
    cookie = await make_product("Cookie", "40.00", stock_quantity=5)
    teabag = await make_item("Teabag", "pcs", current_stock=10)
    tea = await make_product("Tea", "50.00", recipe=[recipe_line(teabag, 2)])

    with patch.object(Order, "create", AsyncMock(side_effect=RuntimeError("connection reset"))):
        with pytest.raises(PersistenceError) as exc_info:
            await place_order(order_request([(cookie, 2), (tea, 1)], "130.00"))

    assert exc_info.value.details["stock_restored"] is True
    await cookie.refresh_from_db()
    await teabag.refresh_from_db()
    assert cookie.stock_quantity == 5
    assert teabag.current_stock == 10


@pytest.mark.asyncio
async def test_delivery_fee_is_part_of_the_total(db):
    await DeliveryZone.create(city_or_area="Makati", fee=Decimal("50.00"))
    water = await make_product("Water", "25.00")

    order = await place_order(order_request([(water, 2)], "100.00", delivery_address="12 Ayala Ave, Makati City"))

    assert order.subtotal == Decimal("50.00")
    assert order.delivery_fee == Decimal("50.00")
    assert order.total_amount == Decimal("100.00")


@pytest.mark.asyncio
async def test_unmatched_address_pays_default_fee(db):
    await DeliveryZone.create(city_or_area="Makati", fee=Decimal("50.00"))
    water = await make_product("Water", "25.00")

    with pytest.raises(TotalMismatch):
        await place_order(order_request([(water, 1)], "25.00", delivery_address="Quezon City"))

    order = await place_order(order_request([(water, 1)], "105.00", delivery_address="Quezon City"))
    assert order.delivery_fee == Decimal("80.00")


@pytest.mark.asyncio
async def test_inactive_zone_is_ignored(db):
    await DeliveryZone.create(city_or_area="Makati", fee=Decimal("50.00"), is_active=False)
    water = await make_product("Water", "25.00")

    order = await place_order(order_request([(water, 1)], "105.00", delivery_address="Makati"))
    assert order.delivery_fee == Decimal("80.00")


@pytest.mark.asyncio
async def test_empty_cart_is_rejected(db):
    with pytest.raises(CartValidationError):
        await place_order(OrderRequest(items=[], total_amount=Decimal("0")))


@pytest.mark.asyncio
async def test_unknown_product_is_rejected(db):
    request = OrderRequest(
        items=[CartLineRequest(product_id=uuid4(), quantity=1)],
        total_amount=Decimal("10.00"),
    )
    with pytest.raises(ProductNotFound):
        await place_order(request)


@pytest.mark.asyncio
async def test_unavailable_product_is_rejected(db):
    cake = await make_product("Cake", "80.00", stock_quantity=3, is_available=False)
    with pytest.raises(ProductUnavailable):
        await place_order(order_request([(cake, 1)], "80.00"))
    await cake.refresh_from_db()
    assert cake.stock_quantity == 3


@pytest.mark.asyncio
async def test_anonymous_order_uses_walk_in_customer(db):
    water = await make_product("Water", "25.00")
    order = await place_order(order_request([(water, 1)], "25.00"))

    assert order.customer_id == "walk-in"
    assert order.customer_email == "walkin@tambayan.cafe"
    assert order.customer_name == "Walk-in Customer"


@pytest.mark.asyncio
async def test_customer_token_overrides_body_identity(db):
    customer = await User.create(username="juan", email="juan@example.com", name="Juan", password_hash="x")
    water = await make_product("Water", "25.00")

    order = await place_order(order_request([(water, 1)], "25.00", customer_id="someone-else"), customer)

    assert order.customer_id == str(customer.id)
    assert order.customer_email == "juan@example.com"
    assert order.placed_by_staff is False


@pytest.mark.asyncio
async def test_staff_placed_order_records_staff(db):
    staff = await User.create(username="barista", password_hash="x", role=Role.STAFF)
    water = await make_product("Water", "25.00")

    order = await place_order(order_request([(water, 1)], "25.00", table_number="4"), staff)

    assert order.placed_by_staff is True
    assert order.staff_id == str(staff.id)
    assert order.customer_id == "walk-in"


@pytest.mark.asyncio
async def test_order_notifies_staff_and_flags_low_ingredients(db):
    teabag = await make_item("Teabag", "pcs", current_stock=10, reorder_level=8)
    tea = await make_product("Tea", "50.00", recipe=[recipe_line(teabag, 1)])

    order = await place_order(order_request([(tea, 4)], "200.00"))

    notifications = await Notification.filter(target_role="staff")
    categories = sorted(n.category for n in notifications)
    assert categories == ["inventory", "order"]
    low = next(n for n in notifications if n.category == "inventory")
    assert low.type == "warning"
    assert "Teabag" in low.message
    assert any(n.related_id == str(order.id) for n in notifications)


@pytest.mark.asyncio
async def test_catalog_price_wins_over_client_price(db):
    water = await make_product("Water", "25.00")
    request = OrderRequest(
        items=[CartLineRequest(product_id=water.id, name="Water", price=Decimal("1.00"), quantity=2)],
        total_amount=Decimal("50.00"),
    )
    order = await place_order(request)
    assert order.items[0].price == Decimal("25.00")


def test_order_number_format():
    from datetime import datetime, timezone

    moment = datetime(2026, 10, 19, 9, 30, 15, 42000, tzinfo=timezone.utc)
    assert format_order_number(moment) == "ORD20261019093015042"


def test_order_numbers_are_unique_and_well_formed():
    numbers = [generate_order_number() for _ in range(50)]
    assert len(set(numbers)) == 50
    assert all(re.fullmatch(r"ORD\d{17}", n) for n in numbers)
