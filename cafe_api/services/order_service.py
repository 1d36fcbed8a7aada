import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional, Tuple
from uuid import UUID

from tortoise.transactions import in_transaction

from cafe_api.core.config import (
    TOTAL_TOLERANCE,
    WALK_IN_CUSTOMER_EMAIL,
    WALK_IN_CUSTOMER_ID,
    WALK_IN_CUSTOMER_NAME,
)
from cafe_api.core.errors import (
    CartValidationError,
    InvalidOrderStatus,
    OrderNotFound,
    PersistenceError,
    ProductNotFound,
    ProductUnavailable,
    TotalMismatch,
)
from cafe_api.models.order import COMPLETED_STATUSES, STATUS_VALUES, Order, OrderItem, OrderStatus
from cafe_api.models.product import Product
from cafe_api.models.user import Role, User
from cafe_api.schemas.order import CartLineRequest, OrderRequest
from cafe_api.services.delivery_fee_service import calculate_delivery_fee
from cafe_api.services.inventory_service import check_for_low_stock
from cafe_api.services.notification_service import create_notification
from cafe_api.services.stock_service import StockLedger, deduct_for_line

log = logging.getLogger("order_service")

CENT = Decimal("0.01")

_last_issued_ms = 0


def format_order_number(moment: datetime) -> str:
    """ORD + UTC timestamp at millisecond precision, e.g. ORD20261019093015042."""
    moment = moment.astimezone(timezone.utc) if moment.tzinfo else moment
    return f"ORD{moment.strftime('%Y%m%d%H%M%S')}{moment.microsecond // 1000:03d}"


def generate_order_number() -> str:
    """Issues a new order number, never repeating one within this process."""
    global _last_issued_ms
    now = datetime.now(timezone.utc)
    ms = int(now.timestamp()) * 1000 + now.microsecond // 1000
    if ms <= _last_issued_ms:
        ms = _last_issued_ms + 1
    _last_issued_ms = ms
    moment = datetime.fromtimestamp(ms // 1000, tz=timezone.utc).replace(microsecond=(ms % 1000) * 1000)
    return format_order_number(moment)


def resolve_customer(request: OrderRequest, user: Optional[User] = None) -> Tuple[str, str, str]:
    """Customer identity for the order: the token's customer, the body's fields, or the walk-in sentinel."""
    if user is not None and user.role == Role.CUSTOMER:
        return str(user.id), user.email or WALK_IN_CUSTOMER_EMAIL, user.name or user.username
    return (
        request.customer_id or WALK_IN_CUSTOMER_ID,
        request.customer_email or WALK_IN_CUSTOMER_EMAIL,
        request.customer_name or WALK_IN_CUSTOMER_NAME,
    )


async def _load_cart(lines: List[CartLineRequest]) -> List[Tuple[CartLineRequest, Product]]:
    """Existence and availability check for every cart line. Reads only."""
    if not lines:
        raise CartValidationError("Order must contain items.")

    product_ids = {line.product_id for line in lines}
    products = await Product.filter(id__in=list(product_ids))
    product_map = {str(p.id): p for p in products}

    cart = []
    for line in lines:
        if line.quantity < 1:
            raise CartValidationError(f"Quantity for product {line.product_id} must be at least 1.")
        product = product_map.get(str(line.product_id))
        if not product:
            raise ProductNotFound(line.product_id)
        if not product.is_available:
            raise ProductUnavailable(product.name)
        cart.append((line, product))
    return cart


async def _compensate(ledger: StockLedger, order_number: str) -> bool:
    try:
        await ledger.rollback()
        return True
    except Exception:
        log.critical(
            f"Stock compensation FAILED for {order_number}; manual reconciliation required for: "
            f"{[(e.label, e.amount) for e in ledger.entries]}",
            exc_info=True,
        )
        return False


async def place_order(request: OrderRequest, user: Optional[User] = None) -> Order:
    """
    Turns a submitted cart into a persisted order.

    Validation and total verification happen before any write. Stock is then
    deducted line by line through conditional updates; if any deduction or the
    order insert fails, every applied deduction is reverted before the error
    propagates, so stock is all-or-nothing from the caller's point of view.
    """
    # 1. Validate lines against the catalog
    cart = await _load_cart(request.items)

    # 2. Recompute the total from catalog prices and verify the claimed one
    subtotal = sum((product.price * line.quantity for line, product in cart), Decimal("0"))
    delivery_fee = await calculate_delivery_fee(request.delivery_address)
    total = (subtotal + delivery_fee).quantize(CENT)
    if abs(Decimal(request.total_amount) - total) > TOTAL_TOLERANCE:
        log.warning(f"Total mismatch: claimed {request.total_amount}, computed {total}")
        raise TotalMismatch(request.total_amount, total)

    order_number = generate_order_number()

    # 3. Two-tier stock deduction, recorded for compensation
    ledger = StockLedger()
    try:
        for line, product in cart:
            await deduct_for_line(product, line.quantity, ledger)
    except Exception:
        await _compensate(ledger, order_number)
        raise

    customer_id, customer_email, customer_name = resolve_customer(request, user)
    placed_by_staff = request.placed_by_staff
    staff_id = request.staff_id
    if user is not None and user.role in (Role.STAFF, Role.ADMIN):
        placed_by_staff = True
        staff_id = str(user.id)

    # 4. Persist the order header and its snapshotted lines atomically
    try:
        async with in_transaction() as conn:
            order = await Order.create(
                order_number=order_number,
                customer_id=customer_id,
                customer_email=customer_email,
                customer_name=customer_name,
                subtotal=subtotal.quantize(CENT),
                delivery_address=request.delivery_address,
                delivery_fee=delivery_fee,
                total_amount=total,
                status=OrderStatus.NEW,
                is_completed=False,
                payment_method=request.payment_method,
                table_number=request.table_number,
                placed_by_staff=placed_by_staff,
                staff_id=staff_id,
                using_db=conn,
            )
            for line, product in cart:
                await OrderItem.create(
                    order=order,
                    product_id=product.id,
                    name=product.name,
                    price=product.price,
                    quantity=line.quantity,
                    line_total=(product.price * line.quantity).quantize(CENT),
                    size=line.size,
                    mood=line.mood,
                    sugar=line.sugar,
                    using_db=conn,
                )
    except Exception as e:
        restored = await _compensate(ledger, order_number)
        log.error(f"Failed to persist order {order_number} (stock restored: {restored}): {e}")
        raise PersistenceError(
            "Your order could not be saved. Please try again or contact staff.",
            {"order_number": order_number, "stock_restored": restored},
        ) from e

    log.info(f"Order {order_number} placed for {customer_name} ({customer_id}), total {total}.")

    # 5. Notify staff, plus low-stock warnings for ingredients this order drained
    try:
        await create_notification(
            message=f"New order {order_number} placed ({len(cart)} item(s), total {total}).",
            type="info",
            category="order",
            target_role="staff",
            related_id=order.id,
        )
        await check_for_low_stock(ledger.inventory_item_ids, order_id=order.id)
    except Exception:
        log.exception(f"Order {order_number} saved but notifications failed.")

    await order.fetch_related("items")
    return order


async def get_order_by_id(order_id: UUID) -> Optional[Order]:
    """Fetches order details with its lines."""
    return await Order.get_or_none(id=order_id).prefetch_related("items")


async def list_orders_for_staff(limit: int = 100, statuses: Optional[str] = None) -> List[Order]:
    """Newest first; `statuses` is a comma-separated filter such as 'New,Preparing,Ready'."""
    query = Order.all()
    if statuses:
        wanted = [s.strip() for s in statuses.split(",") if s.strip()]
        for status in wanted:
            if status not in STATUS_VALUES:
                raise InvalidOrderStatus(status)
        query = query.filter(status__in=wanted)
    return await query.order_by("-created_at").limit(limit).prefetch_related("items")


async def list_orders_for_customer(customer_id: str, limit: int = 100, status: Optional[str] = None) -> List[Order]:
    query = Order.filter(customer_id=customer_id)
    if status:
        if status not in STATUS_VALUES:
            raise InvalidOrderStatus(status)
        query = query.filter(status=status)
    return await query.order_by("-created_at").limit(limit).prefetch_related("items")


async def update_order_status(order_id: UUID, new_status: str) -> Order:
    """
    Sets the order's status and derives is_completed.

    Transitions are permissive: any known status may follow any other.
    Serving an order notifies its customer in the same transaction.
    """
    try:
        status = OrderStatus(new_status)
    except ValueError:
        raise InvalidOrderStatus(new_status)

    async with in_transaction() as conn:
        order = await Order.get_or_none(id=order_id).using_db(conn)
        if not order:
            raise OrderNotFound(order_id)

        old_status = order.status
        order.status = status
        order.is_completed = status in COMPLETED_STATUSES
        await order.save(using_db=conn)

        if status == OrderStatus.SERVED:
            await create_notification(
                message=f"Your order #{order.order_number} is ready for pickup!",
                type="success",
                category="order",
                target_role="customer",
                customer_id=order.customer_id,
                related_id=order.id,
                conn=conn,
            )

    log.info(f"Order {order.order_number}: {getattr(old_status, 'value', old_status)} -> {status.value}")
    return order
