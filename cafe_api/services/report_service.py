import logging
from collections import Counter, defaultdict
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional

from cafe_api.core.errors import ReportRangeError
from cafe_api.models.inventory import InventoryItem
from cafe_api.models.order import Order, OrderItem, OrderStatus
from cafe_api.models.report import ReportLog
from cafe_api.schemas.report import (
    DashboardMetrics,
    InventoryReportItem,
    InventoryReportResponse,
    OrderedItem,
    ReportHistoryItem,
    SalesOrderItem,
    SalesReportResponse,
    TopSellingItem,
)
from cafe_api.services.inventory_service import (
    count_low_stock_items,
    count_low_stock_products,
    is_inventory_low,
)
from cafe_api.services.notification_service import count_unread

log = logging.getLogger("report_service")

HISTORY_LIMIT = 50


def _order_date(order: Order) -> date:
    created = order.created_at
    if created.tzinfo:
        created = created.astimezone(timezone.utc)
    return created.date()


async def get_dashboard_metrics() -> DashboardMetrics:
    orders = await Order.all()
    revenue = sum((o.total_amount for o in orders if o.is_completed), Decimal("0"))
    pending = sum(1 for o in orders if not o.is_completed and o.status != OrderStatus.CANCELLED)
    return DashboardMetrics(
        total_orders=len(orders),
        total_revenue=revenue,
        pending_orders=pending,
        low_stock_alerts=await count_low_stock_items(),
        low_stock_products=await count_low_stock_products(),
        unread_notifications=await count_unread(),
    )


async def get_staff_dashboard(today: Optional[date] = None) -> Dict[str, int]:
    """Counts of today's orders per status, every status present even at zero."""
    today = today or datetime.now(timezone.utc).date()
    counts = {status.value: 0 for status in OrderStatus}
    for order in await Order.all():
        if _order_date(order) == today:
            counts[OrderStatus(order.status).value] += 1
    counts["total"] = sum(counts.values())
    return counts


async def get_top_selling(limit: int = 5) -> List[TopSellingItem]:
    quantities = Counter()
    revenue = defaultdict(lambda: Decimal("0"))
    for item in await OrderItem.all():
        quantities[item.name] += item.quantity
        revenue[item.name] += item.line_total
    return [
        TopSellingItem(name=name, quantity_sold=qty, total_revenue=revenue[name])
        for name, qty in quantities.most_common(limit)
    ]


async def generate_sales_report(start_date: date, end_date: date) -> SalesReportResponse:
    """Orders placed between the two dates, both days included."""
    if start_date > end_date:
        raise ReportRangeError("Start date cannot be after end date.", {
            "start_date": start_date.isoformat(),
            "end_date": end_date.isoformat(),
        })

    orders = await Order.all().order_by("created_at").prefetch_related("items")
    sales = []
    total_revenue = Decimal("0")
    for order in orders:
        placed_on = _order_date(order)
        if not start_date <= placed_on <= end_date:
            continue
        sales.append(SalesOrderItem(
            date=placed_on.isoformat(),
            order_id=str(order.id),
            order_number=order.order_number,
            items=[OrderedItem(name=i.name, quantity=i.quantity) for i in order.items],
            total_amount=order.total_amount,
            status=OrderStatus(order.status).value,
        ))
        total_revenue += order.total_amount

    await ReportLog.create(
        title=f"Sales Report {start_date.isoformat()} to {end_date.isoformat()}",
        type="sales",
    )
    log.info(f"Sales report generated: {len(sales)} order(s), revenue {total_revenue}.")
    return SalesReportResponse(sales=sales, total_revenue=total_revenue)


async def generate_inventory_report() -> InventoryReportResponse:
    items = await InventoryItem.all().order_by("name")
    report = [
        InventoryReportItem(
            name=item.name,
            category=item.category or "Uncategorized",
            current_stock=item.current_stock,
            unit=item.unit,
            reorder_level=item.reorder_level,
            is_low_stock=is_inventory_low(item),
        )
        for item in items
    ]
    await ReportLog.create(
        title=f"Inventory Report {datetime.now(timezone.utc).date().isoformat()}",
        type="inventory",
    )
    return InventoryReportResponse(inventory=report)


async def get_report_history() -> List[ReportHistoryItem]:
    logs = await ReportLog.all().order_by("-generated_at").limit(HISTORY_LIMIT)
    return [
        ReportHistoryItem(
            title=entry.title,
            type=entry.type,
            format=entry.format,
            generated_at=entry.generated_at.isoformat(),
        )
        for entry in logs
    ]
