from datetime import date
from decimal import Decimal
from typing import List
from pydantic import BaseModel


class SalesReportRequest(BaseModel):
    start_date: date
    end_date: date


class OrderedItem(BaseModel):
    name: str
    quantity: int


class SalesOrderItem(BaseModel):
    date: str
    order_id: str
    order_number: str
    items: List[OrderedItem]
    total_amount: Decimal
    status: str


class SalesReportResponse(BaseModel):
    sales: List[SalesOrderItem]
    total_revenue: Decimal


class InventoryReportItem(BaseModel):
    name: str
    category: str
    current_stock: float
    unit: str
    reorder_level: float
    is_low_stock: bool


class InventoryReportResponse(BaseModel):
    inventory: List[InventoryReportItem]


class ReportHistoryItem(BaseModel):
    title: str
    type: str
    format: str
    generated_at: str


class DashboardMetrics(BaseModel):
    total_orders: int
    total_revenue: Decimal
    pending_orders: int
    low_stock_alerts: int
    low_stock_products: int
    unread_notifications: int


class TopSellingItem(BaseModel):
    name: str
    quantity_sold: int
    total_revenue: Decimal
