"""
Domain errors raised by the service layer.

Every error carries the HTTP status and machine-readable code the exception
handlers use to build the error envelope, so routers never translate them.
"""
from typing import Any, Dict, Optional


class CafeError(Exception):
    status_code = 400
    code = "bad_request"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class CartValidationError(CafeError):
    code = "validation_error"


class ProductNotFound(CafeError):
    status_code = 404
    code = "product_not_found"

    def __init__(self, product_id: Any):
        super().__init__(f"Product {product_id} not found.", {"product_id": str(product_id)})


class ProductUnavailable(CafeError):
    status_code = 409
    code = "product_unavailable"

    def __init__(self, name: str):
        super().__init__(f"'{name}' is currently unavailable.", {"product": name})


class TotalMismatch(CafeError):
    code = "total_mismatch"

    def __init__(self, claimed, computed):
        super().__init__(
            f"Order total mismatch: submitted {claimed}, expected {computed}.",
            {"claimed": str(claimed), "computed": str(computed)},
        )


def format_quantity(value) -> str:
    """Renders 6.0 as '6' and 1.5 as '1.5' for user-facing stock messages."""
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return f"{number:g}"


class InsufficientStock(CafeError):
    status_code = 409
    code = "insufficient_stock"

    def __init__(self, item_name: str, needed, available):
        self.item_name = item_name
        self.needed = needed
        self.available = available
        super().__init__(
            f"Insufficient stock for '{item_name}': need {format_quantity(needed)}, have {format_quantity(available)}.",
            {"item": item_name, "needed": float(needed), "available": float(available)},
        )


class PersistenceError(CafeError):
    status_code = 503
    code = "persistence_error"


class NotFoundError(CafeError):
    status_code = 404
    code = "not_found"


class OrderNotFound(NotFoundError):
    def __init__(self, order_id: Any):
        super().__init__(f"Order {order_id} not found.")


class NotificationNotFound(NotFoundError):
    def __init__(self, notification_id: Any):
        super().__init__(f"Notification {notification_id} not found.")


class InvalidOrderStatus(CafeError):
    code = "invalid_status"

    def __init__(self, status: str):
        super().__init__(f"Invalid status: {status}", {"status": status})


class ReportRangeError(CafeError):
    code = "invalid_range"


class ConflictError(CafeError):
    status_code = 409
    code = "conflict"


class AuthError(CafeError):
    status_code = 401
    code = "unauthorized"


class PermissionDenied(CafeError):
    status_code = 403
    code = "forbidden"
