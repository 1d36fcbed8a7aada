from decimal import Decimal
from typing import Optional

from cafe_api.core.config import DEFAULT_DELIVERY_FEE
from cafe_api.models.inventory import DeliveryZone


async def calculate_delivery_fee(address: Optional[str]) -> Decimal:
    """
    Resolves a delivery address to a fee.

    No address means pickup/dine-in (no fee). Otherwise the first active zone
    whose city or area appears in the address wins; addresses outside every
    zone pay the default out-of-coverage fee.
    """
    if not address or not address.strip():
        return Decimal("0")

    haystack = address.lower()
    zones = await DeliveryZone.filter(is_active=True).order_by("city_or_area")
    for zone in zones:
        if zone.city_or_area and zone.city_or_area.lower() in haystack:
            return Decimal(zone.fee)

    return DEFAULT_DELIVERY_FEE
