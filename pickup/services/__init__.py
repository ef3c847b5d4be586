"""
Pickup services.

Business logic shared by the JSON API and the kiosk screens.
"""
from .carriers import create_carrier, list_active_carriers
from .orders import query_orders
from .pickup import PickupCommitService, PickupResult

__all__ = [
    'PickupCommitService',
    'PickupResult',
    'create_carrier',
    'list_active_carriers',
    'query_orders',
]
