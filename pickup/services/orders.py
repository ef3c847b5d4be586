"""
Order queries for the kiosk screens.
"""
from django.conf import settings
import logging

logger = logging.getLogger(__name__)


def shelf_prefix():
    return settings.PICKUP_LOCATION_PREFIX


def query_orders(carrier_id=None, pending_only=True):
    """
    Orders on the pickup shelves, newest first.

    With a carrier the whole filter runs in the database. Without one, the
    database only applies the shelf prefix and the pending check runs here,
    dropping orders that have no carrier assignment or are picked up.

    Returns:
        (orders, carrier_name) where carrier_name is '' without a carrier or
        for an unknown carrier id
    """
    from ..models import Carrier, PickupOrder

    carrier_name = ''
    filters = {'location__startswith': shelf_prefix()}

    if carrier_id is not None:
        carrier = Carrier.objects.filter(id=carrier_id).first()
        carrier_name = carrier.company_name if carrier else ''

        filters['carrier_order__carrier_id'] = carrier_id
        if pending_only:
            filters['carrier_order__picked_up_at__isnull'] = True

    orders = list(
        PickupOrder.objects.filter(**filters)
        .select_related('carrier_order__carrier')
        .order_by('-created_at', '-id')
    )

    if pending_only and carrier_id is None:
        orders = [order for order in orders if order.is_pending]

    logger.debug(
        f"Order query carrier={carrier_id} pending={pending_only}: {len(orders)} order(s)"
    )
    return orders, carrier_name


def get_pending_order(order_id, carrier_id=None):
    """A single pending order on the pickup shelves, or None."""
    from ..models import PickupOrder

    filters = {
        'id': order_id,
        'location__startswith': shelf_prefix(),
        'carrier_order__picked_up_at__isnull': True,
    }
    if carrier_id is not None:
        filters['carrier_order__carrier_id'] = carrier_id
    return PickupOrder.objects.filter(**filters).select_related('carrier_order__carrier').first()


def get_orders_by_ids(order_ids):
    """Orders for the signature screen header, in the requested order. Unknown ids are skipped."""
    from ..models import PickupOrder

    by_id = PickupOrder.objects.in_bulk(list(order_ids))
    return [by_id[order_id] for order_id in order_ids if order_id in by_id]
