"""
Pickup Commit Service.

Marks a batch of orders as picked up by one driver with one signature and
one timestamp.
"""
from dataclasses import dataclass, field
from datetime import datetime

from django.db import DatabaseError, transaction
from django.utils import timezone
import logging

from ..exceptions import DriverNameRequiredError, PickupCommitError, PickupValidationError

logger = logging.getLogger(__name__)


@dataclass
class Attestation:
    """Driver details shared by every order in a pickup."""
    driver_name: str
    driver_phone: str | None = None
    signature_data: str | None = None


@dataclass
class PickupResult:
    processed: int
    updated: int
    picked_up_at: datetime
    skipped_ids: list[int] = field(default_factory=list)

    @property
    def message(self):
        return f"{self.processed} order(s) marked as picked up"


def _clean_optional(value):
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def normalize_order_ids(order_ids):
    """
    Split the requested ids into order ids to update and unusable values.

    Positive integers (or digit strings) are kept in request order with
    repeats dropped. Numbers that cannot name an order (0, negatives,
    floats) are returned separately so the rest of the batch still goes
    through, the same way an id with no matching order does.

    Returns:
        (order_ids, unusable)

    Raises:
        PickupValidationError: empty or non-list payload, or a non-numeric entry
    """
    if not order_ids:
        raise PickupValidationError("No orders specified")
    if not isinstance(order_ids, (list, tuple)):
        raise PickupValidationError("Invalid order ids")

    normalized = []
    unusable = []
    for order_id in order_ids:
        if isinstance(order_id, str) and order_id.strip().isdigit():
            order_id = int(order_id.strip())
        if isinstance(order_id, bool) or not isinstance(order_id, (int, float)):
            raise PickupValidationError("Invalid order ids")
        if not isinstance(order_id, int) or order_id <= 0:
            unusable.append(order_id)
        elif order_id not in normalized:
            normalized.append(order_id)
    return normalized, unusable


def build_attestation(driver_name, driver_phone=None, signature_data=None) -> Attestation:
    """Trim the driver fields. A blank name is rejected, blank optionals become None."""
    if not isinstance(driver_name, str) or not driver_name.strip():
        raise DriverNameRequiredError("Driver name is required")
    return Attestation(
        driver_name=driver_name.strip(),
        driver_phone=_clean_optional(driver_phone),
        signature_data=_clean_optional(signature_data),
    )


def _commit_one(order_id, attestation, picked_up_at) -> bool:
    """
    Record the pickup on one order. Returns False when nothing was pending.

    The CarrierOrder update only matches rows that are not picked up yet, so
    a missing order, an order without a carrier assignment or an order
    already collected by an earlier pickup is left untouched.
    """
    from ..models import CarrierOrder, PickupOrder

    with transaction.atomic():
        updated = CarrierOrder.objects.filter(
            order_id=order_id,
            picked_up_at__isnull=True,
        ).update(
            driver_name=attestation.driver_name,
            driver_phone=attestation.driver_phone,
            signature_data=attestation.signature_data,
            picked_up_at=picked_up_at,
        )
        if not updated:
            return False

        PickupOrder.objects.filter(id=order_id).update(
            status=PickupOrder.STATUS_DELIVERED,
            delivered_by=attestation.driver_name,
            delivered_at=picked_up_at,
        )
    return True


class PickupCommitService:
    """
    Pickup commit for a finalized selection.

    Responsibilities:
    - Validate the batch and the driver name before any database access
    - Capture one timestamp for the whole batch
    - Update every order independently, in request order
    - Report store failures only after every order has been attempted
    """

    @staticmethod
    def commit(order_ids, driver_name, driver_phone=None, signature_data=None) -> PickupResult:
        """
        Mark the given orders as picked up.

        There is no rollback across orders: each order is saved in its own
        transaction, and a failing order does not stop the rest of the batch.
        ``processed`` counts the ids as sent, repeats and skipped ids
        included; a repeated id is only updated once.

        Args:
            order_ids: ids from the kiosk selection
            driver_name: required, trimmed
            driver_phone: optional, blank becomes None
            signature_data: optional PNG data URL, blank becomes None

        Returns:
            PickupResult

        Raises:
            PickupValidationError: empty batch, malformed ids or blank driver name
            PickupCommitError: at least one order could not be saved
        """
        requested = len(order_ids) if isinstance(order_ids, (list, tuple)) else 0
        order_ids, unusable = normalize_order_ids(order_ids)
        attestation = build_attestation(driver_name, driver_phone, signature_data)

        picked_up_at = timezone.now()
        logger.info(
            f"Pickup started: {requested} order(s) by driver={attestation.driver_name} "
            f"signed={'yes' if attestation.signature_data else 'no'}"
        )

        updated = 0
        skipped = list(unusable)
        failed = []
        for order_id in order_ids:
            try:
                if _commit_one(order_id, attestation, picked_up_at):
                    updated += 1
                else:
                    skipped.append(order_id)
            except DatabaseError as e:
                logger.error(f"Pickup update failed for order {order_id}: {str(e)}", exc_info=True)
                failed.append(order_id)

        if skipped:
            logger.info(f"Pickup skipped orders not pending: {skipped}")

        if failed:
            logger.error(
                f"Pickup batch incomplete: {len(failed)} of {len(order_ids)} failed "
                f"(updated={updated}, failed={failed})"
            )
            raise PickupCommitError(failed)

        logger.info(f"Pickup committed: processed={requested} updated={updated}")
        return PickupResult(
            processed=requested,
            updated=updated,
            picked_up_at=picked_up_at,
            skipped_ids=skipped,
        )
