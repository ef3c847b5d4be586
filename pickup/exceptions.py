"""Domain errors raised by the pickup services."""


class PickupValidationError(ValueError):
    """Pickup request rejected before touching the database."""


class DriverNameRequiredError(PickupValidationError):
    """The pickup has no driver name after trimming."""


class CarrierValidationError(ValueError):
    """Carrier data rejected before touching the database."""


class EmptySelectionError(ValueError):
    """Checkout attempted with nothing selected and no open order."""


class PickupCommitError(Exception):
    """
    One or more orders in a pickup batch failed to save.

    The rest of the batch has still been attempted; no partial result is
    reported to the client.
    """

    def __init__(self, failed_ids):
        self.failed_ids = list(failed_ids)
        super().__init__(f"Pickup failed for {len(self.failed_ids)} order(s)")
