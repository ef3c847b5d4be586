"""
Carrier directory.
"""
import logging

from ..exceptions import CarrierValidationError

logger = logging.getLogger(__name__)


def list_active_carriers():
    from ..models import Carrier

    return Carrier.objects.filter(is_active=True).order_by('company_name', 'id')


def create_carrier(company_name, contact_phone=''):
    """
    Create an active carrier.

    Raises:
        CarrierValidationError: blank company name
    """
    from ..models import Carrier

    if not isinstance(company_name, str) or not company_name.strip():
        raise CarrierValidationError("Company name is required")

    carrier = Carrier.objects.create(
        company_name=company_name.strip(),
        contact_phone=(contact_phone or '').strip(),
        is_active=True,
    )
    logger.info(f"Carrier {carrier.id} created: {carrier.company_name}")
    return carrier
