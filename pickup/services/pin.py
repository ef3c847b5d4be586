"""
Shared PIN check for staff-only kiosk actions.
"""
import hmac
import time

from django.conf import settings

SESSION_KEY = 'pin_verified_at'


def verify_pin(pin) -> bool:
    """Compare against settings.PINCODE in constant time. Non-strings never match."""
    if not isinstance(pin, str) or not pin:
        return False
    return hmac.compare_digest(pin.encode('utf-8'), str(settings.PINCODE).encode('utf-8'))


def mark_pin_verified(session):
    session[SESSION_KEY] = time.time()


def clear_pin_verified(session):
    session.pop(SESSION_KEY, None)


def pin_is_verified(session) -> bool:
    verified_at = session.get(SESSION_KEY)
    if verified_at is None:
        return False
    return time.time() - float(verified_at) <= settings.PIN_SESSION_TTL
