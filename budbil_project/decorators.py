"""
View decorators for the Budbil kiosk.

The kiosk runs without user accounts. Staff-only screens (currently the
"add carrier" form) are protected by the shared PIN instead: a successful
PIN check stores a timestamp in the kiosk session, and the decorator below
lets requests through while that timestamp is fresh.

Usage:
    from budbil_project.decorators import require_pin_verified

    @require_pin_verified
    def carrier_add(request):
        # Only reachable right after a correct PIN
        pass
"""

from functools import wraps
from django.shortcuts import redirect
import logging

from pickup.services.pin import pin_is_verified

logger = logging.getLogger('security')


def require_pin_verified(view_func):
    """
    Require a recently verified PIN in the session.

    Behavior:
        - Fresh PIN in session: execute view normally
        - Missing or expired PIN: redirect to the PIN screen
    """
    @wraps(view_func)
    def wrapped_view(request, *args, **kwargs):
        if pin_is_verified(request.session):
            return view_func(request, *args, **kwargs)

        logger.warning(
            f"PIN required: {view_func.__name__} {request.method} "
            f"from {request.META.get('REMOTE_ADDR', 'unknown')} redirected to PIN screen"
        )
        return redirect('kiosk:carrier_pin')

    return wrapped_view
