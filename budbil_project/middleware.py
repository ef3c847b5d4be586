"""
Middleware for Budbil kiosk access control.

Security Notes:
- The kiosk has no user accounts; access is limited to known tablet IPs
- The allowlist is read from settings once at startup (ALLOWED_IPS)
- Health checks and static files stay reachable for monitoring
- Rejected requests are logged to the 'security' logger
"""
from django.conf import settings
from django.http import HttpResponse
import logging

logger = logging.getLogger(__name__)
security_logger = logging.getLogger('security')


def client_ip(request):
    """Return the originating client address, preferring the proxy header."""
    xff = request.META.get('HTTP_X_FORWARDED_FOR')
    if xff:
        return xff.split(',')[0].strip()
    return request.META.get('HTTP_X_REAL_IP') or request.META.get('REMOTE_ADDR', '') or 'unknown'


class IPAllowlistMiddleware:
    """
    Middleware to restrict the kiosk to the configured tablet addresses.

    Behavior:
    - IP_CHECK_ENABLED False or empty ALLOWED_IPS: every request passes
    - Public paths (health check, static files) always pass
    - Anything else from an unknown address gets 403 "Ingen tilgang"
    """

    def __init__(self, get_response):
        self.get_response = get_response
        self.enabled = getattr(settings, 'IP_CHECK_ENABLED', False)
        self.allowed_ips = frozenset(ip.strip() for ip in getattr(settings, 'ALLOWED_IPS', []) if ip.strip())

        # Paths that never require an allowlisted address
        self.public_paths = [
            '/api/health/',
            '/static/',
            '/favicon.ico',
        ]

        if self.enabled and not self.allowed_ips:
            logger.warning("IP check enabled but ALLOWED_IPS is empty - allowlist disabled")

    def __call__(self, request):
        if not self.enabled or not self.allowed_ips:
            return self.get_response(request)

        path = request.path
        if any(path.startswith(public_path) for public_path in self.public_paths):
            return self.get_response(request)

        ip = client_ip(request)
        if ip not in self.allowed_ips:
            security_logger.warning(f"[IP ALLOWLIST] Access DENIED for ip={ip} path={path}")
            return HttpResponse(
                "Ingen tilgang",
                status=403,
                content_type='text/plain; charset=utf-8',
            )

        if settings.DEBUG:
            logger.debug(f"[IP ALLOWLIST] Access ALLOWED for ip={ip} path={path}")
        return self.get_response(request)
