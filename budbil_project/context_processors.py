"""
Template context for the kiosk screens.
"""
from django.conf import settings


def environment_context(request):
    """
    Deployment environment for the corner banner.

    The banner is shown everywhere except production so a test tablet is
    never mistaken for the live desk.
    """
    environment = settings.ENVIRONMENT
    return {
        'environment_name': environment.title(),
        'show_staging_banner': environment.lower() != 'production',
    }


def branding_context(request):
    return {
        'brand_name': settings.BRAND_NAME,
        'app_version': settings.APP_VERSION,
    }
