from django.apps import AppConfig


class KioskConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'kiosk'
    verbose_name = 'Budbil kiosk'
