"""
WSGI config for the Budbil pickup kiosk.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'budbil_project.settings')

application = get_wsgi_application()
