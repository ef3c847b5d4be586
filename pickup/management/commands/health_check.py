"""
Health check for the pickup kiosk.

Usage: python manage.py health_check [--carrier ID]

Exits non-zero when the database is unreachable so deploy scripts can
stop on it.
"""
import django
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import DatabaseError, connection

from pickup.models import Carrier, CarrierOrder
from pickup.services import query_orders


class Command(BaseCommand):
    help = 'Report database status, carrier queues and the latest pickup'

    def add_arguments(self, parser):
        parser.add_argument('--carrier', type=int, help='Only report the queue of this carrier')

    def handle(self, *args, **options):
        self.stdout.write(self.style.SUCCESS(
            f"{settings.SERVICE_NAME} {settings.APP_VERSION} (Django {django.get_version()})"
        ))

        try:
            connection.ensure_connection()
        except DatabaseError as e:
            raise CommandError(f"Database unavailable: {e}")
        self.stdout.write(f"  database: {connection.vendor}, connected")

        self._report_queues(options.get('carrier'))
        self._report_last_pickup()

    def _report_queues(self, carrier_id):
        carriers = Carrier.objects.filter(is_active=True)
        if carrier_id is not None:
            carriers = carriers.filter(id=carrier_id)

        self.stdout.write(f"  active carriers: {carriers.count()}")
        for carrier in carriers:
            orders, _ = query_orders(carrier_id=carrier.id, pending_only=True)
            self.stdout.write(f"    {carrier.company_name}: {len(orders)} pending")

        if carrier_id is None:
            orders, _ = query_orders(pending_only=True)
            self.stdout.write(f"  pending pickups (all carriers): {len(orders)}")

    def _report_last_pickup(self):
        last = (
            CarrierOrder.objects.filter(picked_up_at__isnull=False)
            .select_related('carrier')
            .order_by('-picked_up_at')
            .first()
        )
        if last is None:
            self.stdout.write("  last pickup: none recorded")
            return
        self.stdout.write(
            f"  last pickup: {last.picked_up_at:%Y-%m-%d %H:%M} by {last.driver_name} for {last.carrier}"
        )
