from django.db import models
from django.utils import timezone
import logging

logger = logging.getLogger(__name__)


class Carrier(models.Model):
    """A delivery company collecting parcels at the desk."""
    company_name = models.CharField(max_length=200)
    logo_path = models.CharField(max_length=500, blank=True)
    contact_phone = models.CharField(max_length=30, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['company_name']

    def __str__(self):
        return self.company_name


class PickupOrder(models.Model):
    """
    A parcel waiting at the desk.

    Orders are created by order intake; the kiosk only reads them and
    performs the terminal "delivered" transition.
    """
    STATUS_PENDING = 'pending'
    STATUS_DELIVERED = 'delivered'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_DELIVERED, 'Delivered'),
    ]

    customer_name = models.CharField(max_length=200, blank=True)
    location = models.CharField(max_length=100, blank=True, db_index=True)

    # Delivery address (older intake wrote delivery_postal_code)
    delivery_zip = models.CharField(max_length=10, blank=True)
    delivery_postal_code = models.CharField(max_length=10, blank=True)
    delivery_address = models.CharField(max_length=200, blank=True)
    delivery_city = models.CharField(max_length=100, blank=True)

    number_of_packages = models.PositiveIntegerField(null=True, blank=True)
    weight = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    photo_url = models.CharField(max_length=500, blank=True)
    comment = models.TextField(blank=True)
    reference = models.CharField(max_length=100, blank=True)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    delivered_by = models.CharField(max_length=100, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.id} - {self.customer_name or 'Ukjent kunde'}"

    @property
    def postal_code(self):
        return self.delivery_zip or self.delivery_postal_code or ''

    def get_carrier_order(self):
        """Return the attached CarrierOrder, or None when the order has none."""
        try:
            return self.carrier_order
        except CarrierOrder.DoesNotExist:
            return None

    @property
    def is_pending(self):
        carrier_order = self.get_carrier_order()
        return carrier_order is not None and carrier_order.picked_up_at is None


class CarrierOrder(models.Model):
    """
    Assignment of an order to a carrier's queue plus the pickup attestation.

    picked_up_at stays null until the pickup is committed; it is set once
    and never cleared.
    """
    order = models.OneToOneField(PickupOrder, on_delete=models.CASCADE, related_name='carrier_order')
    carrier = models.ForeignKey(Carrier, on_delete=models.PROTECT, related_name='carrier_orders')
    shelf_number = models.PositiveIntegerField(null=True, blank=True)

    # Pickup attestation
    driver_name = models.CharField(max_length=100, blank=True)
    driver_phone = models.CharField(max_length=30, null=True, blank=True)
    signature_data = models.TextField(null=True, blank=True, help_text='PNG data URL from the signature pad')
    picked_up_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        indexes = [
            models.Index(fields=['carrier', 'picked_up_at'], name='pickup_carrier_pickedup_idx'),
        ]

    def __str__(self):
        return f"{self.order_id} @ {self.carrier}"
