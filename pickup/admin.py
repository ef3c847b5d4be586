from django.contrib import admin
from .models import Carrier, CarrierOrder, PickupOrder


@admin.register(Carrier)
class CarrierAdmin(admin.ModelAdmin):
    list_display = ['company_name', 'contact_phone', 'is_active', 'created_at']
    list_filter = ['is_active']
    search_fields = ['company_name', 'contact_phone']
    ordering = ['company_name']


class CarrierOrderInline(admin.StackedInline):
    model = CarrierOrder
    extra = 0
    # Attestation is written by the kiosk only
    readonly_fields = ['driver_name', 'driver_phone', 'signature_data', 'picked_up_at']


@admin.register(PickupOrder)
class PickupOrderAdmin(admin.ModelAdmin):
    list_display = ['id', 'customer_name', 'location', 'delivery_city', 'status', 'created_at', 'delivered_at']
    list_filter = ['status', 'created_at']
    search_fields = ['id', 'customer_name', 'reference', 'delivery_address', 'delivered_by']
    readonly_fields = ['delivered_by', 'delivered_at']
    ordering = ['-created_at']
    inlines = [CarrierOrderInline]


@admin.register(CarrierOrder)
class CarrierOrderAdmin(admin.ModelAdmin):
    list_display = ['order', 'carrier', 'shelf_number', 'driver_name', 'picked_up_at']
    list_filter = ['carrier', 'picked_up_at']
    search_fields = ['order__id', 'order__customer_name', 'driver_name', 'driver_phone']
    readonly_fields = ['driver_name', 'driver_phone', 'signature_data', 'picked_up_at']
