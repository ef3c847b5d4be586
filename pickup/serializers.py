from rest_framework import serializers
from .models import Carrier, CarrierOrder, PickupOrder


class CarrierSerializer(serializers.ModelSerializer):
    class Meta:
        model = Carrier
        fields = ['id', 'company_name', 'logo_path', 'contact_phone', 'is_active']


class CarrierOrderSerializer(serializers.ModelSerializer):
    carrier = CarrierSerializer(read_only=True)

    class Meta:
        model = CarrierOrder
        # signature_data is write-once attestation, never sent back to the kiosk
        fields = ['id', 'shelf_number', 'carrier', 'driver_name', 'picked_up_at']


class PickupOrderSerializer(serializers.ModelSerializer):
    carrier_order = serializers.SerializerMethodField()
    postal_code = serializers.CharField(read_only=True)
    weight = serializers.FloatField(read_only=True)

    class Meta:
        model = PickupOrder
        fields = ['id', 'customer_name', 'location', 'delivery_zip', 'delivery_postal_code',
                  'postal_code', 'delivery_address', 'delivery_city', 'number_of_packages',
                  'weight', 'photo_url', 'comment', 'reference', 'status', 'created_at',
                  'carrier_order']

    def get_carrier_order(self, obj):
        carrier_order = obj.get_carrier_order()
        return CarrierOrderSerializer(carrier_order).data if carrier_order else None
