from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ParseError
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from django.conf import settings
from django.db import connection
from django.utils import timezone
import logging

from .exceptions import PickupCommitError
from .models import Carrier
from .serializers import CarrierSerializer, PickupOrderSerializer
from .services import PickupCommitService, create_carrier, list_active_carriers, query_orders
from .services.pin import mark_pin_verified, verify_pin as pin_matches

logger = logging.getLogger(__name__)
security_logger = logging.getLogger('security')


def _parse_carrier_id(value):
    """Carrier id from the query string; None when absent, ValueError when malformed."""
    if value is None or value == '':
        return None
    value = value.strip()
    if not value.isdigit():
        raise ValueError("Invalid carrier")
    return int(value)


def _body(request):
    """JSON object from the request body; ValueError for anything else."""
    try:
        data = request.data
    except ParseError:
        raise ValueError("Invalid request body")
    if not hasattr(data, 'get'):
        raise ValueError("Invalid request body")
    return data


# Health check endpoint (no IP restriction, used by monitoring)
@api_view(['GET'])
@permission_classes([AllowAny])
def health_check(request):
    """Health check endpoint for monitoring and deployment verification"""
    payload = {
        'status': 'healthy',
        'service': settings.SERVICE_NAME,
        'version': settings.APP_VERSION,
        'timestamp': timezone.now().isoformat(),
    }
    try:
        connection.ensure_connection()
        payload['database'] = 'connected'
        payload['carriers'] = Carrier.objects.count()
        return Response(payload)
    except Exception as e:
        logger.error(f"Health check failed: {str(e)}")
        payload.update({'status': 'unhealthy', 'database': 'unavailable'})
        return Response(payload, status=status.HTTP_503_SERVICE_UNAVAILABLE)


@api_view(['GET'])
@permission_classes([AllowAny])
def order_list(request):
    """
    Orders on the pickup shelves.

    Query params:
        carrier: carrier id (optional)
        pending: anything but "false" limits the list to orders not picked up
    """
    try:
        carrier_id = _parse_carrier_id(request.query_params.get('carrier'))
        pending_only = request.query_params.get('pending') != 'false'

        orders, carrier_name = query_orders(carrier_id=carrier_id, pending_only=pending_only)
        return Response({
            'orders': PickupOrderSerializer(orders, many=True).data,
            'carrierName': carrier_name,
        })
    except ValueError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except Exception as e:
        logger.error(f"Failed to fetch orders: {str(e)}", exc_info=True)
        return Response(
            {'error': 'Failed to fetch orders'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


@api_view(['POST'])
@permission_classes([AllowAny])
def order_pickup(request):
    """
    Mark a batch of orders as picked up.

    Body:
        {"orderIds": [101, 102], "driverName": "...", "driverPhone": "...", "signatureData": "data:image/png;base64,..."}
    """
    try:
        data = _body(request)
        result = PickupCommitService.commit(
            order_ids=data.get('orderIds'),
            driver_name=data.get('driverName'),
            driver_phone=data.get('driverPhone'),
            signature_data=data.get('signatureData'),
        )
        return Response({
            'success': True,
            'message': result.message,
            'count': result.processed,
        })
    except ValueError as e:
        logger.info(f"Pickup rejected: {str(e)}")
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except PickupCommitError as e:
        logger.error(f"Failed to update orders: {str(e)} ids={e.failed_ids}")
        return Response(
            {'error': 'Failed to update orders'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
    except Exception as e:
        logger.error(f"Failed to update orders: {str(e)}", exc_info=True)
        return Response(
            {'error': 'Failed to update orders'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


@api_view(['GET', 'POST'])
@permission_classes([AllowAny])
def carrier_list(request):
    try:
        if request.method == 'POST':
            carrier = create_carrier(_body(request).get('companyName'))
            return Response(CarrierSerializer(carrier).data, status=status.HTTP_201_CREATED)

        # GET request - list active carriers
        return Response(CarrierSerializer(list_active_carriers(), many=True).data)
    except ValueError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except Exception as e:
        action = 'create carrier' if request.method == 'POST' else 'fetch carriers'
        logger.error(f"Failed to {action}: {str(e)}", exc_info=True)
        return Response(
            {'error': f'Failed to {action}'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


@api_view(['POST'])
@permission_classes([AllowAny])
def verify_pin(request):
    """Check the shared PIN guarding the "add carrier" action."""
    try:
        if pin_matches(_body(request).get('pin')):
            mark_pin_verified(request.session)
            return Response({'success': True})

        security_logger.warning(f"Invalid PIN attempt from {request.META.get('REMOTE_ADDR', 'unknown')}")
        return Response({'error': 'Invalid PIN'}, status=status.HTTP_401_UNAUTHORIZED)
    except ValueError:
        return Response({'error': 'Invalid PIN'}, status=status.HTTP_401_UNAUTHORIZED)
    except Exception as e:
        logger.error(f"Failed to verify PIN: {str(e)}")
        return Response(
            {'error': 'Failed to verify PIN'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
