"""
Tests for the pickup commit: validation, shared timestamp, tolerance of
stale or orphan ids, and best-effort handling of store failures.
"""

from datetime import timedelta
from unittest.mock import patch

import pytest
from django.db import DatabaseError
from django.utils import timezone

from pickup.exceptions import DriverNameRequiredError, PickupCommitError, PickupValidationError
from pickup.models import Carrier, CarrierOrder, PickupOrder
from pickup.services import PickupCommitService
from pickup.services import pickup as pickup_service

PICKUP_URL = '/api/orders/pickup/'


@pytest.fixture
def carrier(db):
    return Carrier.objects.create(company_name='Bring')


def make_order(carrier=None, location='Budbil hylle 3', picked_up_at=None, **kwargs):
    order = PickupOrder.objects.create(customer_name=kwargs.pop('customer_name', 'Kari Nordmann'),
                                       location=location, **kwargs)
    if carrier is not None:
        CarrierOrder.objects.create(order=order, carrier=carrier, shelf_number=3, picked_up_at=picked_up_at)
    return order


@pytest.mark.django_db
class TestPickupValidation:
    def test_empty_order_list_rejected(self, client):
        response = client.post(PICKUP_URL, {'orderIds': [], 'driverName': 'Ola Nordmann'},
                               content_type='application/json')
        assert response.status_code == 400
        assert response.json() == {'error': 'No orders specified'}

    def test_missing_order_list_rejected(self, client):
        response = client.post(PICKUP_URL, {'driverName': 'Ola Nordmann'}, content_type='application/json')
        assert response.status_code == 400
        assert response.json()['error'] == 'No orders specified'

    def test_empty_list_wins_over_blank_name(self, client):
        response = client.post(PICKUP_URL, {'orderIds': [], 'driverName': ''}, content_type='application/json')
        assert response.json()['error'] == 'No orders specified'

    @pytest.mark.parametrize('name', ['', '   ', None])
    def test_blank_driver_name_rejected(self, client, carrier, name):
        order = make_order(carrier)
        response = client.post(PICKUP_URL, {'orderIds': [order.id], 'driverName': name},
                               content_type='application/json')
        assert response.status_code == 400
        assert response.json() == {'error': 'Driver name is required'}

        order.carrier_order.refresh_from_db()
        assert order.carrier_order.picked_up_at is None

    def test_validation_happens_before_store_access(self, carrier):
        with patch.object(pickup_service, '_commit_one') as commit_one:
            with pytest.raises(DriverNameRequiredError):
                PickupCommitService.commit([1, 2], '  ')
        commit_one.assert_not_called()
        assert issubclass(DriverNameRequiredError, PickupValidationError)

    @pytest.mark.parametrize('order_ids', [['abc'], [1, None], [True], 'not-a-list', {'id': 1}, 7])
    def test_malformed_order_ids_rejected(self, client, order_ids):
        response = client.post(PICKUP_URL, {'orderIds': order_ids, 'driverName': 'Ola'},
                               content_type='application/json')
        assert response.status_code == 400
        assert response.json() == {'error': 'Invalid order ids'}

    def test_malformed_json_body(self, client):
        response = client.post(PICKUP_URL, '{not json', content_type='application/json')
        assert response.status_code == 400


@pytest.mark.django_db
class TestPickupCommit:
    def test_marks_orders_picked_up_with_shared_attestation(self, client, carrier):
        first = make_order(carrier)
        second = make_order(carrier)

        response = client.post(PICKUP_URL, {
            'orderIds': [first.id, second.id],
            'driverName': '  Ola Nordmann ',
            'driverPhone': ' 98765432 ',
            'signatureData': 'data:image/png;base64,AAAA',
        }, content_type='application/json')

        assert response.status_code == 200
        assert response.json() == {
            'success': True,
            'message': '2 order(s) marked as picked up',
            'count': 2,
        }

        first_co = CarrierOrder.objects.get(order=first)
        second_co = CarrierOrder.objects.get(order=second)
        assert first_co.driver_name == 'Ola Nordmann'
        assert first_co.driver_phone == '98765432'
        assert first_co.signature_data == 'data:image/png;base64,AAAA'
        assert first_co.picked_up_at is not None
        assert first_co.picked_up_at == second_co.picked_up_at

        first.refresh_from_db()
        assert first.status == PickupOrder.STATUS_DELIVERED
        assert first.delivered_by == 'Ola Nordmann'
        assert first.delivered_at == first_co.picked_up_at

    def test_blank_phone_and_signature_stored_as_null(self, carrier):
        order = make_order(carrier)
        PickupCommitService.commit([order.id], 'Ola', driver_phone='   ', signature_data='')

        carrier_order = CarrierOrder.objects.get(order=order)
        assert carrier_order.driver_phone is None
        assert carrier_order.signature_data is None

    def test_orphan_order_does_not_abort_batch(self, client, carrier):
        first = make_order(carrier)
        orphan = make_order(None)
        second = make_order(carrier)

        response = client.post(PICKUP_URL, {
            'orderIds': [first.id, orphan.id, second.id],
            'driverName': 'Ola Nordmann',
        }, content_type='application/json')

        assert response.status_code == 200
        assert response.json()['count'] == 3

        first_co = CarrierOrder.objects.get(order=first)
        second_co = CarrierOrder.objects.get(order=second)
        assert first_co.picked_up_at == second_co.picked_up_at

        orphan.refresh_from_db()
        assert orphan.status == PickupOrder.STATUS_PENDING
        assert orphan.delivered_at is None

    def test_unknown_ids_are_ignored(self, carrier):
        order = make_order(carrier)
        result = PickupCommitService.commit([999999, order.id], 'Ola')

        assert result.processed == 2
        assert result.updated == 1
        assert result.skipped_ids == [999999]

    def test_already_picked_up_order_keeps_first_attestation(self, carrier):
        earlier = timezone.now() - timedelta(hours=2)
        order = make_order(carrier, picked_up_at=earlier)
        CarrierOrder.objects.filter(order=order).update(driver_name='Første sjåfør')

        result = PickupCommitService.commit([order.id], 'Andre sjåfør')

        carrier_order = CarrierOrder.objects.get(order=order)
        assert carrier_order.picked_up_at == earlier
        assert carrier_order.driver_name == 'Første sjåfør'
        assert result.updated == 0
        assert result.skipped_ids == [order.id]

    def test_duplicate_ids_updated_once_but_counted_as_sent(self, client, carrier):
        order = make_order(carrier)
        result = PickupCommitService.commit([order.id, order.id, str(order.id)], 'Ola')
        assert result.processed == 3
        assert result.updated == 1

        other = make_order(carrier)
        response = client.post(PICKUP_URL, {'orderIds': [other.id, other.id], 'driverName': 'Ola'},
                               content_type='application/json')
        assert response.json()['count'] == 2

    @pytest.mark.parametrize('bad_id', [0, -4, 101.0, 2.5])
    def test_unusable_number_does_not_abort_batch(self, client, carrier, bad_id):
        order = make_order(carrier)

        response = client.post(PICKUP_URL, {'orderIds': [order.id, bad_id], 'driverName': 'Ola Nordmann'},
                               content_type='application/json')

        assert response.status_code == 200
        assert response.json()['count'] == 2
        assert CarrierOrder.objects.get(order=order).picked_up_at is not None

    def test_unusable_numbers_reported_as_skipped(self, carrier):
        order = make_order(carrier)
        result = PickupCommitService.commit([0, order.id, -4], 'Ola')
        assert result.updated == 1
        assert result.skipped_ids == [0, -4]


@pytest.mark.django_db
class TestPickupStoreFailure:
    def test_failure_reported_after_whole_batch_attempted(self, client, carrier):
        first = make_order(carrier)
        broken = make_order(carrier)
        last = make_order(carrier)
        original = pickup_service._commit_one

        def flaky(order_id, attestation, picked_up_at):
            if order_id == broken.id:
                raise DatabaseError("connection lost")
            return original(order_id, attestation, picked_up_at)

        with patch.object(pickup_service, '_commit_one', side_effect=flaky):
            response = client.post(PICKUP_URL, {
                'orderIds': [first.id, broken.id, last.id],
                'driverName': 'Ola Nordmann',
            }, content_type='application/json')

        assert response.status_code == 500
        assert response.json() == {'error': 'Failed to update orders'}
        assert 'connection lost' not in response.content.decode()

        assert CarrierOrder.objects.get(order=first).picked_up_at is not None
        assert CarrierOrder.objects.get(order=last).picked_up_at is not None
        assert CarrierOrder.objects.get(order=broken).picked_up_at is None

    def test_service_raises_commit_error_with_failed_ids(self, carrier):
        order = make_order(carrier)
        with patch.object(pickup_service, '_commit_one', side_effect=DatabaseError("down")):
            with pytest.raises(PickupCommitError) as excinfo:
                PickupCommitService.commit([order.id], 'Ola')
        assert excinfo.value.failed_ids == [order.id]
