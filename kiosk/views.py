import logging
from django.contrib import messages
from django.core.paginator import Paginator
from django.shortcuts import render, redirect
from django.http import JsonResponse, HttpResponse
from django.views.decorators.http import require_http_methods, require_POST

from budbil_project.decorators import require_pin_verified
from pickup.exceptions import (
    CarrierValidationError,
    DriverNameRequiredError,
    EmptySelectionError,
    PickupCommitError,
    PickupValidationError,
)
from pickup.selection import Selection, parse_open_order_id, resolve_commit_batch
from pickup.services import PickupCommitService, create_carrier, list_active_carriers, query_orders
from pickup.services.orders import get_orders_by_ids, get_pending_order
from pickup.services.pin import clear_pin_verified, mark_pin_verified, verify_pin

from .services import (
    CARRIERS_PER_PAGE,
    ORDERS_PER_PAGE,
    kiosk_url,
    parse_positive_int,
    signature_has_strokes,
)

logger = logging.getLogger('kiosk')
security_logger = logging.getLogger('security')

# Validation messages shown on the tablet
MSG_SIGN_FIRST = "Vennligst signer først"
MSG_NAME_REQUIRED = "Vennligst skriv inn navn"
MSG_NO_ORDERS = "Velg minst én ordre før du henter ut"
MSG_SAVE_FAILED = "Kunne ikke lagre. Prøv igjen."
MSG_WRONG_PIN = "Feil PIN-kode"
MSG_COMPANY_REQUIRED = "Skriv inn firmanavn"


def _orders_url(carrier_id=None, selection=None, page=None, open_id=None):
    return kiosk_url(
        'orders',
        carrier=carrier_id,
        selected=selection.serialize() if selection else None,
        page=page if page and page > 1 else None,
        open=open_id,
    )


def _wrap_page(page_number, num_pages):
    """Next page for the pager button, wrapping back to the first page."""
    return page_number % max(num_pages, 1) + 1


# === Entry ===

def home(request):
    """Kiosk home screen; shows a confirmation after a completed pickup."""
    return render(request, 'kiosk/home.html', {
        'success': request.GET.get('success') == 'true',
    })


# === Carriers ===

def carriers(request):
    """Grid of active carriers, 8 per page."""
    try:
        carrier_list = list(list_active_carriers())
    except Exception as e:
        logger.error(f"Failed to fetch carriers: {str(e)}", exc_info=True)
        carrier_list = []
        messages.error(request, "Kunne ikke hente firmaer.")

    paginator = Paginator(carrier_list, CARRIERS_PER_PAGE)
    page = paginator.get_page(request.GET.get('page'))

    return render(request, 'kiosk/carriers.html', {
        'page': page,
        'next_page_url': kiosk_url('carriers', page=_wrap_page(page.number, paginator.num_pages)),
        'page_numbers': paginator.page_range,
    })


@require_http_methods(["GET", "POST"])
def carrier_pin(request):
    """PIN screen in front of "add carrier"."""
    error = None

    if request.method == 'POST':
        if verify_pin(request.POST.get('pin', '')):
            mark_pin_verified(request.session)
            logger.info("PIN accepted for carrier creation")
            return redirect('kiosk:carrier_add')

        error = MSG_WRONG_PIN
        security_logger.warning(
            f"Invalid PIN attempt from {request.META.get('REMOTE_ADDR', 'unknown')}"
        )

    return render(request, 'kiosk/carrier_pin.html', {'error': error})


@require_http_methods(["GET", "POST"])
@require_pin_verified
def carrier_add(request):
    """Add a carrier. One verified PIN allows one new carrier."""
    error = None
    company_name = ''

    if request.method == 'POST':
        company_name = request.POST.get('company_name', '')
        try:
            carrier = create_carrier(company_name)
            clear_pin_verified(request.session)
            messages.success(request, f"{carrier.company_name} er lagt til")
            return redirect('kiosk:carriers')
        except CarrierValidationError:
            error = MSG_COMPANY_REQUIRED
        except Exception as e:
            logger.error(f"Failed to create carrier: {str(e)}", exc_info=True)
            error = MSG_SAVE_FAILED

    return render(request, 'kiosk/carrier_add.html', {
        'error': error,
        'company_name': company_name,
    })


# === Orders ===

def orders(request):
    """
    Pending orders for one carrier (or all carriers), 6 per page.

    Query params:
        carrier: carrier id
        selected: the current selection (comma-separated ids)
        open: order shown in the detail panel
        page: grid page
    """
    carrier_id = parse_positive_int(request.GET.get('carrier'))
    selection = Selection.parse(request.GET.get('selected'))
    open_id = parse_open_order_id(request.GET.get('open'))

    try:
        order_list, carrier_name = query_orders(carrier_id=carrier_id, pending_only=True)
    except Exception as e:
        logger.error(f"Failed to fetch orders: {str(e)}", exc_info=True)
        order_list, carrier_name = [], ''
        messages.error(request, "Kunne ikke hente ordre.")

    paginator = Paginator(order_list, ORDERS_PER_PAGE)
    page = paginator.get_page(request.GET.get('page'))

    for order in page.object_list:
        order.is_selected = order.id in selection
        order.open_url = _orders_url(carrier_id, selection, page.number, order.id)

    open_order = None
    if open_id is not None:
        open_order = next((o for o in order_list if o.id == open_id), None)
        if open_order is None:
            open_order = get_pending_order(open_id, carrier_id)
        if open_order is None:
            logger.info(f"Open order {open_id} is no longer pending")

    return render(request, 'kiosk/orders.html', {
        'page': page,
        'page_numbers': paginator.page_range,
        'carrier_id': carrier_id,
        'carrier_name': carrier_name,
        'selection': selection,
        'selected_value': selection.serialize(),
        'open_order': open_order,
        'open_is_selected': open_order is not None and open_order.id in selection,
        'checkout_count': len(selection.merge_open_item(open_order.id if open_order else None)),
        'close_url': _orders_url(carrier_id, selection, page.number),
        'next_page_url': _orders_url(carrier_id, selection, _wrap_page(page.number, paginator.num_pages)),
        'toggle_scope_url': kiosk_url('orders') if carrier_id else kiosk_url('carriers'),
        'show_empty': carrier_id is not None and not order_list,
    })


@require_POST
def orders_selection(request):
    """Apply add/remove/toggle to the carried selection and return to the grid."""
    carrier_id = parse_positive_int(request.POST.get('carrier'))
    selection = Selection.parse(request.POST.get('selected'))
    order_id = parse_open_order_id(request.POST.get('order_id'))
    page = parse_positive_int(request.POST.get('page'))
    action = request.POST.get('action')

    if order_id is not None:
        if action == 'add':
            selection.add(order_id)
        elif action == 'remove':
            selection.remove(order_id)
        elif action == 'toggle':
            selection.toggle(order_id)
        else:
            logger.warning(f"Unknown selection action: {action}")

    return redirect(_orders_url(carrier_id, selection, page))


@require_POST
def orders_checkout(request):
    """Move to the signature screen with the selection plus the open order."""
    carrier_id = parse_positive_int(request.POST.get('carrier'))
    selection = Selection.parse(request.POST.get('selected'))
    open_id = parse_open_order_id(request.POST.get('open'))

    try:
        batch = resolve_commit_batch(selection, open_id)
    except EmptySelectionError:
        messages.error(request, MSG_NO_ORDERS)
        return redirect(_orders_url(carrier_id, selection))

    logger.info(f"Checkout started: orders={batch.serialize()} carrier={carrier_id}")
    # selected/open are the grid state to return to; only orders holds the merge
    return redirect(kiosk_url(
        'signature',
        orders=batch.serialize(),
        selected=selection.serialize(),
        open=open_id,
        carrier=carrier_id,
    ))


@require_http_methods(["GET", "POST"])
def signature(request):
    """Driver name, phone and signature for the whole batch."""
    params = request.GET if request.method == 'GET' else request.POST
    batch = Selection.parse(params.get('orders'))
    carrier_id = parse_positive_int(params.get('carrier'))
    selection = Selection.parse(params.get('selected'))
    open_id = parse_open_order_id(params.get('open'))

    if not batch:
        messages.error(request, MSG_NO_ORDERS)
        return redirect(_orders_url(carrier_id, selection))

    error = None
    form = {
        'driver_name': request.POST.get('driver_name', ''),
        'driver_phone': request.POST.get('driver_phone', ''),
        'order_reference': request.POST.get('order_reference', ''),
    }

    if request.method == 'POST':
        signature_data = request.POST.get('signature', '')

        if not signature_has_strokes(signature_data):
            error = MSG_SIGN_FIRST
        elif not form['driver_name'].strip():
            error = MSG_NAME_REQUIRED
        else:
            try:
                result = PickupCommitService.commit(
                    order_ids=batch.ids,
                    driver_name=form['driver_name'],
                    driver_phone=form['driver_phone'],
                    signature_data=signature_data,
                )
                logger.info(
                    f"Pickup confirmed at kiosk: {result.processed} order(s), "
                    f"reference={form['order_reference'] or '-'}"
                )
                return redirect(kiosk_url('home', success='true'))
            except DriverNameRequiredError:
                error = MSG_NAME_REQUIRED
            except PickupValidationError as e:
                logger.info(f"Pickup rejected: {str(e)}")
                error = MSG_NO_ORDERS
            except PickupCommitError as e:
                logger.error(f"Pickup failed at kiosk: {str(e)} ids={e.failed_ids}")
                error = MSG_SAVE_FAILED
            except Exception as e:
                logger.error(f"Pickup failed at kiosk: {str(e)}", exc_info=True)
                error = MSG_SAVE_FAILED

    return render(request, 'kiosk/signature.html', {
        'batch': batch,
        'orders_value': batch.serialize(),
        'orders': get_orders_by_ids(batch.ids),
        'carrier_id': carrier_id,
        'selected_value': selection.serialize(),
        'open_id': open_id,
        'back_url': _orders_url(carrier_id, selection, open_id=open_id),
        'form': form,
        'error': error,
    })


# === PWA ===

def pwa_manifest(request):
    """Serve PWA manifest."""
    manifest = {
        "name": "Budbil Utlevering",
        "short_name": "Budbil",
        "start_url": "/",
        "display": "standalone",
        "orientation": "landscape",
        "background_color": "#073F4B",
        "theme_color": "#073F4B",
        "icons": [
            {
                "src": "/static/kiosk/icon-192.png",
                "sizes": "192x192",
                "type": "image/png"
            },
            {
                "src": "/static/kiosk/icon-512.png",
                "sizes": "512x512",
                "type": "image/png"
            }
        ]
    }
    return JsonResponse(manifest)


def service_worker(request):
    """Serve service worker. Network only; the kiosk has no offline mode."""
    sw_content = """
self.addEventListener('install', (event) => {
    self.skipWaiting();
});

self.addEventListener('fetch', (event) => {
    event.respondWith(fetch(event.request));
});
"""
    return HttpResponse(sw_content, content_type='application/javascript')
