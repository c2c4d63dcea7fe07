import json
import logging
from decimal import Decimal, InvalidOperation
from django.http import JsonResponse
from django.shortcuts import render, redirect
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST, require_GET

from .khalti_service import KhaltiService, KhaltiError, KhaltiTimeout, STATUS_COMPLETED
from .order_summary import OrderSummary, MissingOrderSummary, stash_order_summary, pop_order_summary

logger = logging.getLogger(__name__)

# Set by the checkout page before redirecting to Khalti; the gateway doesn't echo it back
KHALTI_QUANTITY_SESSION_KEY = 'khalti_quantity'

INITIATE_FAILED = 'Failed to initiate payment'
LOOKUP_FAILED = 'Failed to verify payment'
GATEWAY_TIMEOUT = 'Payment gateway timed out'


def _parse_json_body(request):
    try:
        return json.loads(request.body)
    except ValueError:
        return None


def _relay(upstream):
    # Upstream JSON may be a list or scalar, hence safe=False
    return JsonResponse(upstream.data, status=upstream.status_code, safe=False)


# ==============================================================================
# 1. KHALTI PROXY ENDPOINTS
# ==============================================================================

@csrf_exempt
@require_POST
def khalti_initiate(request):
    """
    Forwards the initiate payload to Khalti unmodified and relays the answer
    (status code and JSON body) verbatim.
    """
    payload = _parse_json_body(request)
    if payload is None:
        return JsonResponse({'error': 'Invalid JSON body'}, status=400)

    try:
        upstream = KhaltiService().initiate(payload)
    except KhaltiTimeout:
        return JsonResponse({'error': GATEWAY_TIMEOUT}, status=504)
    except KhaltiError as e:
        logger.error(f"Khalti initiation error: {e}")
        return JsonResponse({'error': INITIATE_FAILED}, status=500)

    if upstream.ok and isinstance(upstream.data, dict):
        logger.info(f"Payment initiated: pidx={upstream.data.get('pidx')}")
    return _relay(upstream)


@csrf_exempt
@require_POST
def khalti_lookup(request):
    """
    Looks up a payment by pidx. Only `{"pidx": ...}` is sent upstream,
    whatever else the caller put in the body.
    """
    payload = _parse_json_body(request)
    if payload is None:
        return JsonResponse({'error': 'Invalid JSON body'}, status=400)

    # Only absent/empty counts as missing; any other value goes to Khalti as sent
    pidx = payload.get('pidx') if isinstance(payload, dict) else None
    if pidx is None or pidx == '':
        return JsonResponse({'error': 'pidx is required', 'error_key': 'validation_error'}, status=400)

    try:
        upstream = KhaltiService().lookup(pidx)
    except KhaltiTimeout:
        return JsonResponse({'error': GATEWAY_TIMEOUT}, status=504)
    except KhaltiError as e:
        logger.error(f"Khalti lookup error: {e}")
        return JsonResponse({'error': LOOKUP_FAILED}, status=500)

    return _relay(upstream)


# ==============================================================================
# 2. CUSTOMER-FACING PAGES
# ==============================================================================

def _paisa_to_rupees(value):
    try:
        return Decimal(str(value)) / 100
    except (InvalidOperation, TypeError, ValueError):
        return None


def _payment_failed(request, error):
    return render(request, 'payments/payment_failed.html', {'error': error})


@require_GET
def khalti_return(request):
    """
    Khalti's return_url.
    Verifies the payment with a lookup before trusting the query string, then hands
    the summary to the confirmation page.
    """
    pidx = request.GET.get('pidx')
    if not pidx:
        return _payment_failed(request, 'Payment reference not found')

    try:
        upstream = KhaltiService().lookup(pidx)
    except KhaltiTimeout:
        return _payment_failed(request, 'The payment gateway took too long to respond. Please try again shortly.')
    except KhaltiError as e:
        logger.error(f"Khalti verification failed for {pidx}: {e}")
        return _payment_failed(request, 'Failed to verify payment. Please contact support.')

    data = upstream.data if isinstance(upstream.data, dict) else {}
    if not upstream.ok:
        logger.warning(f"Khalti lookup for {pidx} rejected with {upstream.status_code}: {data}")
        return _payment_failed(request, data.get('detail') or 'Payment verification failed')

    status = data.get('status')
    if status != STATUS_COMPLETED:
        return _payment_failed(request, f"Payment status: {status or 'Unknown'}")

    # The lookup is authoritative; the query string is only a fallback
    total = _paisa_to_rupees(data.get('total_amount', request.GET.get('amount')))
    transaction_id = data.get('transaction_id') or request.GET.get('transaction_id')
    if total is None or not transaction_id:
        return _payment_failed(request, 'Payment not confirmed')

    summary = OrderSummary(
        product={'name': request.GET.get('purchase_order_name', '')},
        quantity=request.session.pop(KHALTI_QUANTITY_SESSION_KEY, 1),
        total=total,
        transaction_id=transaction_id,
    )
    stash_order_summary(request, summary)
    logger.info(f"Payment {pidx} completed (transaction {transaction_id})")
    return redirect('payments:order_success')


def order_success(request):
    """
    Confirmation page. Trusts the summary handed over by the checkout flow;
    without one (direct visit, refresh) it shows an empty state.
    """
    try:
        summary = pop_order_summary(request)
    except MissingOrderSummary as e:
        logger.info(f"Order confirmation opened without a summary: {e}")
        return render(request, 'payments/order_missing.html')

    return render(request, 'payments/order_success.html', {'summary': summary})
