import json
import os
import subprocess
import sys
from decimal import Decimal
from unittest import mock

import requests
from django.apps import apps
from django.conf import settings
from django.test import TestCase, SimpleTestCase, Client, override_settings
from django.urls import reverse

from .khalti_service import KhaltiService, KhaltiError, KhaltiTimeout
from .order_summary import OrderSummary, MissingOrderSummary, ORDER_SUMMARY_SESSION_KEY, stash_order_summary
from .views import KHALTI_QUANTITY_SESSION_KEY


def fake_response(status_code=200, data=None, json_error=False):
    response = mock.Mock()
    response.status_code = status_code
    response.text = json.dumps(data) if data is not None else '<html>Bad Gateway</html>'
    if json_error:
        response.json.side_effect = ValueError("Expecting value")
    else:
        response.json.return_value = data
    return response


TEST_KHALTI_SETTINGS = dict(
    KHALTI_SECRET_KEY='test-secret',
    KHALTI_BASE_URL='https://dev.khalti.com/api/v2/epayment/',
    KHALTI_TIMEOUT=5,
)


@override_settings(**TEST_KHALTI_SETTINGS)
class KhaltiServiceTests(SimpleTestCase):
    @mock.patch('payments.khalti_service.requests.post')
    def test_initiate_forwards_payload_with_key_and_timeout(self, mock_post):
        mock_post.return_value = fake_response(200, {'pidx': 'abc'})
        payload = {'amount': 1300, 'purchase_order_id': 'order_1'}

        result = KhaltiService().initiate(payload)

        self.assertTrue(result.ok)
        self.assertEqual(result.data, {'pidx': 'abc'})
        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], 'https://dev.khalti.com/api/v2/epayment/initiate/')
        self.assertEqual(kwargs['json'], payload)
        self.assertEqual(kwargs['headers']['Authorization'], 'Key test-secret')
        self.assertEqual(kwargs['timeout'], 5)

    @mock.patch('payments.khalti_service.requests.post')
    def test_upstream_error_is_returned_not_raised(self, mock_post):
        mock_post.return_value = fake_response(400, {'detail': 'Invalid token.'})
        result = KhaltiService().lookup('xyz')
        self.assertFalse(result.ok)
        self.assertEqual(result.status_code, 400)

    @mock.patch('payments.khalti_service.requests.post')
    def test_timeout_raises_distinct_error(self, mock_post):
        mock_post.side_effect = requests.exceptions.ReadTimeout("read timed out")
        with self.assertRaises(KhaltiTimeout):
            KhaltiService().lookup('xyz')

    @mock.patch('payments.khalti_service.requests.post')
    def test_non_json_body_raises(self, mock_post):
        mock_post.return_value = fake_response(502, json_error=True)
        with self.assertRaises(KhaltiError):
            KhaltiService().initiate({})

    def test_base_url_gets_trailing_slash(self):
        service = KhaltiService(base_url='https://khalti.com/api/v2/epayment')
        self.assertEqual(service.base_url, 'https://khalti.com/api/v2/epayment/')


@override_settings(**TEST_KHALTI_SETTINGS)
class KhaltiInitiateProxyTests(TestCase):
    def setUp(self):
        self.client = Client()
        self.url = reverse('payments:khalti_initiate')

    def post(self, body):
        return self.client.post(self.url, data=json.dumps(body), content_type='application/json')

    @mock.patch('payments.khalti_service.requests.post')
    def test_relays_upstream_success_unchanged(self, mock_post):
        mock_post.return_value = fake_response(200, {'pidx': 'abc'})
        response = self.post({'amount': 1000})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'pidx': 'abc'})

    @mock.patch('payments.khalti_service.requests.post')
    def test_forwards_body_unmodified(self, mock_post):
        mock_post.return_value = fake_response(200, {'pidx': 'abc'})
        body = {
            'return_url': 'http://localhost:8000/checkout/khalti/return/',
            'website_url': 'http://localhost:8000/',
            'amount': 450000,
            'purchase_order_id': 'order_42',
            'purchase_order_name': 'Thangka',
            'customer_info': {'name': 'Sita', 'email': 'sita@example.com', 'phone': '9800000000'},
        }
        self.post(body)
        self.assertEqual(mock_post.call_args.kwargs['json'], body)

    @mock.patch('payments.khalti_service.requests.post')
    def test_relays_upstream_error_status_and_body(self, mock_post):
        upstream = {'amount': ['Amount should be greater than Rs. 10, that is 1000 paisa.'], 'error_key': 'validation_error'}
        mock_post.return_value = fake_response(400, upstream)
        response = self.post({'amount': 10})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), upstream)

    @mock.patch('payments.khalti_service.requests.post')
    def test_network_failure_returns_generic_500(self, mock_post):
        mock_post.side_effect = requests.exceptions.ConnectionError("Name or service not known")
        response = self.post({'amount': 1000})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {'error': 'Failed to initiate payment'})

    @mock.patch('payments.khalti_service.requests.post')
    def test_timeout_returns_504(self, mock_post):
        mock_post.side_effect = requests.exceptions.ConnectTimeout("timed out")
        response = self.post({'amount': 1000})
        self.assertEqual(response.status_code, 504)
        self.assertEqual(response.json(), {'error': 'Payment gateway timed out'})

    def test_invalid_json_body_is_400(self):
        response = self.client.post(self.url, data='{not json', content_type='application/json')
        self.assertEqual(response.status_code, 400)

    def test_get_not_allowed(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 405)


@override_settings(**TEST_KHALTI_SETTINGS)
class KhaltiLookupProxyTests(TestCase):
    def setUp(self):
        self.client = Client()
        self.url = reverse('payments:khalti_lookup')

    def post(self, body):
        return self.client.post(self.url, data=json.dumps(body), content_type='application/json')

    @mock.patch('payments.khalti_service.requests.post')
    def test_outbound_body_is_exactly_pidx(self, mock_post):
        mock_post.return_value = fake_response(200, {'pidx': 'xyz', 'status': 'Completed'})
        self.post({'pidx': 'xyz', 'amount': 999, 'extra': 'ignored'})

        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], 'https://dev.khalti.com/api/v2/epayment/lookup/')
        self.assertEqual(kwargs['json'], {'pidx': 'xyz'})

    @mock.patch('payments.khalti_service.requests.post')
    def test_both_routes_use_configured_key(self, mock_post):
        mock_post.return_value = fake_response(200, {'pidx': 'xyz'})
        self.post({'pidx': 'xyz'})
        self.client.post(reverse('payments:khalti_initiate'), data='{}', content_type='application/json')

        keys = {call.kwargs['headers']['Authorization'] for call in mock_post.call_args_list}
        self.assertEqual(keys, {'Key test-secret'})

    @mock.patch('payments.khalti_service.requests.post')
    def test_relays_upstream_response(self, mock_post):
        upstream = {
            'pidx': 'xyz',
            'total_amount': 450000,
            'status': 'Completed',
            'transaction_id': 'tx123',
            'fee': 0,
            'refunded': False,
        }
        mock_post.return_value = fake_response(200, upstream)
        response = self.post({'pidx': 'xyz'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), upstream)

    @mock.patch('payments.khalti_service.requests.post')
    def test_upstream_404_is_relayed(self, mock_post):
        mock_post.return_value = fake_response(404, {'detail': 'Not found.', 'error_key': 'validation_error'})
        response = self.post({'pidx': 'unknown'})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()['detail'], 'Not found.')

    @mock.patch('payments.khalti_service.requests.post')
    def test_failure_returns_generic_500(self, mock_post):
        mock_post.return_value = fake_response(502, json_error=True)
        response = self.post({'pidx': 'xyz'})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {'error': 'Failed to verify payment'})

    @mock.patch('payments.khalti_service.requests.post')
    def test_timeout_returns_504(self, mock_post):
        mock_post.side_effect = requests.exceptions.Timeout()
        response = self.post({'pidx': 'xyz'})
        self.assertEqual(response.status_code, 504)

    @mock.patch('payments.khalti_service.requests.post')
    def test_missing_pidx_is_400_without_upstream_call(self, mock_post):
        response = self.post({})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'pidx is required')
        mock_post.assert_not_called()

    @mock.patch('payments.khalti_service.requests.post')
    def test_empty_pidx_is_400(self, mock_post):
        response = self.post({'pidx': ''})
        self.assertEqual(response.status_code, 400)
        mock_post.assert_not_called()

    @mock.patch('payments.khalti_service.requests.post')
    def test_falsy_but_present_pidx_is_forwarded(self, mock_post):
        """A pidx of 0 is a value, not a missing field; Khalti decides whether it is valid."""
        mock_post.return_value = fake_response(400, {'pidx': ['Not a valid string.'], 'error_key': 'validation_error'})
        response = self.post({'pidx': 0})

        self.assertEqual(mock_post.call_args.kwargs['json'], {'pidx': 0})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error_key'], 'validation_error')


class OrderSummaryTests(SimpleTestCase):
    def test_from_state(self):
        summary = OrderSummary.from_state({
            'product': {'name': 'Thangka'},
            'quantity': 2,
            'total': 4500,
            'transactionId': 'tx123',
        })
        self.assertEqual(summary.product_name, 'Thangka')
        self.assertEqual(summary.quantity, 2)
        self.assertEqual(summary.total, Decimal('4500'))
        self.assertEqual(summary.transaction_id, 'tx123')

    def test_empty_state_raises(self):
        with self.assertRaises(MissingOrderSummary):
            OrderSummary.from_state(None)

    def test_incomplete_state_raises(self):
        with self.assertRaises(MissingOrderSummary):
            OrderSummary.from_state({'product': {'name': 'Thangka'}, 'quantity': 2})

    def test_bounds_are_not_enforced(self):
        summary = OrderSummary.from_state({'product': {}, 'quantity': 0, 'total': '0', 'transactionId': 'tx0'})
        self.assertEqual(summary.quantity, 0)
        self.assertEqual(summary.total, Decimal('0'))

    def test_fractional_quantity_is_rejected_not_truncated(self):
        with self.assertRaises(MissingOrderSummary):
            OrderSummary.from_state({'product': {'name': 'Thangka'}, 'quantity': 2.7, 'total': 100, 'transactionId': 'tx1'})

    def test_whole_number_quantity_strings_are_accepted(self):
        summary = OrderSummary.from_state({'product': {'name': 'Thangka'}, 'quantity': '3', 'total': 100, 'transactionId': 'tx1'})
        self.assertEqual(summary.quantity, 3)

    def test_object_product_is_stored_as_its_name(self):
        """Session data must be JSON-serializable, so a model-like product is reduced to its name."""
        product = mock.Mock(spec=['name'])
        product.name = 'Singing Bowl'
        summary = OrderSummary(product, 1, Decimal('2500'), 'tx9')

        state = summary.to_state()

        self.assertEqual(state['product'], {'name': 'Singing Bowl'})
        json.dumps(state)
        self.assertEqual(OrderSummary.from_state(state).product_name, 'Singing Bowl')


class OrderSuccessViewTests(TestCase):
    def setUp(self):
        self.client = Client()
        self.url = reverse('payments:order_success')

    def set_navigation_state(self, state):
        session = self.client.session
        session[ORDER_SUMMARY_SESSION_KEY] = state
        session.save()

    def test_renders_order_summary(self):
        self.set_navigation_state({
            'product': {'name': 'Thangka'},
            'quantity': 2,
            'total': 4500,
            'transactionId': 'tx123',
        })
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, 'payments/order_success.html')
        self.assertContains(response, 'Payment Successful!')
        self.assertContains(response, 'Thangka')
        self.assertContains(response, '<span>2</span>', html=True)
        self.assertContains(response, 'Rs. 4500.00')
        self.assertContains(response, 'tx123')
        self.assertContains(response, 'Continue Shopping')
        self.assertContains(response, '/orders/')

    def test_summary_is_consumed_once(self):
        self.set_navigation_state({'product': {'name': 'Thangka'}, 'quantity': 1, 'total': 100, 'transactionId': 'tx1'})
        self.client.get(self.url)
        response = self.client.get(self.url)
        self.assertTemplateUsed(response, 'payments/order_missing.html')

    def test_stashed_object_product_survives_session_save(self):
        product = mock.Mock(spec=['name'])
        product.name = 'Singing Bowl'
        request = mock.Mock()
        request.session = self.client.session

        stash_order_summary(request, OrderSummary(product, 1, Decimal('2500'), 'tx9'))
        request.session.save()

        response = self.client.get(self.url)
        self.assertTemplateUsed(response, 'payments/order_success.html')
        self.assertContains(response, 'Singing Bowl')
        self.assertContains(response, 'Rs. 2500.00')

    def test_missing_state_shows_empty_state(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, 'payments/order_missing.html')
        self.assertContains(response, 'No recent order to show')


@override_settings(**TEST_KHALTI_SETTINGS)
class KhaltiReturnViewTests(TestCase):
    def setUp(self):
        self.client = Client()
        self.url = reverse('payments:khalti_return')
        self.params = {
            'pidx': 'xyz',
            'status': 'Completed',
            'transaction_id': 'tx123',
            'amount': '450000',
            'purchase_order_id': 'order_42',
            'purchase_order_name': 'Thangka',
        }

    @mock.patch('payments.khalti_service.requests.post')
    def test_completed_payment_redirects_to_confirmation(self, mock_post):
        mock_post.return_value = fake_response(200, {
            'pidx': 'xyz', 'total_amount': 450000, 'status': 'Completed',
            'transaction_id': 'tx123', 'fee': 0, 'refunded': False,
        })
        session = self.client.session
        session[KHALTI_QUANTITY_SESSION_KEY] = 2
        session.save()

        response = self.client.get(self.url, self.params)
        self.assertRedirects(response, reverse('payments:order_success'), fetch_redirect_response=False)

        response = self.client.get(reverse('payments:order_success'))
        self.assertContains(response, 'Thangka')
        self.assertContains(response, 'Rs. 4500.00')
        self.assertContains(response, 'tx123')
        self.assertContains(response, '<span>2</span>', html=True)

    @mock.patch('payments.khalti_service.requests.post')
    def test_pending_payment_shows_issue_page(self, mock_post):
        mock_post.return_value = fake_response(200, {'pidx': 'xyz', 'status': 'Pending', 'transaction_id': None})
        response = self.client.get(self.url, self.params)
        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, 'payments/payment_failed.html')
        self.assertContains(response, 'Payment status: Pending')

    def test_missing_pidx(self):
        response = self.client.get(self.url)
        self.assertContains(response, 'Payment reference not found')

    @mock.patch('payments.khalti_service.requests.post')
    def test_gateway_failure_shows_issue_page(self, mock_post):
        mock_post.side_effect = requests.exceptions.ConnectionError()
        response = self.client.get(self.url, self.params)
        self.assertTemplateUsed(response, 'payments/payment_failed.html')
        self.assertContains(response, 'Failed to verify payment')

    @mock.patch('payments.khalti_service.requests.post')
    def test_gateway_rejection_shows_detail(self, mock_post):
        mock_post.return_value = fake_response(400, {'detail': 'Invalid token.', 'status_code': 401})
        response = self.client.get(self.url, self.params)

        self.assertTemplateUsed(response, 'payments/payment_failed.html')
        self.assertContains(response, 'Invalid token.')
        self.assertNotIn(ORDER_SUMMARY_SESSION_KEY, self.client.session)

    @mock.patch('payments.khalti_service.requests.post')
    def test_gateway_rejection_without_detail_uses_generic_message(self, mock_post):
        mock_post.return_value = fake_response(404, {'error_key': 'validation_error'})
        response = self.client.get(self.url, self.params)
        self.assertContains(response, 'Payment verification failed')

    @mock.patch('payments.khalti_service.requests.post')
    def test_completed_without_transaction_id_is_not_confirmed(self, mock_post):
        mock_post.return_value = fake_response(200, {'pidx': 'xyz', 'total_amount': 450000, 'status': 'Completed', 'transaction_id': None})
        params = {key: value for key, value in self.params.items() if key != 'transaction_id'}
        response = self.client.get(self.url, params)

        self.assertTemplateUsed(response, 'payments/payment_failed.html')
        self.assertContains(response, 'Payment not confirmed')
        self.assertNotIn(ORDER_SUMMARY_SESSION_KEY, self.client.session)

    @mock.patch('payments.khalti_service.requests.post')
    def test_completed_without_usable_amount_is_not_confirmed(self, mock_post):
        mock_post.return_value = fake_response(200, {'pidx': 'xyz', 'status': 'Completed', 'transaction_id': 'tx123'})
        params = dict(self.params, amount='not-a-number')
        response = self.client.get(self.url, params)

        self.assertTemplateUsed(response, 'payments/payment_failed.html')
        self.assertContains(response, 'Payment not confirmed')


class MissingKeyWarningTests(SimpleTestCase):
    @override_settings(KHALTI_SECRET_KEY=None)
    def test_app_ready_warns_about_missing_key(self):
        with self.assertLogs('payments', level='WARNING') as logs:
            apps.get_app_config('payments').ready()
        self.assertIn('KHALTI_SECRET_KEY not found', logs.output[0])

    @override_settings(KHALTI_SECRET_KEY=None)
    def test_building_a_client_does_not_warn(self):
        """The client is built per request, so it must not repeat the start-up warning."""
        with self.assertNoLogs('payments', level='WARNING'):
            KhaltiService()
            KhaltiService()


class ProductionSettingsTests(SimpleTestCase):
    """
    Settings are imported in a fresh interpreter, outside the test runner,
    so the production checks actually run.
    """

    def import_settings(self, **env_overrides):
        env = dict(os.environ)
        env.update({
            'DJANGO_DEBUG': 'False',
            'SECRET_KEY': 'prod-secret',
        })
        env.update(env_overrides)
        return subprocess.run(
            [sys.executable, '-c', 'import ArtVibe_Shop.settings'],
            cwd=settings.BASE_DIR,
            env=env,
            capture_output=True,
            text=True,
        )

    def test_missing_khalti_key_refuses_to_start(self):
        result = self.import_settings(KHALTI_SECRET_KEY='')
        self.assertNotEqual(result.returncode, 0)
        self.assertIn('ImproperlyConfigured', result.stderr)
        self.assertIn('KHALTI_SECRET_KEY is not set', result.stderr)

    def test_missing_secret_key_refuses_to_start(self):
        result = self.import_settings(SECRET_KEY='', KHALTI_SECRET_KEY='live-key')
        self.assertNotEqual(result.returncode, 0)
        self.assertIn('SECRET_KEY is not set', result.stderr)

    def test_configured_production_settings_load(self):
        result = self.import_settings(KHALTI_SECRET_KEY='live-key')
        self.assertEqual(result.returncode, 0, result.stderr)
