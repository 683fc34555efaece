import json
from datetime import datetime, timedelta
from unittest import mock

from django.contrib.auth.hashers import make_password
from django.test import TestCase, override_settings
from django.urls import reverse

from billing.api import ROUTES, Action
from billing.models import Account, Bill

from .helpers import FAST_HASHERS


@override_settings(PASSWORD_HASHERS=FAST_HASHERS)
class ApiTestCase(TestCase):

    def call(self, action, payload=None):
        body = {'action': action}
        if payload is not None:
            body['payload'] = payload
        return self.client.post(reverse('api'), data=json.dumps(body),
                                content_type='application/json')

    def data(self, action, payload=None):
        response = self.call(action, payload)
        self.assertEqual(response.status_code, 200, response.content)
        return response.json()['data']

    def register(self, phone='5551234', password='secret-pass', name='Nour'):
        return self.data('registerUser', {'userData': {
            'name': name, 'address': '7 Spring Lane',
            'phoneNumber': phone, 'password': password,
        }})


class ApiEnvelopeTest(ApiTestCase):
    """Test the request/response envelope and error mapping"""

    def test_every_action_has_a_route(self):
        self.assertEqual(set(ROUTES), set(Action))

    def test_get_is_not_allowed(self):
        response = self.client.get(reverse('api'))
        self.assertEqual(response.status_code, 405)
        self.assertIn('error', response.json())

    def test_malformed_json(self):
        response = self.client.post(reverse('api'), data='{nope',
                                    content_type='application/json')
        self.assertEqual(response.status_code, 400)

    def test_unknown_action_is_internal_error(self):
        response = self.call('dropTables')
        self.assertEqual(response.status_code, 500)
        self.assertIn('dropTables', response.json()['error'])

    def test_invalid_payload(self):
        response = self.call('getUserById', {'id': 'abc'})
        self.assertEqual(response.status_code, 400)
        self.assertIn('id', response.json()['error'])

    def test_unexpected_failure_is_hidden(self):
        with mock.patch('billing.services.get_water_price', side_effect=RuntimeError('db down')):
            response = self.call('getWaterPrice')
        self.assertEqual(response.status_code, 500)
        self.assertNotIn('db down', response.json()['error'])

    def test_error_kinds_map_to_status_codes(self):
        self.register(phone='5550001')

        self.assertEqual(self.call('registerUser', {'userData': {
            'name': 'Twin', 'phoneNumber': '5550001', 'password': 'x'}}).status_code, 409)
        self.assertEqual(self.call('loginUser', {
            'phoneNumber': '5550001', 'password': 'wrong'}).status_code, 403)
        self.assertEqual(self.call('getUserById', {'id': 999999}).status_code, 404)
        self.assertEqual(self.call('setWaterPrice', {'price': -1}).status_code, 400)
        self.assertEqual(self.call('addAnnouncement', {'message': '  '}).status_code, 400)


class ApiAccountTest(ApiTestCase):
    """Test account actions through the endpoint"""

    def test_register_and_login_never_expose_password(self):
        user = self.register()
        self.assertEqual(user['meterId'], 'WTR001')
        self.assertEqual(user['role'], 'user')
        self.assertNotIn('password', user)
        self.assertIsNotNone(datetime.fromisoformat(user['createdAt']))

        logged_in = self.data('loginUser', {'phoneNumber': '5551234', 'password': 'secret-pass'})
        self.assertEqual(logged_in['id'], user['id'])
        self.assertNotIn('password', logged_in)

    def test_forgot_password_returns_temp_password(self):
        self.register()
        result = self.data('forgotPasswordReset', {'phoneNumber': '5551234'})

        self.assertEqual(len(result['tempPass']), 8)
        self.data('loginUser', {'phoneNumber': '5551234', 'password': result['tempPass']})

    def test_update_user_merges_fields(self):
        user = self.register()
        updated = self.data('updateUser', {'updatedUser': {'id': user['id'], 'address': '9 River Road'}})

        self.assertEqual(updated['address'], '9 River Road')
        self.assertEqual(updated['name'], 'Nour')
        self.assertEqual(updated['phoneNumber'], '5551234')

    def test_role_changes(self):
        user = self.register()
        root = Account.objects.create(name='Root', phone_number='5550000', meter_id='SYS001',
                                      role=Account.ROLE_SUPER_ADMIN, password=make_password('r'))

        promoted = self.data('updateUserRole', {'userId': user['id'], 'newRole': 'admin'})
        self.assertEqual(promoted['role'], 'admin')
        self.assertEqual(self.call('updateUserRole', {
            'userId': root.pk, 'newRole': 'user'}).status_code, 403)
        self.assertEqual(self.call('resetPasswordByAdmin', {
            'userId': root.pk, 'newPassword': 'x'}).status_code, 403)
        self.assertEqual(len(self.data('getAllUsers')), 2)


class ApiBillingScenarioTest(ApiTestCase):
    """Walk a bill through its whole lifecycle over the API"""

    def test_reading_payment_review_and_summary(self):
        user = self.register()

        result = self.data('addMeterReading', {'userId': user['id'], 'newReadingValue': 100})
        bill = result['bill']
        self.assertEqual(result['reading']['previousReading'], 0)
        self.assertEqual(result['reading']['consumption'], 100)
        self.assertEqual(bill['amount'], 150.0)
        self.assertEqual(bill['status'], 'unpaid')
        issued = datetime.fromisoformat(bill['issueDate'])
        due = datetime.fromisoformat(bill['dueDate'])
        self.assertEqual(due - issued, timedelta(days=30))

        lower = self.call('addMeterReading', {'userId': user['id'], 'newReadingValue': 50})
        self.assertEqual(lower.status_code, 400)

        self.assertEqual(self.data('payBill', {'billId': bill['id']})['status'], 'pending_approval')
        pending = self.data('getAllPendingBills')
        self.assertEqual(pending[0]['bill']['id'], bill['id'])
        self.assertEqual(pending[0]['user']['name'], 'Nour')

        rejected = self.data('rejectPayment', {'billId': bill['id']})
        self.assertEqual(rejected['status'], 'unpaid')
        self.assertIsNone(rejected['paymentDate'])

        other = self.data('addMeterReading', {'userId': user['id'], 'newReadingValue': 120})['bill']
        self.data('payBill', {'billId': other['id']})
        paid_before = self.data('getInvoiceSummary')['paid']['count']

        approved = self.data('approvePayment', {'billId': other['id']})
        self.assertEqual(approved['status'], 'paid')
        self.assertIsNotNone(approved['paymentDate'])
        self.assertEqual(self.data('getInvoiceSummary')['paid']['count'], paid_before + 1)

        again = self.call('approvePayment', {'billId': other['id']})
        self.assertEqual(again.status_code, 404)

    def test_overdue_detected_when_bills_are_read(self):
        user = self.register()
        bill = self.data('addMeterReading', {'userId': user['id'], 'newReadingValue': 10})['bill']
        Bill.objects.filter(pk=bill['id']).update(due_date=Bill.objects.get(pk=bill['id']).issue_date - timedelta(days=1))

        latest = self.data('getLatestBillForUser', {'userId': user['id']})
        self.assertEqual(latest['status'], 'overdue')
        self.assertEqual(self.data('getBillsForUser', {'userId': user['id']})[0]['status'], 'overdue')
        self.assertEqual(len(self.data('getReadingsForUser', {'userId': user['id']})), 1)

    def test_price_snapshot_over_api(self):
        user = self.register()
        self.assertEqual(self.data('getWaterPrice'), 1.5)

        first = self.data('addMeterReading', {'userId': user['id'], 'newReadingValue': 10})['bill']
        self.assertEqual(self.data('setWaterPrice', {'price': 2}), 2.0)
        second = self.data('addMeterReading', {'userId': user['id'], 'newReadingValue': 20})['bill']

        bills = {b['id']: b for b in self.data('getBillsForUser', {'userId': user['id']})}
        self.assertEqual(bills[first['id']]['amount'], 15.0)
        self.assertEqual(bills[second['id']]['amount'], 20.0)

    def test_fractional_price_and_reading(self):
        user = self.register()

        self.assertEqual(self.data('setWaterPrice', {'price': 1.23456}), 1.23456)
        self.assertEqual(self.data('getWaterPrice'), 1.23456)

        self.data('setWaterPrice', {'price': 1.5})
        result = self.data('addMeterReading', {'userId': user['id'], 'newReadingValue': 100.125})
        self.assertEqual(result['reading']['reading'], 100.125)
        self.assertEqual(result['reading']['consumption'], 100.125)
        self.assertEqual(result['bill']['amount'], 150.19)

    def test_system_report_joins_account_name(self):
        user = self.register(name='Samir')
        self.data('addMeterReading', {'userId': user['id'], 'newReadingValue': 10})

        report = self.data('getSystemReportData')
        self.assertEqual(report['summary']['totalOutstanding'], 15.0)
        self.assertEqual(len(report['monthlyRevenue']), 12)
        self.assertEqual(report['allBills'][0]['user'], {'id': user['id'], 'name': 'Samir'})
        self.assertEqual(report['statusDistribution'], [{'status': 'unpaid', 'count': 1}])

    def test_announcements(self):
        created = self.data('addAnnouncement', {'message': 'Maintenance on Sunday'})
        listed = self.data('getAllAnnouncements')
        self.assertEqual(listed[0]['id'], created['id'])
        self.assertEqual(listed[0]['message'], 'Maintenance on Sunday')
