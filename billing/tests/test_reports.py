from datetime import datetime, timedelta
from decimal import Decimal

from django.test import SimpleTestCase, TestCase, override_settings
from django.utils import timezone

from billing import reports, services
from billing.models import Bill

from .helpers import FAST_HASHERS, make_account, make_past_due


class MonthWindowTest(SimpleTestCase):
    """Test the trailing twelve-month window"""

    def test_window_crosses_year_boundary(self):
        now = timezone.make_aware(datetime(2026, 2, 14, 9, 30))
        months = [m.strftime('%Y-%m') for m in reports.month_window(now)]

        self.assertEqual(len(months), 12)
        self.assertEqual(months[0], '2025-03')
        self.assertEqual(months[-2:], ['2026-01', '2026-02'])


@override_settings(PASSWORD_HASHERS=FAST_HASHERS)
class InvoiceSummaryTest(TestCase):
    """Test the invoice summary buckets"""

    def setUp(self):
        self.account = make_account()

    def test_empty_summary(self):
        summary = reports.invoice_summary()
        for bucket in ('paid', 'unpaid', 'pending'):
            self.assertEqual(summary[bucket], {'total': Decimal('0'), 'count': 0})

    def test_buckets_partition_all_bills(self):
        _, paid = services.record_meter_reading(self.account.pk, 10)       # 15.00
        _, pending = services.record_meter_reading(self.account.pk, 30)    # 30.00
        _, overdue = services.record_meter_reading(self.account.pk, 40)    # 15.00
        _, unpaid = services.record_meter_reading(self.account.pk, 100)    # 90.00
        services.pay_bill(paid.pk)
        services.approve_payment(paid.pk)
        services.pay_bill(pending.pk)
        make_past_due(overdue)

        summary = reports.invoice_summary()

        self.assertEqual(summary['paid'], {'total': Decimal('15.00'), 'count': 1})
        self.assertEqual(summary['pending'], {'total': Decimal('30.00'), 'count': 1})
        self.assertEqual(summary['unpaid'], {'total': Decimal('105.00'), 'count': 2})
        self.assertEqual(
            sum(summary[b]['count'] for b in ('paid', 'unpaid', 'pending')),
            Bill.objects.count(),
        )

    def test_summary_runs_the_overdue_sweep(self):
        _, bill = services.record_meter_reading(self.account.pk, 10)
        make_past_due(bill)

        reports.invoice_summary()
        self.assertEqual(Bill.objects.get(pk=bill.pk).status, Bill.STATUS_OVERDUE)


@override_settings(PASSWORD_HASHERS=FAST_HASHERS)
class SystemReportTest(TestCase):
    """Test the system report figures"""

    def setUp(self):
        self.account = make_account(name='Dana')

    def test_empty_report(self):
        report = reports.system_report_data()

        self.assertEqual(report['summary']['totalRevenue'], Decimal('0'))
        self.assertEqual(report['summary']['averageBill'], Decimal('0'))
        self.assertEqual(len(report['monthlyRevenue']), 12)
        self.assertTrue(all(m['revenue'] == 0 for m in report['monthlyRevenue']))
        self.assertEqual(report['statusDistribution'], [])
        self.assertEqual(report['allBills'], [])

    def test_totals_and_distribution(self):
        _, paid = services.record_meter_reading(self.account.pk, 100)     # 150.00
        _, late = services.record_meter_reading(self.account.pk, 120)     # 30.00
        _, pending = services.record_meter_reading(self.account.pk, 130)  # 15.00
        services.pay_bill(paid.pk)
        services.approve_payment(paid.pk)
        make_past_due(late)
        services.pay_bill(pending.pk)

        report = reports.system_report_data()
        summary = report['summary']

        self.assertEqual(summary['totalRevenue'], Decimal('150.00'))
        self.assertEqual(summary['totalOutstanding'], Decimal('30.00'))
        self.assertEqual(summary['totalConsumption'], Decimal('130.00'))
        self.assertEqual(summary['averageBill'], Decimal('60.00'))
        self.assertEqual(
            {row['status']: row['count'] for row in report['statusDistribution']},
            {Bill.STATUS_PAID: 1, Bill.STATUS_OVERDUE: 1, Bill.STATUS_PENDING_APPROVAL: 1},
        )
        self.assertEqual([b.pk for b in report['allBills']], [pending.pk, late.pk, paid.pk])
        self.assertEqual(report['allBills'][0].account.name, 'Dana')

    def test_monthly_revenue_keyed_by_payment_month(self):
        _, recent = services.record_meter_reading(self.account.pk, 100)  # 150.00
        _, old = services.record_meter_reading(self.account.pk, 110)     # 15.00
        for bill in (recent, old):
            services.pay_bill(bill.pk)
            services.approve_payment(bill.pk)
        Bill.objects.filter(pk=old.pk).update(payment_date=timezone.now() - timedelta(days=400))

        now = timezone.now()
        series = reports.system_report_data(now)['monthlyRevenue']

        self.assertEqual(len(series), 12)
        self.assertEqual(series[-1]['month'], timezone.localtime(now).strftime('%Y-%m'))
        self.assertEqual(series[-1]['revenue'], Decimal('150.00'))
        self.assertEqual(sum(m['revenue'] for m in series), Decimal('150.00'))
