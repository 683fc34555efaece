from io import StringIO

from django.core.management import call_command
from django.test import TestCase, override_settings

from billing import services
from billing.models import Bill

from .helpers import FAST_HASHERS, make_account, make_past_due


@override_settings(PASSWORD_HASHERS=FAST_HASHERS)
class SweepOverdueCommandTest(TestCase):
    """Test the sweep_overdue management command"""

    def setUp(self):
        account = make_account()
        _, self.bill = services.record_meter_reading(account.pk, 10)
        make_past_due(self.bill)

    def test_sweep_marks_past_due_bills(self):
        out = StringIO()
        call_command('sweep_overdue', stdout=out)

        self.assertIn('1 bills marked overdue', out.getvalue())
        self.assertEqual(Bill.objects.get(pk=self.bill.pk).status, Bill.STATUS_OVERDUE)

    def test_dry_run_changes_nothing(self):
        out = StringIO()
        call_command('sweep_overdue', '--dry-run', stdout=out)

        self.assertIn('1 unpaid bills are past due', out.getvalue())
        self.assertEqual(Bill.objects.get(pk=self.bill.pk).status, Bill.STATUS_UNPAID)

    def test_as_of_date_before_due_date(self):
        out = StringIO()
        call_command('sweep_overdue', '--as-of', '2000-01-01', stdout=out)

        self.assertIn('0 bills marked overdue', out.getvalue())
        self.assertEqual(Bill.objects.get(pk=self.bill.pk).status, Bill.STATUS_UNPAID)
