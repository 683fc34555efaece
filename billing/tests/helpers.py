from datetime import timedelta

from django.utils import timezone

from billing.accounts import register_account
from billing.models import Bill

FAST_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']


def make_account(phone_number='5551000', name='Test User', password='secret-pass'):
    return register_account(
        name         = name,
        address      = '1 Well Street',
        phone_number = phone_number,
        password     = password,
    )


def make_past_due(bill, days=1):
    """Move a bill's due date into the past without touching its status."""
    Bill.objects.filter(pk=bill.pk).update(due_date=timezone.now() - timedelta(days=days))
    bill.refresh_from_db()
    return bill
