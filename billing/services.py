import logging
from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.conf import settings
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from .exceptions import NotFoundError, ValidationError
from .models import Account, Announcement, Bill, MeterReading, PriceSetting

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')

# Stored precision of prices and readings; finer input is rounded half up.
PRICE_STEP   = Decimal('0.000001')
READING_STEP = Decimal('0.0001')
MAX_INTEGER_DIGITS = 12


def to_decimal(value, field='value'):
    """Coerce a JSON number or numeric string to a finite Decimal."""
    if isinstance(value, bool) or value is None:
        raise ValidationError(f'{field} must be a number.')
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f'{field} must be a number.')
    if not number.is_finite():
        raise ValidationError(f'{field} must be a finite number.')
    if number.adjusted() >= MAX_INTEGER_DIGITS:
        raise ValidationError(f'{field} is too large.')
    return number


# ══════════════════════════════════════════════════════════
#   FUNCTION 1 - get_water_price / set_water_price
#   The single price-per-unit setting; bills keep their own snapshot
# ══════════════════════════════════════════════════════════
def get_water_price():
    setting = PriceSetting.objects.filter(key=PriceSetting.WATER_PRICE_KEY).first()
    if setting is None:
        return Decimal(str(getattr(settings, 'WATER_PRICE_DEFAULT', '1.5')))
    return setting.value


@transaction.atomic
def set_water_price(value):
    price = to_decimal(value, 'Price').quantize(PRICE_STEP, rounding=ROUND_HALF_UP)
    if price < 0:
        raise ValidationError('Invalid price provided. Price must be a non-negative number.')

    updated = PriceSetting.objects.filter(
        key = PriceSetting.WATER_PRICE_KEY,
    ).update(value=price, version=F('version') + 1, updated_at=timezone.now())
    if not updated:
        PriceSetting.objects.create(key=PriceSetting.WATER_PRICE_KEY, value=price)

    logger.info(f'Water price set to {price}')
    return price


# ══════════════════════════════════════════════════════════
#   FUNCTION 2 - issue_bill
#   Turns a recorded reading into an unpaid bill
#   Args: MeterReading, price snapshot (Decimal)
# ══════════════════════════════════════════════════════════
def issue_bill(reading, price):
    cycle_days = getattr(settings, 'BILLING_CYCLE_DAYS', 30)
    issue_date = reading.date

    bill = Bill.objects.create(
        account      = reading.account,
        reading      = reading,
        amount       = (reading.consumption * price).quantize(CENT, rounding=ROUND_HALF_UP),
        consumption  = reading.consumption,
        proof_image  = reading.proof_image,
        issue_date   = issue_date,
        due_date     = issue_date + timedelta(days=cycle_days),
        status       = Bill.STATUS_UNPAID,
    )
    logger.info(f'Bill {bill.pk} issued for account {bill.account_id}: '
                f'{bill.consumption} x {price} = {bill.amount}')
    return bill


# ══════════════════════════════════════════════════════════
#   FUNCTION 3 - record_meter_reading
#   Validates a new absolute reading, stores it and bills it
#   Returns: (MeterReading, Bill)
# ══════════════════════════════════════════════════════════
@transaction.atomic
def record_meter_reading(account_id, new_value, proof_image=None):
    value = to_decimal(new_value, 'Reading').quantize(READING_STEP, rounding=ROUND_HALF_UP)
    if value < 0:
        raise ValidationError('A meter reading cannot be negative.')

    # Lock the account so two readings for it cannot interleave.
    account = Account.objects.select_for_update().filter(pk=account_id).first()
    if account is None:
        raise NotFoundError('User not found.')

    last = account.meter_readings.order_by('-date', '-id').first()
    previous = last.reading if last is not None else Decimal('0')

    if value < previous:
        raise ValidationError('The new reading cannot be lower than the previous reading.')

    reading = MeterReading.objects.create(
        account          = account,
        reading          = value,
        date             = timezone.now(),
        previous_reading = previous,
        consumption      = value - previous,
        proof_image      = proof_image or None,
    )
    bill = issue_bill(reading, get_water_price())
    return reading, bill


def get_readings_for_account(account_id):
    get_account_or_404(account_id)
    return list(MeterReading.objects.filter(account_id=account_id).order_by('-date', '-id'))


# ══════════════════════════════════════════════════════════
#   FUNCTION 4 - Bill status machine
#   unpaid -> overdue (lazy), unpaid/overdue -> pending_approval,
#   pending_approval -> paid | unpaid
# ══════════════════════════════════════════════════════════
def derive_effective_status(bill, now):
    if bill.status == Bill.STATUS_UNPAID and bill.due_date < now:
        return Bill.STATUS_OVERDUE
    return bill.status


def refresh_bill_status(bill, now=None):
    """Persist the lazy overdue transition for one bill, if it applies."""
    now = now or timezone.now()
    if derive_effective_status(bill, now) == bill.status:
        return bill
    moved = Bill.objects.filter(
        pk           = bill.pk,
        status       = Bill.STATUS_UNPAID,
        due_date__lt = now,
    ).update(status=Bill.STATUS_OVERDUE)
    if moved:
        logger.info(f'Bill {bill.pk} is past due, marked overdue')
    bill.refresh_from_db(fields=['status', 'payment_date'])
    return bill


def refresh_bill_statuses(bills, now=None):
    now = now or timezone.now()
    return [refresh_bill_status(bill, now) for bill in bills]


def sweep_overdue_bills(now=None):
    now = now or timezone.now()
    moved = Bill.objects.filter(
        status       = Bill.STATUS_UNPAID,
        due_date__lt = now,
    ).update(status=Bill.STATUS_OVERDUE)
    if moved:
        logger.info(f'Overdue sweep moved {moved} bill(s) to overdue')
    return moved


def _transition(bill_id, from_statuses, error_message, **changes):
    with transaction.atomic():
        moved = Bill.objects.filter(
            pk         = bill_id,
            status__in = from_statuses,
        ).update(**changes)
        if not moved:
            raise NotFoundError(error_message)
        return Bill.objects.get(pk=bill_id)


def pay_bill(bill_id):
    bill = _transition(
        bill_id, Bill.OUTSTANDING_STATUSES,
        'Bill not found or not payable.',
        status=Bill.STATUS_PENDING_APPROVAL, payment_date=None,
    )
    logger.info(f'Payment submitted for bill {bill.pk}, awaiting approval')
    return bill


def approve_payment(bill_id):
    bill = _transition(
        bill_id, [Bill.STATUS_PENDING_APPROVAL],
        'Bill not found or not pending review.',
        status=Bill.STATUS_PAID, payment_date=timezone.now(),
    )
    logger.info(f'Payment approved for bill {bill.pk}')
    return bill


def reject_payment(bill_id):
    bill = _transition(
        bill_id, [Bill.STATUS_PENDING_APPROVAL],
        'Bill not found or not pending review.',
        status=Bill.STATUS_UNPAID, payment_date=None,
    )
    logger.info(f'Payment rejected for bill {bill.pk}')
    return refresh_bill_status(bill)


# ══════════════════════════════════════════════════════════
#   FUNCTION 5 - Bill queries (all reads go through the lazy refresh)
# ══════════════════════════════════════════════════════════
def get_bills_for_account(account_id, now=None):
    get_account_or_404(account_id)
    bills = Bill.objects.filter(account_id=account_id).order_by('-issue_date', '-id')
    return refresh_bill_statuses(bills, now)


def get_latest_bill_for_account(account_id, now=None):
    bills = get_bills_for_account(account_id, now)
    return bills[0] if bills else None


def get_all_pending_bills():
    return list(
        Bill.objects.filter(status=Bill.STATUS_PENDING_APPROVAL)
        .select_related('account')
        .order_by('issue_date', 'id')
    )


def get_account_or_404(account_id):
    account = Account.objects.filter(pk=account_id).first()
    if account is None:
        raise NotFoundError('User not found.')
    return account


# ══════════════════════════════════════════════════════════
#   FUNCTION 6 - Announcements
# ══════════════════════════════════════════════════════════
def get_all_announcements():
    return list(Announcement.objects.order_by('-date', '-id'))


def add_announcement(message):
    message = (message or '').strip()
    if not message:
        raise ValidationError('The announcement message cannot be empty.')
    announcement = Announcement.objects.create(message=message, date=timezone.now())
    logger.info(f'Announcement {announcement.pk} published')
    return announcement
