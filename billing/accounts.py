"""
Account directory: registration, login, credentials and profile edits.

Passwords are stored as salted hashes through Django's configured
password hashers; raw passwords never reach the database.
"""
import logging
import secrets
import string

from django.conf import settings
from django.contrib.auth.hashers import check_password, make_password
from django.db import IntegrityError, transaction

from .exceptions import AuthError, ConflictError, NotFoundError, ValidationError
from .models import Account, MeterSequence

logger = logging.getLogger(__name__)

METER_SEQUENCE = 'meter_id'
PROFILE_FIELDS = ('name', 'address', 'phone_number', 'meter_id')


def get_all_accounts():
    return list(Account.objects.order_by('created_at', 'id'))


def get_account(account_id):
    account = Account.objects.filter(pk=account_id).first()
    if account is None:
        raise NotFoundError('User not found.')
    return account


def format_meter_id(number):
    prefix = getattr(settings, 'METER_ID_PREFIX', 'WTR')
    digits = getattr(settings, 'METER_ID_DIGITS', 3)
    return f'{prefix}{number:0{digits}d}'


def next_meter_id():
    """
    Draw the next free meter ID from the locked counter row.

    Meter IDs can also be set by hand (profile edits, the admin site, seed
    data), so numbers already taken are skipped. Call inside a transaction.
    """
    MeterSequence.objects.get_or_create(name=METER_SEQUENCE)
    sequence = MeterSequence.objects.select_for_update().get(name=METER_SEQUENCE)

    number = sequence.last_value + 1
    while Account.objects.filter(meter_id=format_meter_id(number)).exists():
        number += 1

    sequence.last_value = number
    sequence.save(update_fields=['last_value'])
    return format_meter_id(number)


def find_conflict(phone_number=None, meter_id=None, exclude_pk=None):
    """Return a ConflictError naming the unique field another account already holds, or None."""
    others = Account.objects.exclude(pk=exclude_pk) if exclude_pk else Account.objects.all()
    if phone_number and others.filter(phone_number=phone_number).exists():
        return ConflictError('A user with this phone number is already registered.')
    if meter_id and others.filter(meter_id=meter_id).exists():
        return ConflictError('This meter ID is already assigned to another user.')
    return None


def register_account(name, address, phone_number, password):
    if not password:
        raise ValidationError('A password is required.')
    if Account.objects.filter(phone_number=phone_number).exists():
        raise ConflictError('A user with this phone number is already registered.')

    meter_id = None
    try:
        with transaction.atomic():
            meter_id = next_meter_id()
            account = Account.objects.create(
                name         = name,
                address      = address,
                phone_number = phone_number,
                meter_id     = meter_id,
                role         = Account.ROLE_USER,
                password     = make_password(password),
            )
    except IntegrityError:
        # Lost the race against a concurrent registration or profile edit.
        raise (find_conflict(phone_number, meter_id)
               or ConflictError('The account conflicts with another user, please retry.'))

    logger.info(f'Registered account {account.pk} with meter {account.meter_id}')
    return account


def login_account(phone_number, password):
    account = Account.objects.filter(phone_number=phone_number).first()
    if account is None:
        # Hash anyway so an unknown phone takes as long as a wrong password.
        make_password(password)
        raise AuthError('Invalid phone number or password.')
    if not check_password(password, account.password):
        raise AuthError('Invalid phone number or password.')
    return account


def _set_password(account, raw_password):
    account.password = make_password(raw_password)
    account.save(update_fields=['password'])


@transaction.atomic
def change_password(account_id, current_password, new_password):
    account = get_account(account_id)
    if not check_password(current_password, account.password):
        raise AuthError('The current password is incorrect.')
    if not new_password:
        raise ValidationError('A new password is required.')
    _set_password(account, new_password)
    return account


@transaction.atomic
def forgot_password_reset(phone_number):
    account = Account.objects.select_for_update().filter(phone_number=phone_number).first()
    if account is None:
        raise NotFoundError('No user found with this phone number.')

    length = getattr(settings, 'TEMP_PASSWORD_LENGTH', 8)
    alphabet = string.ascii_lowercase + string.digits
    temp_password = ''.join(secrets.choice(alphabet) for _ in range(length))
    _set_password(account, temp_password)

    logger.info(f'Temporary password issued for account {account.pk}')
    return account, temp_password


@transaction.atomic
def reset_password_by_admin(account_id, new_password):
    account = Account.objects.select_for_update().filter(pk=account_id).first()
    if account is None:
        raise NotFoundError('User not found.')
    if account.is_super_admin:
        raise AuthError('The password of a system administrator cannot be reset.')
    if not new_password:
        raise ValidationError('A new password is required.')
    _set_password(account, new_password)
    logger.info(f'Password reset by an administrator for account {account.pk}')
    return account


@transaction.atomic
def update_account_role(account_id, role):
    valid_roles = dict(Account.ROLE_CHOICES)
    if role not in valid_roles:
        raise ValidationError(f'Unknown role: {role}.')
    if role == Account.ROLE_SUPER_ADMIN:
        raise AuthError('The system administrator role cannot be granted.')

    account = Account.objects.select_for_update().filter(pk=account_id).first()
    if account is None:
        raise NotFoundError('User not found.')
    if account.is_super_admin:
        raise AuthError('The role of the system administrator cannot be changed.')

    account.role = role
    account.save(update_fields=['role'])
    logger.info(f'Account {account.pk} role set to {role}')
    return account


def update_account(account_id, **changes):
    """Merge the given profile fields onto the account; omitted fields stay."""
    changes = {k: v for k, v in changes.items() if k in PROFILE_FIELDS and v is not None}
    phone_number = changes.get('phone_number')
    meter_id = changes.get('meter_id')

    try:
        with transaction.atomic():
            account = Account.objects.select_for_update().filter(pk=account_id).first()
            if account is None:
                raise NotFoundError('User not found.')
            conflict = find_conflict(phone_number, meter_id, exclude_pk=account.pk)
            if conflict is not None:
                raise conflict
            for field, value in changes.items():
                setattr(account, field, value)
            if changes:
                account.save(update_fields=list(changes))
    except IntegrityError:
        raise (find_conflict(phone_number, meter_id, exclude_pk=account_id)
               or ConflictError('The profile conflicts with another user, please retry.'))

    return account


@transaction.atomic
def sync_meter_sequence():
    """Move the meter-ID counter past any numbered meter IDs already assigned."""
    MeterSequence.objects.get_or_create(name=METER_SEQUENCE)
    sequence = MeterSequence.objects.select_for_update().get(name=METER_SEQUENCE)

    prefix = getattr(settings, 'METER_ID_PREFIX', 'WTR')
    highest = sequence.last_value
    for meter_id in Account.objects.filter(
            meter_id__startswith=prefix).values_list('meter_id', flat=True):
        suffix = meter_id[len(prefix):]
        if suffix.isdigit():
            highest = max(highest, int(suffix))

    if highest != sequence.last_value:
        sequence.last_value = highest
        sequence.save(update_fields=['last_value'])
    return highest
