from decimal import Decimal

from django.db import models
from django.utils import timezone


# ═══════════════════════════════════════════════════════════
#   MODEL 1 - Account  (community member / staff login)
# ═══════════════════════════════════════════════════════════
class Account(models.Model):
    ROLE_USER        = 'user'
    ROLE_ADMIN       = 'admin'
    ROLE_SUPER_ADMIN = 'super_admin'
    ROLE_CHOICES = [
        (ROLE_USER,        'User'),
        (ROLE_ADMIN,       'Admin'),
        (ROLE_SUPER_ADMIN, 'Super Admin'),
    ]

#     ── Identity ──────────────────────────────────────────────
    name            = models.CharField(max_length=200)
    address         = models.TextField(blank=True)
    phone_number    = models.CharField(max_length=20, unique=True)
    meter_id        = models.CharField(max_length=20, unique=True,
                          help_text='Format: WTR + zero-padded ordinal')

#     ── Access ────────────────────────────────────────────────
    role            = models.CharField(max_length=20,
                          choices=ROLE_CHOICES, default=ROLE_USER)
    password        = models.CharField(max_length=128,
                          help_text='Salted hash, never the raw password')
    created_at      = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['created_at', 'id']

    def __str__(self):
        return f'{self.meter_id} - {self.name}'

    @property
    def is_super_admin(self):
        return self.role == self.ROLE_SUPER_ADMIN

    def to_dict(self):
        return {
            'id':          self.pk,
            'name':        self.name,
            'address':     self.address,
            'phoneNumber': self.phone_number,
            'meterId':     self.meter_id,
            'role':        self.role,
            'createdAt':   self.created_at.isoformat(),
        }


# ═══════════════════════════════════════════════════════════
#   MODEL 2 - MeterSequence  (atomic meter-ID counter)
# ═══════════════════════════════════════════════════════════
class MeterSequence(models.Model):
    name        = models.CharField(max_length=50, unique=True)
    last_value  = models.PositiveIntegerField(default=0)

    def __str__(self):
        return f'{self.name} @ {self.last_value}'


# ═══════════════════════════════════════════════════════════
#   MODEL 3 - PriceSetting  (price per consumption unit)
# ═══════════════════════════════════════════════════════════
class PriceSetting(models.Model):
    WATER_PRICE_KEY = 'water_price_per_unit'

    key         = models.CharField(max_length=100, unique=True)
    value       = models.DecimalField(max_digits=18, decimal_places=6)
    version     = models.PositiveIntegerField(default=1)
    updated_at  = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f'{self.key} = {self.value} (v{self.version})'


# ═══════════════════════════════════════════════════════════
#   MODEL 4 - MeterReading  (absolute meter value per account)
# ═══════════════════════════════════════════════════════════
class MeterReading(models.Model):
    account          = models.ForeignKey(Account,
                           on_delete=models.CASCADE,
                           related_name='meter_readings')
    reading          = models.DecimalField(max_digits=16, decimal_places=4)
    date             = models.DateTimeField(default=timezone.now)
    previous_reading = models.DecimalField(max_digits=16, decimal_places=4,
                           default=Decimal('0.00'))
    consumption      = models.DecimalField(max_digits=16, decimal_places=4)
    proof_image      = models.TextField(blank=True, null=True,
                           help_text='Photo of the meter (data URL)')

    class Meta:
        ordering = ['-date', '-id']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(consumption__gte=0),
                name='meter_reading_consumption_non_negative',
            ),
        ]

    def __str__(self):
        return (f'{self.account.meter_id} | '
                f'{self.date:%Y-%m-%d} | '
                f'{self.consumption} units')

    def to_dict(self):
        return {
            'id':              self.pk,
            'userId':          self.account_id,
            'reading':         float(self.reading),
            'date':            self.date.isoformat(),
            'previousReading': float(self.previous_reading),
            'consumption':     float(self.consumption),
            'meterImage':      self.proof_image,
        }


# ═══════════════════════════════════════════════════════════
#   MODEL 5 - Bill  (one per meter reading)
# ═══════════════════════════════════════════════════════════
class Bill(models.Model):
    STATUS_UNPAID           = 'unpaid'
    STATUS_OVERDUE          = 'overdue'
    STATUS_PENDING_APPROVAL = 'pending_approval'
    STATUS_PAID             = 'paid'
    STATUS_CHOICES = [
        (STATUS_UNPAID,           'Unpaid'),
        (STATUS_OVERDUE,          'Overdue'),
        (STATUS_PENDING_APPROVAL, 'Pending Approval'),
        (STATUS_PAID,             'Paid'),
    ]
    OUTSTANDING_STATUSES = [STATUS_UNPAID, STATUS_OVERDUE]

    account          = models.ForeignKey(Account,
                           on_delete=models.CASCADE, related_name='bills')
    reading          = models.OneToOneField(MeterReading,
                           on_delete=models.CASCADE, related_name='bill')

#     ── Charge (snapshot at issue time) ───────────────────────
    amount           = models.DecimalField(max_digits=18, decimal_places=2)
    consumption      = models.DecimalField(max_digits=16, decimal_places=4)
    proof_image      = models.TextField(blank=True, null=True)

#     ── Cycle & Payment ───────────────────────────────────────
    issue_date       = models.DateTimeField()
    due_date         = models.DateTimeField()
    status           = models.CharField(max_length=20,
                           choices=STATUS_CHOICES, default=STATUS_UNPAID,
                           db_index=True)
    payment_date     = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['-issue_date', '-id']

    def __str__(self):
        return (f'Bill {self.account.meter_id} | '
                f'{self.issue_date:%Y-%m-%d} | '
                f'{self.amount} | {self.status}')

    def to_dict(self):
        return {
            'id':          self.pk,
            'userId':      self.account_id,
            'readingId':   self.reading_id,
            'amount':      float(self.amount),
            'issueDate':   self.issue_date.isoformat(),
            'dueDate':     self.due_date.isoformat(),
            'status':      self.status,
            'consumption': float(self.consumption),
            'meterImage':  self.proof_image,
            'paymentDate': self.payment_date.isoformat() if self.payment_date else None,
        }


# ═══════════════════════════════════════════════════════════
#   MODEL 6 - Announcement  (broadcast message)
# ═══════════════════════════════════════════════════════════
class Announcement(models.Model):
    message     = models.TextField()
    date        = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-date', '-id']

    def __str__(self):
        return f'{self.date:%Y-%m-%d} | {self.message[:40]}'

    def to_dict(self):
        return {
            'id':      self.pk,
            'message': self.message,
            'date':    self.date.isoformat(),
        }
