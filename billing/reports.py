import logging
from datetime import datetime
from decimal import Decimal

from django.db import transaction
from django.db.models import Count, Q, Sum
from django.db.models.functions import TruncMonth
from django.utils import timezone

from .models import Bill
from .services import sweep_overdue_bills

logger = logging.getLogger(__name__)

REVENUE_MONTHS = 12


# ══════════════════════════════════════════════════════════
#   REPORT 1 - invoice_summary
#   Totals and counts per collapsed status bucket
# ══════════════════════════════════════════════════════════
@transaction.atomic
def invoice_summary(now=None):
    sweep_overdue_bills(now)

    summary = {
        'paid':    {'total': Decimal('0'), 'count': 0},
        'unpaid':  {'total': Decimal('0'), 'count': 0},
        'pending': {'total': Decimal('0'), 'count': 0},
    }
    buckets = {
        Bill.STATUS_PAID:             'paid',
        Bill.STATUS_UNPAID:           'unpaid',
        Bill.STATUS_OVERDUE:          'unpaid',
        Bill.STATUS_PENDING_APPROVAL: 'pending',
    }

    rows = Bill.objects.order_by().values('status').annotate(
        count = Count('id'),
        total = Sum('amount'),
    )
    for row in rows:
        bucket = summary[buckets[row['status']]]
        bucket['total'] += row['total'] or Decimal('0')
        bucket['count'] += row['count']
    return summary


def month_window(now, months=REVENUE_MONTHS):
    """First day of each of the trailing `months` calendar months, oldest first."""
    local = timezone.localtime(now)
    starts = []
    year, month = local.year, local.month
    for _ in range(months):
        starts.append(datetime(year, month, 1, tzinfo=local.tzinfo))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(starts))


def monthly_revenue(now):
    months = month_window(now)
    by_month = {}
    rows = (Bill.objects
            .filter(status=Bill.STATUS_PAID, payment_date__gte=months[0])
            .annotate(month=TruncMonth('payment_date'))
            .order_by()
            .values('month')
            .annotate(revenue=Sum('amount')))
    for row in rows:
        month = row['month']
        if timezone.is_aware(month):
            month = timezone.localtime(month)
        key = month.strftime('%Y-%m')
        by_month[key] = by_month.get(key, Decimal('0')) + (row['revenue'] or Decimal('0'))

    return [
        {'month': start.strftime('%Y-%m'),
         'revenue': by_month.get(start.strftime('%Y-%m'), Decimal('0'))}
        for start in months
    ]


# ══════════════════════════════════════════════════════════
#   REPORT 2 - system_report_data
#   Revenue, outstanding, consumption, trend, distribution, listing
# ══════════════════════════════════════════════════════════
@transaction.atomic
def system_report_data(now=None):
    now = now or timezone.now()
    sweep_overdue_bills(now)

    totals = Bill.objects.aggregate(
        total_revenue     = Sum('amount', filter=Q(status=Bill.STATUS_PAID)),
        total_outstanding = Sum('amount', filter=Q(status__in=Bill.OUTSTANDING_STATUSES)),
        total_consumption = Sum('consumption'),
        bill_count        = Count('id'),
    )
    revenue     = totals['total_revenue'] or Decimal('0')
    outstanding = totals['total_outstanding'] or Decimal('0')
    consumption = totals['total_consumption'] or Decimal('0')
    bill_count  = totals['bill_count']

    average_bill = Decimal('0')
    if bill_count:
        average_bill = ((revenue + outstanding) / bill_count).quantize(Decimal('0.01'))

    distribution = (Bill.objects.order_by('status')
                    .values('status')
                    .annotate(count=Count('id')))

    all_bills = Bill.objects.select_related('account').order_by('-issue_date', '-id')

    logger.info(f'System report built over {bill_count} bill(s)')
    return {
        'summary': {
            'totalRevenue':     revenue,
            'totalOutstanding': outstanding,
            'totalConsumption': consumption,
            'averageBill':      average_bill,
            'billCount':        bill_count,
        },
        'monthlyRevenue':     monthly_revenue(now),
        'statusDistribution': [
            {'status': row['status'], 'count': row['count']} for row in distribution
        ],
        'allBills': list(all_bills),
    }
