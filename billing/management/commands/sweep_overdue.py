from django.core.management.base import BaseCommand
from django.utils import timezone
from billing.models import Bill
from billing.services import sweep_overdue_bills
from datetime import datetime

class Command(BaseCommand):
    help = 'Mark every unpaid bill whose due date has passed as overdue'

    def add_arguments(self, parser):
        parser.add_argument('--as-of', type=str,
                            help='YYYY-MM-DD; treat this date (midnight) as now')
        parser.add_argument('--dry-run', action='store_true',
                            help='Only count the bills that would be moved')

    def handle(self, *args, **options):
        if options['as_of']:
            now = timezone.make_aware(datetime.fromisoformat(options['as_of']))
        else:
            now = timezone.now()

        if options['dry_run']:
            count = Bill.objects.filter(
                status       = Bill.STATUS_UNPAID,
                due_date__lt = now,
            ).count()
            self.stdout.write(self.style.WARNING(
                f'Dry run: {count} unpaid bills are past due as of {now:%Y-%m-%d %H:%M}.'
            ))
            return

        moved = sweep_overdue_bills(now)
        self.stdout.write(self.style.SUCCESS(
            f'Done. {moved} bills marked overdue.'
        ))
