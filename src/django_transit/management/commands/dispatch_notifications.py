"""Management command to deliver due notifications from the outbox."""

from django.core.management.base import BaseCommand
from django.utils import timezone

from django_transit.models import Notification, NotificationStatus
from django_transit.services.notifications import dispatch_due_notifications


class Command(BaseCommand):
    help = 'Deliver pending notifications whose next attempt is due'

    def add_arguments(self, parser):
        parser.add_argument(
            '--limit',
            type=int,
            default=100,
            help='Maximum notifications to attempt in this run (default: 100)'
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show how many notifications are due without sending them'
        )

    def handle(self, *args, **options):
        limit = options['limit']

        if options['dry_run']:
            due = Notification.objects.filter(
                status=NotificationStatus.PENDING,
                next_attempt_at__lte=timezone.now(),
            ).count()
            self.stdout.write(f'{due} notifications due (would attempt {min(due, limit)})')
            return

        counts = dispatch_due_notifications(limit=limit)
        self.stdout.write(
            self.style.SUCCESS(
                f"Sent {counts['sent']}, retrying {counts['retrying']}, failed {counts['failed']}"
            )
        )
