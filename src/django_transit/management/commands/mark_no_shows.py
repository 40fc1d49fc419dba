"""Management command to mark bookings as no-shows after departure."""

from django.core.management.base import BaseCommand

from django_transit.exceptions import TransitError
from django_transit.models import Booking
from django_transit.services import mark_no_show


class Command(BaseCommand):
    help = 'Mark confirmed bookings whose passenger did not board as NO_SHOW'

    def add_arguments(self, parser):
        parser.add_argument(
            'tickets',
            nargs='+',
            help='Ticket numbers of passengers who did not board'
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='List the bookings that would be marked without changing them'
        )

    def handle(self, *args, **options):
        tickets = [t.strip().upper() for t in options['tickets']]

        if options['dry_run']:
            bookings = Booking.objects.filter(ticket_number__in=tickets).order_by('ticket_number')
            for booking in bookings:
                self.stdout.write(f'  - {booking.ticket_number}: {booking.booking_status}')
            self.stdout.write(f'Would mark up to {bookings.count()} bookings as no-show')
            return

        marked = 0
        for ticket in tickets:
            try:
                booking = Booking.objects.get(ticket_number=ticket)
                mark_no_show(booking.pk)
            except Booking.DoesNotExist:
                self.stderr.write(f'{ticket}: not found')
            except TransitError as e:
                self.stderr.write(f'{ticket}: {e.message}')
            else:
                marked += 1

        self.stdout.write(self.style.SUCCESS(f'Marked {marked} bookings as no-show'))
