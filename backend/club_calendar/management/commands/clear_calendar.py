"""
Management command to clear all calendar data (clubs and events)
"""

from django.core.management.base import BaseCommand
from club_calendar.models import Club, Event


class Command(BaseCommand):
    help = 'Clear all calendar data (clubs, courses and events)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--confirm',
            action='store_true',
            help='Confirm that you want to delete all data',
        )

    def handle(self, *args, **options):
        if not options['confirm']:
            self.stdout.write(
                self.style.WARNING(
                    'This will delete ALL calendar data. Use --confirm to proceed.'
                )
            )
            return

        event_count = Event.objects.count()
        series_count = (
            Event.objects.exclude(recurrence_group_id__isnull=True)
            .exclude(recurrence_group_id='')
            .order_by().values('recurrence_group_id').distinct().count()
        )
        club_count = Club.objects.count()

        Event.objects.all().delete()
        Club.objects.all().delete()

        self.stdout.write(
            self.style.SUCCESS(
                f'Successfully cleared {club_count} clubs and {event_count} events '
                f'({series_count} recurring series)'
            )
        )
