"""
Management command to seed the calendar with sample data.
Creates the default courses, a few clubs and some single and recurring events.
"""

from datetime import timedelta
from dateutil.relativedelta import relativedelta
from django.core.management.base import BaseCommand
from django.utils import timezone
from django.utils.text import slugify
from club_calendar.models import Club
from club_calendar.services.recurrence import EventTemplate, RecurrenceRule
from club_calendar.services.series import create_event


COURSES = [
    {'name': 'DP2 HL Mathematics', 'grade': 'DP2', 'color': '#3b82f6'},
    {'name': 'DP2 HL English', 'grade': 'DP2', 'color': '#ef4444'},
    {'name': 'DP2 HL Economics', 'grade': 'DP2', 'color': '#10b981'},
    {'name': 'DP2 TOK', 'grade': 'DP2', 'color': '#f59e0b'},
    {'name': 'DP2 SL French', 'grade': 'DP2', 'color': '#8b5cf6'},
    {'name': 'DP2 HL Biology', 'grade': 'DP2', 'color': '#06b6d4'},
    {'name': 'DP2 HL Chemistry', 'grade': 'DP2', 'color': '#ec4899'},
    {'name': 'DP2 HL Psychology', 'grade': 'DP2', 'color': '#f97316'},
]

CLUBS = [
    {'name': 'Robotics Club', 'color': '#007AFF', 'prioritized': True},
    {'name': 'Debate Club', 'color': '#34C759'},
    {'name': 'Chess Club', 'color': '#AF52DE'},
]


class Command(BaseCommand):
    help = 'Seed the calendar with sample courses, clubs and events'

    def handle(self, *args, **options):
        # Check if data already exists
        if Club.objects.exists():
            self.stdout.write(
                self.style.WARNING(
                    f'Calendar already has {Club.objects.count()} clubs. '
                    'Skipping seed to avoid duplicates. Use clear_calendar command first if needed.'
                )
            )
            return

        self.stdout.write('Seeding calendar data...')

        for course in COURSES:
            Club.objects.create(kind='course', slug=slugify(course['name']), **course)
            self.stdout.write(f"Created course {course['name']}")

        clubs = {}
        for club in CLUBS:
            clubs[club['name']] = Club.objects.create(kind='club', **club)
            self.stdout.write(f"Created club {club['name']}")

        today = timezone.localdate()
        # Next Monday (today when it is Monday)
        next_monday = today + timedelta(days=(7 - today.weekday()) % 7)

        # 1. Weekly robotics meeting for ten weeks
        meetings = create_event(
            EventTemplate(
                title='Robotics Build Session',
                date=next_monday,
                club_id=clubs['Robotics Club'].pk,
                time='15:30',
                location='Lab 2',
                description='Weekly build and testing session',
            ),
            RecurrenceRule(frequency='weekly', interval=1, count=10),
        )
        self.stdout.write(f'Created weekly Robotics series with {len(meetings)} occurrences from {next_monday}')

        # 2. Biweekly debate practice until the end of next month
        until = today + relativedelta(months=1, day=31)
        practices = create_event(
            EventTemplate(
                title='Debate Practice',
                date=next_monday + timedelta(days=2),
                club_id=clubs['Debate Club'].pk,
                time='16:00',
                location='Room 104',
            ),
            RecurrenceRule(frequency='biweekly', until=until),
        )
        self.stdout.write(f'Created biweekly Debate series with {len(practices)} occurrences until {until}')

        # 3. Monthly chess tournament
        tournaments = create_event(
            EventTemplate(
                title='Chess Tournament',
                date=today.replace(day=1) + timedelta(days=27),
                club_id=clubs['Chess Club'].pk,
                location='Library',
            ),
            RecurrenceRule(frequency='monthly', count=6),
        )
        self.stdout.write(f'Created monthly Chess series with {len(tournaments)} occurrences')

        # 4. One-off event
        create_event(
            EventTemplate(
                title='Club Fair',
                date=today + timedelta(days=3),
                club_id=clubs['Robotics Club'].pk,
                time='12:00',
                location='Main Hall',
                description='Meet every club on campus',
            )
        )
        self.stdout.write('Created one-off Club Fair')

        self.stdout.write(
            self.style.SUCCESS(
                f'Successfully seeded calendar with {Club.objects.count()} clubs and courses '
                f'and {sum(c.events.count() for c in Club.objects.all())} events'
            )
        )
