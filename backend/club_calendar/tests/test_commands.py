"""
Test cases for the seed and clear management commands.
"""

from io import StringIO
from django.core.management import call_command
from django.test import TestCase
from club_calendar.models import Club, Event


class SeedCalendarCommandTest(TestCase):

    def test_seed_creates_courses_clubs_and_series(self):
        out = StringIO()
        call_command('seed_calendar', stdout=out)

        self.assertEqual(Club.objects.filter(kind='course').count(), 8)
        self.assertEqual(Club.objects.filter(kind='club').count(), 3)
        self.assertTrue(all(c.grade == 'DP2' for c in Club.objects.filter(kind='course')))

        groups = set(
            Event.objects.exclude(recurrence_group_id__isnull=True)
            .values_list('recurrence_group_id', flat=True)
        )
        self.assertEqual(len(groups), 3)
        self.assertEqual(Event.objects.filter(recurrence_group_id__isnull=True).count(), 1)
        self.assertEqual(Event.objects.filter(title='Robotics Build Session').count(), 10)
        self.assertIn('Successfully seeded', out.getvalue())

    def test_seed_skips_existing_data(self):
        Club.objects.create(name="Existing")
        out = StringIO()
        call_command('seed_calendar', stdout=out)

        self.assertEqual(Club.objects.count(), 1)
        self.assertIn('Skipping seed', out.getvalue())


class ClearCalendarCommandTest(TestCase):

    def setUp(self):
        call_command('seed_calendar', stdout=StringIO())

    def test_clear_requires_confirm(self):
        out = StringIO()
        call_command('clear_calendar', stdout=out)

        self.assertTrue(Club.objects.exists())
        self.assertIn('--confirm', out.getvalue())

    def test_clear_with_confirm(self):
        out = StringIO()
        call_command('clear_calendar', '--confirm', stdout=out)

        self.assertFalse(Club.objects.exists())
        self.assertFalse(Event.objects.exists())
        self.assertIn('3 recurring series', out.getvalue())
