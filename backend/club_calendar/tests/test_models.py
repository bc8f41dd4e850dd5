"""
Test cases for calendar app models.
"""

from datetime import date
from django.test import TestCase, override_settings
from django.core.exceptions import ValidationError
from club_calendar.models import Club, Event


class ClubModelTest(TestCase):
    """Test Club model defaults and behavior"""

    def test_create_club_defaults(self):
        """Test a club gets a slug, default color and is enabled"""
        club = Club.objects.create(name="Robotics Club")
        self.assertEqual(club.slug, "robotics-club")
        self.assertEqual(club.color, "#007AFF")
        self.assertTrue(club.enabled)
        self.assertEqual(club.kind, 'club')
        self.assertEqual(club.grade, '')
        self.assertFalse(club.prioritized)

    @override_settings(CLUB_DEFAULT_COLOR='#123456')
    def test_default_color_setting(self):
        club = Club.objects.create(name="Art Club")
        self.assertEqual(club.color, '#123456')

    def test_course(self):
        """Test courses are clubs tagged with a kind and grade"""
        course = Club.objects.create(name="DP2 HL Mathematics", kind='course', grade='DP2')
        self.assertEqual(course.slug, "dp2-hl-mathematics")
        self.assertEqual(str(course), "DP2 HL Mathematics (Course)")

    def test_explicit_slug_kept(self):
        club = Club.objects.create(name="Chess Club", slug="chess")
        self.assertEqual(club.slug, "chess")

    def test_clean_requires_name(self):
        club = Club(name="   ")
        with self.assertRaises(ValidationError):
            club.clean()

    def test_ordering_by_name(self):
        Club.objects.create(name="Zoology")
        Club.objects.create(name="Astronomy")
        self.assertEqual([c.name for c in Club.objects.all()], ["Astronomy", "Zoology"])


class EventModelTest(TestCase):
    """Test Event model validation and helpers"""

    def setUp(self):
        self.club = Club.objects.create(name="Debate Club")

    def test_single_event(self):
        event = Event.objects.create(title="Tryouts", date=date(2024, 2, 1), club=self.club)
        self.assertIsNone(event.recurrence_group_id)
        self.assertFalse(event.is_recurring)
        self.assertTrue(event.is_all_day)
        self.assertEqual(str(event), "Tryouts on 2024-02-01")

    def test_recurring_flags(self):
        event = Event(title="Practice", date=date(2024, 2, 1), club=self.club, time="16:00",
                      recurrence_group_id="rec-abc")
        self.assertTrue(event.is_recurring)
        self.assertFalse(event.is_all_day)

    def test_interval_validation(self):
        event = Event(title="Practice", date=date(2024, 2, 1), club=self.club, recurrence_interval=0)
        with self.assertRaises(ValidationError):
            event.clean()

    def test_count_validation(self):
        event = Event(title="Practice", date=date(2024, 2, 1), club=self.club, recurrence_count=0)
        with self.assertRaises(ValidationError):
            event.clean()
