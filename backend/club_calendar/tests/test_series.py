"""
Test cases for series persistence: atomic creation and series-aware
update/delete.
"""

from datetime import date
from unittest import mock
from django.core.exceptions import ValidationError
from django.db import DatabaseError
from django.db.models.query import QuerySet
from django.test import TestCase
from club_calendar.models import Club, Event
from club_calendar.services import series
from club_calendar.services.recurrence import EventTemplate, RecurrenceRule


class SeriesCreationTest(TestCase):
    """Test creating single events and expanded series"""

    def setUp(self):
        self.club = Club.objects.create(name="Robotics Club")
        self.base = EventTemplate(
            title="Build Session",
            date=date(2024, 1, 1),
            club_id=self.club.pk,
            time="15:30",
        )

    def test_single_event(self):
        """Test an event without a rule has no group id"""
        created = series.create_event(self.base)

        self.assertEqual(len(created), 1)
        self.assertIsNone(created[0].recurrence_group_id)
        self.assertEqual(created[0].recurrence_frequency, '')
        self.assertEqual(Event.objects.count(), 1)

    def test_recurring_series(self):
        """Test a rule persists every occurrence with one group id"""
        created = series.create_event(self.base, RecurrenceRule(frequency='weekly', count=4))

        self.assertEqual(len(created), 4)
        self.assertEqual(Event.objects.count(), 4)
        self.assertTrue(all(event.pk for event in created))
        group_ids = set(Event.objects.values_list('recurrence_group_id', flat=True))
        self.assertEqual(len(group_ids), 1)
        self.assertEqual(
            [event.date for event in created],
            [date(2024, 1, 1), date(2024, 1, 8), date(2024, 1, 15), date(2024, 1, 22)]
        )

    def test_invalid_rule_writes_nothing(self):
        """Test validation errors happen before anything is persisted"""
        with self.assertRaises(ValidationError):
            series.create_event(self.base, RecurrenceRule(frequency='weekly', interval=0))
        self.assertEqual(Event.objects.count(), 0)

    def test_failed_insert_is_reported(self):
        """Test a failure on a later insert batch rolls back the batches already written"""
        real_insert = QuerySet._insert
        inserted_batches = []

        def insert_then_fail(queryset, *args, **kwargs):
            inserted_batches.append(args)
            if len(inserted_batches) == 2:
                raise DatabaseError("disk full")
            return real_insert(queryset, *args, **kwargs)

        with mock.patch.object(series, 'INSERT_BATCH_SIZE', 2), \
                mock.patch.object(QuerySet, '_insert', autospec=True, side_effect=insert_then_fail):
            with self.assertRaises(DatabaseError):
                series.create_event(self.base, RecurrenceRule(frequency='daily', count=5))

        self.assertEqual(len(inserted_batches), 2)
        self.assertEqual(Event.objects.count(), 0)


class SeriesMutationTest(TestCase):
    """Test series-aware delete and update"""

    def setUp(self):
        self.club = Club.objects.create(name="Debate Club")
        self.other_club = Club.objects.create(name="Chess Club")
        base = EventTemplate(title="Practice", date=date(2024, 1, 1), club_id=self.club.pk, location="Room 1")
        self.series_a = series.create_event(base, RecurrenceRule(frequency='weekly', count=3))
        self.series_b = series.create_event(base, RecurrenceRule(frequency='weekly', count=2))
        self.single = series.create_event(
            EventTemplate(title="Fair", date=date(2024, 1, 3), club_id=self.club.pk)
        )[0]

    def test_delete_series(self):
        """Test deleting a series removes exactly the rows sharing its group id"""
        deleted = series.delete_series(self.series_a[1].pk)

        self.assertEqual(deleted, 3)
        group_a = self.series_a[0].recurrence_group_id
        self.assertFalse(Event.objects.filter(recurrence_group_id=group_a).exists())
        self.assertEqual(Event.objects.count(), 3)
        self.assertTrue(Event.objects.filter(pk=self.single.pk).exists())

    def test_delete_series_without_group(self):
        """Test deleting the series of a single event removes only that event"""
        deleted = series.delete_series(self.single.pk)

        self.assertEqual(deleted, 1)
        self.assertEqual(Event.objects.count(), 5)

    def test_delete_single_keeps_siblings(self):
        """Test deleting one occurrence never removes its siblings"""
        deleted = series.delete_single(self.series_a[0].pk)

        self.assertEqual(deleted, 1)
        group_a = self.series_a[0].recurrence_group_id
        self.assertEqual(Event.objects.filter(recurrence_group_id=group_a).count(), 2)

    def test_delete_many_unknown_group(self):
        """Test deleting an unknown group id is a no-op"""
        self.assertEqual(series.delete_many('rec-does-not-exist'), 0)
        self.assertEqual(Event.objects.count(), 6)

    def test_delete_unknown_event(self):
        with self.assertRaises(Event.DoesNotExist):
            series.delete_series(999999)

    def test_update_single(self):
        """Test updating one occurrence leaves sibling dates and ids alone"""
        target = self.series_a[1]
        series.update_single(target.pk, {'title': 'Moved practice', 'date': date(2024, 1, 9)})

        target.refresh_from_db()
        self.assertEqual(target.title, 'Moved practice')
        self.assertEqual(target.date, date(2024, 1, 9))
        self.assertEqual(target.recurrence_group_id, self.series_a[0].recurrence_group_id)

        for sibling in (self.series_a[0], self.series_a[2]):
            before = (sibling.pk, sibling.date, sibling.title, sibling.recurrence_group_id)
            sibling.refresh_from_db()
            self.assertEqual((sibling.pk, sibling.date, sibling.title, sibling.recurrence_group_id), before)

    def test_update_single_ignores_group_id(self):
        target = self.series_a[0]
        series.update_single(target.pk, {'recurrence_group_id': 'rec-other'})
        target.refresh_from_db()
        self.assertEqual(target.recurrence_group_id, self.series_a[1].recurrence_group_id)

    def test_update_series(self):
        """Test a series update changes shared fields on every occurrence only"""
        updated = series.update_series(
            self.series_a[0].pk,
            {'title': 'Debate Night', 'time': '18:00', 'club_id': self.other_club.pk, 'date': date(2030, 1, 1)}
        )

        self.assertEqual(len(updated), 3)
        for event, original in zip(updated, self.series_a):
            self.assertEqual(event.title, 'Debate Night')
            self.assertEqual(event.time, '18:00')
            self.assertEqual(event.club_id, self.other_club.pk)
            self.assertEqual(event.date, original.date)

        untouched = Event.objects.filter(recurrence_group_id=self.series_b[0].recurrence_group_id)
        self.assertTrue(all(event.title == 'Practice' for event in untouched))
        self.single.refresh_from_db()
        self.assertEqual(self.single.title, 'Fair')

    def test_club_delete_cascades(self):
        """Test deleting a club removes its events"""
        self.club.delete()
        self.assertEqual(Event.objects.count(), 0)
