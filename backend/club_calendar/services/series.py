"""
Persistence of events and recurring series.
Creates expanded series atomically and handles series-aware update/delete.
"""

import logging
from typing import Iterable, List, Optional

from django.db import transaction

from ..models import Event
from .recurrence import EventOccurrence, EventTemplate, RecurrenceRule, expand

logger = logging.getLogger(__name__)

# Fields a series-wide update may touch. Dates and the group id stay per row.
SERIES_FIELDS = ['title', 'time', 'description', 'location', 'club_id']

INSERT_BATCH_SIZE = 100


def create_many(records: Iterable[EventOccurrence]) -> List[Event]:
    """Insert all occurrences as one atomic unit."""
    rows = [Event(**record.as_model_kwargs()) for record in records]
    with transaction.atomic():
        Event.objects.bulk_create(rows, batch_size=INSERT_BATCH_SIZE)
    # Not every backend sets primary keys on bulk_create; reload by group.
    group_ids = {row.recurrence_group_id for row in rows}
    return list(Event.objects.filter(recurrence_group_id__in=group_ids).order_by('date', 'id'))


def find_by_id(event_id) -> Event:
    return Event.objects.get(pk=event_id)


def delete_many(group_id: str) -> int:
    """Delete every row of a series. Unknown group ids delete nothing."""
    deleted, _ = Event.objects.filter(recurrence_group_id=group_id).delete()
    return deleted


def delete_one(event_id) -> int:
    deleted, _ = Event.objects.filter(pk=event_id).delete()
    return deleted


def create_event(base: EventTemplate, rule: Optional[RecurrenceRule] = None) -> List[Event]:
    """
    Create a single event, or expand ``base`` with ``rule`` and persist the
    whole series.

    Returns:
        List of created Event rows (one row when ``rule`` is None)

    Raises:
        ValidationError: the rule is invalid; nothing is written.
    """
    if rule is None:
        event = Event.objects.create(
            title=base.title,
            date=base.date,
            club_id=base.club_id,
            time=base.time,
            description=base.description,
            location=base.location,
        )
        return [event]

    occurrences = expand(base, rule)
    created = create_many(occurrences)
    if occurrences:
        logger.info(
            "Created series %s: %d '%s' occurrences from %s",
            occurrences[0].recurrence_group_id, len(created), base.title, base.date,
        )
    return created


def series_of(event: Event):
    """Queryset of the event's series, or just the event when it has none."""
    if event.recurrence_group_id:
        return Event.objects.filter(recurrence_group_id=event.recurrence_group_id)
    return Event.objects.filter(pk=event.pk)


def delete_series(event_id) -> int:
    """
    Delete every occurrence sharing the event's recurrence group id, or only
    the event itself when it is not part of a series.

    Raises:
        Event.DoesNotExist: no event with ``event_id``
    """
    event = find_by_id(event_id)
    if not event.recurrence_group_id:
        return delete_one(event.pk)

    deleted = delete_many(event.recurrence_group_id)
    logger.info("Deleted series %s (%d events)", event.recurrence_group_id, deleted)
    return deleted


def delete_single(event_id) -> int:
    """Delete one occurrence regardless of series membership."""
    event = find_by_id(event_id)
    return delete_one(event.pk)


def update_single(event_id, changes: dict) -> Event:
    """Apply ``changes`` to one row; siblings are never touched."""
    event = find_by_id(event_id)
    for field, value in changes.items():
        if field in ('id', 'recurrence_group_id'):
            continue
        setattr(event, field, value)
    event.save()
    return event


def update_series(event_id, changes: dict) -> List[Event]:
    """
    Apply shared-field ``changes`` to every occurrence of the event's series.
    Fields outside SERIES_FIELDS are ignored.
    """
    event = find_by_id(event_id)
    updates = {field: value for field, value in changes.items() if field in SERIES_FIELDS}
    queryset = series_of(event)
    if updates:
        with transaction.atomic():
            queryset.update(**updates)
    return list(queryset.order_by('date', 'id'))
