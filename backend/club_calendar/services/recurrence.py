"""
Service for expanding a recurrence request into concrete event occurrences.
Every occurrence produced by one call shares a single recurrence group id.
"""

import uuid
from dataclasses import dataclass, replace
from datetime import date
from itertools import islice
from typing import Iterator, List, Optional

from dateutil import rrule
from dateutil.relativedelta import relativedelta
from django.conf import settings
from django.core.exceptions import ValidationError


FREQUENCIES = ['daily', 'weekly', 'biweekly', 'monthly']

# Frequencies driven by a plain rrule; monthly is handled separately so that
# missing month days clamp instead of being skipped.
RRULE_FREQ_MAP = {
    'daily': rrule.DAILY,
    'weekly': rrule.WEEKLY,
    'biweekly': rrule.WEEKLY,
}

OUT_OF_RANGE_MESSAGE = (
    f"Recurrence runs past {date.max.isoformat()}; lower the interval or count, or set an end date"
)


@dataclass(frozen=True)
class EventTemplate:
    """Fields copied onto every occurrence."""
    title: str
    date: Optional[date]
    club_id: Optional[int] = None
    time: str = ''
    description: str = ''
    location: str = ''


@dataclass(frozen=True)
class RecurrenceRule:
    frequency: str
    interval: int = 1
    count: Optional[int] = None
    until: Optional[date] = None


@dataclass(frozen=True)
class EventOccurrence:
    title: str
    date: date
    club_id: Optional[int]
    time: str
    description: str
    location: str
    recurrence_group_id: str
    recurrence_frequency: str
    recurrence_interval: int
    recurrence_count: Optional[int]
    recurrence_until: Optional[date]

    def as_model_kwargs(self) -> dict:
        """Keyword arguments for building an Event row."""
        return {
            'title': self.title,
            'date': self.date,
            'club_id': self.club_id,
            'time': self.time,
            'description': self.description,
            'location': self.location,
            'recurrence_group_id': self.recurrence_group_id,
            'recurrence_frequency': self.recurrence_frequency,
            'recurrence_interval': self.recurrence_interval,
            'recurrence_count': self.recurrence_count,
            'recurrence_until': self.recurrence_until,
        }


def default_count() -> int:
    return getattr(settings, 'RECURRENCE_DEFAULT_COUNT', 52)


def max_count() -> int:
    return getattr(settings, 'RECURRENCE_MAX_COUNT', 52)


def new_group_id() -> str:
    """Generate an identifier shared by every occurrence of one series."""
    return f"rec-{uuid.uuid4().hex}"


def validate_rule(rule: RecurrenceRule) -> RecurrenceRule:
    """
    Check a recurrence rule and return it with the frequency normalised.

    Raises:
        ValidationError: unknown frequency, interval below 1, or a count that
            is not positive or above the configured maximum.
    """
    frequency = rule.frequency.lower() if isinstance(rule.frequency, str) else rule.frequency
    if frequency not in FREQUENCIES:
        raise ValidationError(f"Frequency must be one of: {FREQUENCIES}")

    interval = 1 if rule.interval is None else rule.interval
    if not isinstance(interval, int) or isinstance(interval, bool) or interval < 1:
        raise ValidationError("Interval must be an integer of at least 1")

    if rule.count is not None:
        if not isinstance(rule.count, int) or isinstance(rule.count, bool) or rule.count <= 0:
            raise ValidationError("Count must be a positive integer")
        if rule.count > max_count():
            raise ValidationError(f"Count must not exceed {max_count()}")

    return replace(rule, frequency=frequency, interval=interval)


def step_for_rule(rule: RecurrenceRule) -> relativedelta:
    """Distance between two consecutive occurrences of ``rule``."""
    if rule.frequency == 'daily':
        return relativedelta(days=rule.interval)
    if rule.frequency == 'weekly':
        return relativedelta(weeks=rule.interval)
    if rule.frequency == 'biweekly':
        return relativedelta(weeks=2 * rule.interval)
    return relativedelta(months=rule.interval)


def create_rrule_for_rule(rule: RecurrenceRule, start: date) -> rrule.rrule:
    """
    Create a dateutil rrule for a daily, weekly or biweekly rule.

    The count limit is applied by the caller; passing both count and until to
    rrule is deprecated by dateutil.
    """
    interval = rule.interval
    if rule.frequency == 'biweekly':
        interval = 2 * rule.interval

    rule_params = {
        'freq': RRULE_FREQ_MAP[rule.frequency],
        'dtstart': start,
        'interval': interval,
    }
    if rule.until:
        rule_params['until'] = rule.until

    return rrule.rrule(**rule_params)


def _monthly_dates(start: date, interval: int, until: Optional[date]) -> Iterator[date]:
    # Offsets are taken from the start date each time, so Jan 31 gives
    # Feb 29, Mar 31, Apr 30 rather than drifting to the 29th.
    k = 0
    while True:
        try:
            current = start + relativedelta(months=k * interval)
        except (ValueError, OverflowError):
            # Past date.max; collect_dates() decides whether that cut the series short
            return
        if until and current > until:
            return
        yield current
        k += 1


def iter_dates(rule: RecurrenceRule, start: date) -> Iterator[date]:
    """Ascending, unbounded-by-count occurrence dates for a validated rule."""
    if rule.frequency == 'monthly':
        return _monthly_dates(start, rule.interval, rule.until)
    return (dt.date() for dt in create_rrule_for_rule(rule, start))


def collect_dates(rule: RecurrenceRule, start: date, limit: int) -> List[date]:
    """
    Up to ``limit`` occurrence dates for a validated rule.

    Raises:
        ValidationError: the series would need dates past ``date.max``. Only an
            open-ended rule can hit this; with ``until`` set every later date
            is beyond ``until`` anyway.
    """
    dates = []
    try:
        for occurrence_date in islice(iter_dates(rule, start), limit):
            dates.append(occurrence_date)
    except (ValueError, OverflowError) as exc:
        if rule.until is None:
            raise ValidationError(OUT_OF_RANGE_MESSAGE) from exc

    # dateutil's rrule stops quietly at year 9999 instead of raising
    if len(dates) < limit and rule.until is None:
        raise ValidationError(OUT_OF_RANGE_MESSAGE)
    return dates


def expand(base: EventTemplate, rule: RecurrenceRule) -> List[EventOccurrence]:
    """
    Expand ``base`` into concrete occurrences according to ``rule``.

    Occurrences start at ``base.date`` and advance by the rule's interval until
    either ``rule.until`` (inclusive) is passed or ``rule.count`` occurrences
    were produced. Without a count the default cap applies, so expansion always
    terminates.

    Args:
        base: EventTemplate whose fields are copied onto each occurrence
        rule: RecurrenceRule describing frequency, interval and end condition

    Returns:
        List of EventOccurrence in ascending date order, all carrying the same
        recurrence_group_id. Empty when ``until`` precedes the start date.

    Raises:
        ValidationError: the rule is invalid, the start date is missing, or an
            open-ended series would run past the last representable date.
    """
    if base.date is None:
        raise ValidationError("Start date is required")
    rule = validate_rule(rule)

    limit = rule.count if rule.count is not None else default_count()
    dates = collect_dates(rule, base.date, limit)
    group_id = new_group_id()

    return [
        EventOccurrence(
            title=base.title,
            date=occurrence_date,
            club_id=base.club_id,
            time=base.time,
            description=base.description,
            location=base.location,
            recurrence_group_id=group_id,
            recurrence_frequency=rule.frequency,
            recurrence_interval=rule.interval,
            recurrence_count=rule.count,
            recurrence_until=rule.until,
        )
        for occurrence_date in dates
    ]
