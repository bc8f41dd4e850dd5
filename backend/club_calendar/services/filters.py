"""
Filtering and sorting of event listings.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import List, Optional

import pytz
from dateutil.relativedelta import relativedelta
from django.core.exceptions import ValidationError
from django.db.models import Q
from django.utils import timezone
from django.utils.dateparse import parse_date


DATE_RANGES = ['all', 'upcoming', 'past', 'this-week', 'this-month', 'next-30-days', 'custom']
SORT_ORDERS = {
    'date-asc': ['date', 'time', 'id'],
    'date-desc': ['-date', '-time', '-id'],
    'name-asc': ['title', 'date', 'id'],
    'club-asc': ['club__name', 'date', 'id'],
}

TRUE_VALUES = ('1', 'true', 'yes', 'on')


@dataclass
class EventFilterState:
    search: str = ''
    club_ids: List[int] = field(default_factory=list)
    date_range: str = 'all'
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    show_all_day: bool = True
    show_recurring: bool = True
    show_non_recurring: bool = True
    sort: str = 'date-asc'


def _flag(params, name, default=True):
    value = params.get(name)
    if value is None or value == '':
        return default
    return value.strip().lower() in TRUE_VALUES


def _club_ids(params) -> List[int]:
    raw = params.getlist('club') if hasattr(params, 'getlist') else [params.get('club', '')]
    ids = []
    for chunk in raw:
        for part in str(chunk or '').split(','):
            part = part.strip()
            if not part:
                continue
            try:
                ids.append(int(part))
            except ValueError:
                raise ValidationError(f"Invalid club id: {part}")
    return ids


def _date_param(params, name) -> Optional[date]:
    value = params.get(name)
    if not value:
        return None
    parsed = parse_date(value)
    if parsed is None:
        raise ValidationError(f"{name} must be a valid ISO date")
    return parsed


def parse_filters(params) -> EventFilterState:
    """Build an EventFilterState from request query parameters."""
    date_range = params.get('range') or 'all'
    if date_range not in DATE_RANGES:
        raise ValidationError(f"range must be one of: {DATE_RANGES}")

    sort = params.get('sort') or 'date-asc'
    if sort not in SORT_ORDERS:
        raise ValidationError(f"sort must be one of: {list(SORT_ORDERS)}")

    return EventFilterState(
        search=(params.get('search') or '').strip(),
        club_ids=_club_ids(params),
        date_range=date_range,
        date_from=_date_param(params, 'from'),
        date_to=_date_param(params, 'to'),
        show_all_day=_flag(params, 'all_day'),
        show_recurring=_flag(params, 'recurring'),
        show_non_recurring=_flag(params, 'non_recurring'),
        sort=sort,
    )


def today_for(tz_name: Optional[str] = None) -> date:
    """Current date in ``tz_name`` (pytz zone name) or the server's zone."""
    if not tz_name:
        return timezone.localdate()
    try:
        tz = pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError:
        raise ValidationError(f"Invalid timezone: {tz_name}")
    return datetime.now(tz).date()


def date_bounds(filters: EventFilterState, today: date):
    """(start, end) inclusive bounds for the selected range; None is open."""
    if filters.date_range == 'upcoming':
        return today, None
    if filters.date_range == 'past':
        return None, today - timedelta(days=1)
    if filters.date_range == 'this-week':
        # Weeks start on Sunday
        week_start = today - timedelta(days=(today.weekday() + 1) % 7)
        return week_start, week_start + timedelta(days=6)
    if filters.date_range == 'this-month':
        month_start = today.replace(day=1)
        return month_start, month_start + relativedelta(months=1, days=-1)
    if filters.date_range == 'next-30-days':
        return today, today + timedelta(days=30)
    if filters.date_range == 'custom' and filters.date_from and filters.date_to:
        return filters.date_from, filters.date_to
    return None, None


def _type_filter(filters: EventFilterState) -> Optional[Q]:
    if filters.show_all_day and filters.show_recurring and filters.show_non_recurring:
        return None

    all_day = Q(time='')
    recurring = (Q(recurrence_group_id__isnull=False) & ~Q(recurrence_group_id='')) | ~Q(recurrence_frequency='')

    matches = Q(pk__in=[])
    if filters.show_all_day:
        matches |= all_day
    if filters.show_recurring:
        matches |= recurring
    if filters.show_non_recurring:
        matches |= ~recurring & ~all_day
    return matches


def apply_event_filters(queryset, filters: EventFilterState, today: Optional[date] = None):
    """
    Narrow and order an Event queryset.

    An event is kept when it matches the search text (title, description or
    location), belongs to one of the selected clubs, falls in the date range
    and matches at least one enabled type: all-day, recurring, or timed
    non-recurring.
    """
    today = today or timezone.localdate()

    if filters.search:
        queryset = queryset.filter(
            Q(title__icontains=filters.search)
            | Q(description__icontains=filters.search)
            | Q(location__icontains=filters.search)
        )

    if filters.club_ids:
        queryset = queryset.filter(club_id__in=filters.club_ids)

    start, end = date_bounds(filters, today)
    if start:
        queryset = queryset.filter(date__gte=start)
    if end:
        queryset = queryset.filter(date__lte=end)

    type_q = _type_filter(filters)
    if type_q is not None:
        queryset = queryset.filter(type_q)

    return queryset.order_by(*SORT_ORDERS[filters.sort])
