"""
Views for the calendar API.
Provides CRUD operations for clubs and events and series-level operations.
"""

import logging

from django.conf import settings
from django.db import IntegrityError, transaction
from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.request import Request

from .models import Club, Event
from .permissions import check_admin_password
from .serializers import ClubSerializer, EventSerializer, RecurrenceSerializer, SeriesUpdateSerializer
from .services import series as series_service
from .services.filters import apply_event_filters, parse_filters, today_for
from .services.recurrence import EventTemplate

logger = logging.getLogger(__name__)

TRUE_VALUES = ('1', 'true', 'yes', 'on')


class ClubViewSet(viewsets.ModelViewSet):
    """
    ViewSet for CRUD operations on clubs and courses.
    Deleting a club deletes its events.
    """
    queryset = Club.objects.all()
    serializer_class = ClubSerializer

    def get_queryset(self):
        queryset = Club.objects.order_by('name')
        kind = self.request.query_params.get('kind')
        if kind:
            queryset = queryset.filter(kind=kind)
        return queryset

    def _save_or_conflict(self, serializer, success_status):
        try:
            with transaction.atomic():
                serializer.save()
        except IntegrityError:
            return Response({'error': 'Slug already exists'}, status=status.HTTP_409_CONFLICT)
        return Response(serializer.data, status=success_status)

    def create(self, request: Request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return self._save_or_conflict(serializer, status.HTTP_201_CREATED)

    def update(self, request: Request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(self.get_object(), data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        return self._save_or_conflict(serializer, status.HTTP_200_OK)


class EventViewSet(viewsets.ModelViewSet):
    """
    ViewSet for events.

    POST accepts an optional ``recurrence`` object and then creates the whole
    series. DELETE removes one occurrence, or the whole series with
    ``?series=true``. The ``series`` action reads or bulk-edits a series.
    """
    queryset = Event.objects.all()
    serializer_class = EventSerializer

    def get_queryset(self):
        return Event.objects.select_related('club')

    def list(self, request: Request, *args, **kwargs):
        """
        Query parameters:
        - search, club (repeatable or comma separated), range, from, to
        - all_day, recurring, non_recurring (booleans)
        - sort: date-asc | date-desc | name-asc | club-asc
        - tz: timezone name used to decide what "today" is
        """
        filters = parse_filters(request.query_params)
        today = today_for(request.query_params.get('tz'))
        queryset = apply_event_filters(self.get_queryset(), filters, today)
        serializer = self.get_serializer(queryset, many=True)
        return Response(serializer.data)

    def create(self, request: Request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        base = EventTemplate(
            title=data['title'],
            date=data['date'],
            club_id=data['club'].pk,
            time=data.get('time', ''),
            description=data.get('description', ''),
            location=data.get('location', ''),
        )
        recurrence = data.get('recurrence')
        if not recurrence:
            created = series_service.create_event(base)
            return Response(self.get_serializer(created[0]).data, status=status.HTTP_201_CREATED)

        created = series_service.create_event(base, RecurrenceSerializer.to_rule(recurrence))
        if not created:
            return Response(
                {'error': 'Recurrence produces no occurrences (until is before the start date)'},
                status=status.HTTP_400_BAD_REQUEST
            )
        return Response(self.get_serializer(created, many=True).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, *args, **kwargs):
        """Update one occurrence; the rest of its series is left untouched."""
        partial = kwargs.pop('partial', False)
        event = self.get_object()
        serializer = self.get_serializer(event, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        changes = dict(serializer.validated_data)
        changes.pop('recurrence', None)
        event = series_service.update_single(event.pk, changes)
        return Response(self.get_serializer(event).data)

    def destroy(self, request: Request, *args, **kwargs):
        """
        Delete an occurrence.

        Query parameter:
        - series: when true, delete every occurrence sharing the event's
          recurrence group id
        """
        event = self.get_object()
        delete_whole_series = request.query_params.get('series', '').lower() in TRUE_VALUES

        if delete_whole_series and event.recurrence_group_id:
            deleted = series_service.delete_series(event.pk)
            return Response({'success': True, 'deletedSeries': True, 'deleted': deleted}, status=status.HTTP_200_OK)

        deleted = series_service.delete_single(event.pk)
        return Response({'success': True, 'deletedSeries': False, 'deleted': deleted}, status=status.HTTP_200_OK)

    @action(detail=True, methods=['get', 'patch'], url_path='series')
    def series(self, request: Request, pk=None):
        """
        GET - list every occurrence of the event's series
        PATCH - apply title/time/description/location/club to every occurrence:
        {
            "title": "New Title",  // optional
            "time": "16:00",  // optional
            "club": 3  // optional
        }
        Dates and the recurrence group id are never changed here.
        """
        event = self.get_object()

        if request.method == 'GET':
            occurrences = series_service.series_of(event).order_by('date', 'id')
            return Response(self.get_serializer(occurrences, many=True).data)

        serializer = SeriesUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        updated = series_service.update_series(event.pk, serializer.to_changes())
        return Response(self.get_serializer(updated, many=True).data)


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def auth_view(request: Request):
    """
    Exchange admin credentials for the bearer token used on write requests.

    Payload: {"username": "...", "password": "..."}
    """
    username = request.data.get('username')
    password = request.data.get('password')
    if not username or not password:
        return Response({'error': 'Missing credentials'}, status=status.HTTP_400_BAD_REQUEST)

    if username != settings.ADMIN_USERNAME:
        logger.warning("Rejected admin login for %r", username)
        return Response({'error': 'Invalid'}, status=status.HTTP_401_UNAUTHORIZED)

    if not settings.ADMIN_PASSWORD_HASH:
        logger.error("Admin login attempted but ADMIN_PASSWORD_HASH is not configured")
        return Response({'error': 'Not configured'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if not check_admin_password(password):
        logger.warning("Rejected admin login for %r", username)
        return Response({'error': 'Invalid'}, status=status.HTTP_401_UNAUTHORIZED)

    return Response({'token': password})
