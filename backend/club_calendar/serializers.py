from django.utils.text import slugify
from rest_framework import serializers

from .models import Club, Event, FREQUENCY_CHOICES
from .services.recurrence import RecurrenceRule, max_count


class ClubSerializer(serializers.ModelSerializer):
    """Serializer for Club; the slug is derived from the name when omitted"""

    class Meta:
        model = Club
        fields = ['id', 'name', 'slug', 'color', 'enabled', 'kind', 'grade', 'prioritized', 'created_at']
        read_only_fields = ['created_at']
        extra_kwargs = {
            # Uniqueness is enforced by the database and reported as 409
            'slug': {'required': False, 'validators': []},
        }

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name is required")
        return value

    def validate(self, data):
        slug = (data.get('slug') or '').strip()
        if slug:
            data['slug'] = slugify(slug)
        elif self.instance is None or 'slug' in data:
            name = data.get('name') or getattr(self.instance, 'name', '')
            data['slug'] = slugify(name)
        if 'slug' in data and not data['slug']:
            raise serializers.ValidationError("Name must contain at least one letter or digit")
        return data


class RecurrenceSerializer(serializers.Serializer):
    """Recurrence request attached to an event creation payload"""

    frequency = serializers.ChoiceField(choices=FREQUENCY_CHOICES)
    interval = serializers.IntegerField(min_value=1, default=1)
    count = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    until = serializers.DateField(required=False, allow_null=True)

    def to_internal_value(self, data):
        if isinstance(data, dict) and isinstance(data.get('frequency'), str):
            data = dict(data, frequency=data['frequency'].lower())
        return super().to_internal_value(data)

    def validate_count(self, value):
        if value is not None and value > max_count():
            raise serializers.ValidationError(f"Count must not exceed {max_count()}")
        return value

    @staticmethod
    def to_rule(data) -> RecurrenceRule:
        return RecurrenceRule(
            frequency=data['frequency'],
            interval=data.get('interval', 1),
            count=data.get('count'),
            until=data.get('until'),
        )


class EventSerializer(serializers.ModelSerializer):
    """Serializer for Event; recurrence fields are set by series expansion only"""

    recurrence = RecurrenceSerializer(write_only=True, required=False, allow_null=True)

    class Meta:
        model = Event
        fields = [
            'id', 'title', 'date', 'time', 'description', 'location', 'club',
            'recurrence',
            'recurrence_frequency', 'recurrence_interval', 'recurrence_count',
            'recurrence_until', 'recurrence_group_id', 'created_at',
        ]
        read_only_fields = [
            'recurrence_frequency', 'recurrence_interval', 'recurrence_count',
            'recurrence_until', 'recurrence_group_id', 'created_at',
        ]

    def validate_title(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Title is required")
        return value

    def validate(self, data):
        if data.get('recurrence') and self.instance is not None:
            raise serializers.ValidationError("Recurrence can only be set when creating events")
        return data


class SeriesUpdateSerializer(serializers.Serializer):
    """Fields that may be changed on every occurrence of a series at once"""

    title = serializers.CharField(max_length=255, required=False)
    time = serializers.CharField(max_length=20, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    location = serializers.CharField(max_length=255, required=False, allow_blank=True)
    club = serializers.PrimaryKeyRelatedField(queryset=Club.objects.all(), required=False)

    def validate_title(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Title is required")
        return value

    def to_changes(self) -> dict:
        changes = dict(self.validated_data)
        if 'club' in changes:
            changes['club_id'] = changes.pop('club').pk
        return changes
