from django.conf import settings
from django.db import models
from django.core.exceptions import ValidationError
from django.utils.text import slugify


# Choices defined at module level so they can be shared
KIND_CHOICES = [
    ('club', 'Club'),
    ('course', 'Course'),
]

FREQUENCY_CHOICES = [
    ('daily', 'Daily'),
    ('weekly', 'Weekly'),
    ('biweekly', 'Biweekly (every 2 weeks)'),
    ('monthly', 'Monthly'),
]


def default_color():
    return settings.CLUB_DEFAULT_COLOR


class Club(models.Model):
    """
    A club or a course that owns events.
    Courses are clubs tagged with kind='course' and usually carry a grade.
    """

    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True, blank=True)
    color = models.CharField(max_length=20, default=default_color)
    enabled = models.BooleanField(default=True)
    kind = models.CharField(max_length=10, choices=KIND_CHOICES, default='club')
    grade = models.CharField(max_length=50, blank=True, help_text="Grade tag for courses, e.g. 'DP2'")
    prioritized = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.get_kind_display()})"

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)

    def clean(self):
        if not self.name or not self.name.strip():
            raise ValidationError("Name is required")
        if not slugify(self.slug or self.name):
            raise ValidationError("Name must contain at least one letter or digit")


class Event(models.Model):
    """
    One dated event. Rows expanded from a single recurrence request share a
    recurrence_group_id and keep a copy of the rule that produced them.
    """

    title = models.CharField(max_length=255)
    date = models.DateField()
    time = models.CharField(max_length=20, blank=True, help_text="Free-form local time, e.g. '15:30'")
    description = models.TextField(blank=True)
    location = models.CharField(max_length=255, blank=True)
    club = models.ForeignKey(Club, on_delete=models.CASCADE, related_name='events')

    recurrence_frequency = models.CharField(max_length=10, choices=FREQUENCY_CHOICES, blank=True)
    recurrence_interval = models.PositiveIntegerField(null=True, blank=True)
    recurrence_count = models.PositiveIntegerField(null=True, blank=True)
    recurrence_until = models.DateField(null=True, blank=True)
    recurrence_group_id = models.CharField(max_length=64, null=True, blank=True, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['date', 'time', 'id']

    def __str__(self):
        return f"{self.title} on {self.date}"

    @property
    def is_recurring(self):
        return bool(self.recurrence_group_id or self.recurrence_frequency)

    @property
    def is_all_day(self):
        return not self.time

    def clean(self):
        if self.recurrence_interval is not None and self.recurrence_interval < 1:
            raise ValidationError("Recurrence interval must be at least 1")
        if self.recurrence_count is not None and self.recurrence_count < 1:
            raise ValidationError("Recurrence count must be positive")
