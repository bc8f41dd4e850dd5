from django.contrib import admin
from .models import Club, Event


@admin.register(Club)
class ClubAdmin(admin.ModelAdmin):
    list_display = ['name', 'kind', 'grade', 'slug', 'enabled', 'prioritized', 'created_at']
    list_filter = ['kind', 'enabled', 'prioritized', 'grade']
    search_fields = ['name', 'slug']
    prepopulated_fields = {'slug': ('name',)}
    readonly_fields = ['created_at']
    ordering = ['name']


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ['title', 'club', 'date', 'time', 'recurrence_frequency', 'recurrence_group_id']
    list_filter = ['club', 'recurrence_frequency', 'date']
    search_fields = ['title', 'description', 'location', 'recurrence_group_id']
    readonly_fields = ['recurrence_group_id', 'created_at']
    ordering = ['date', 'time']
