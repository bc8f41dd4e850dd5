"""
URL configuration for club_calendar.
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import ClubViewSet, EventViewSet, auth_view

# Create router for viewsets
router = DefaultRouter()
router.register(r'clubs', ClubViewSet)
router.register(r'events', EventViewSet)

urlpatterns = [
    # Include viewset URLs
    path('', include(router.urls)),

    # Admin secret exchange
    path('auth/', auth_view, name='auth'),
]
