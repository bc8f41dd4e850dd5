"""
API error responses in the {"error": ...} shape used by every endpoint.
"""

from django.core.exceptions import ObjectDoesNotExist, ValidationError as DjangoValidationError
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler


def validation_message(exc: DjangoValidationError) -> str:
    return '; '.join(exc.messages)


def api_exception_handler(exc, context):
    """
    Extend DRF's handler with domain errors.

    - django ValidationError -> 400 {"error": message}
    - model DoesNotExist -> 404 {"error": "Not found"}
    - NotAuthenticated/PermissionDenied -> {"error": "Unauthorized"}
    """
    if isinstance(exc, DjangoValidationError):
        return Response({'error': validation_message(exc)}, status=status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, ObjectDoesNotExist):
        return Response({'error': 'Not found'}, status=status.HTTP_404_NOT_FOUND)

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed, exceptions.PermissionDenied)):
        response.data = {'error': 'Unauthorized'}
    elif isinstance(exc, (exceptions.NotFound, Http404)):
        response.data = {'error': 'Not found'}
    return response
