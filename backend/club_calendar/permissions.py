"""
Single admin secret check for write requests.
"""

import logging

import bcrypt
from django.conf import settings
from rest_framework import authentication, permissions

logger = logging.getLogger(__name__)

# bcrypt only reads this many bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72


def bearer_token(request):
    auth = request.headers.get('Authorization', '')
    if not auth:
        return None
    return auth.replace('Bearer ', '', 1).strip() or None


def check_admin_password(password, stored_hash=None):
    """Compare a plaintext password against the configured bcrypt hash."""
    stored_hash = stored_hash if stored_hash is not None else settings.ADMIN_PASSWORD_HASH
    if not password or not stored_hash:
        return False
    secret = password.encode('utf-8')
    if len(secret) > BCRYPT_MAX_PASSWORD_BYTES:
        logger.warning("Rejected admin secret longer than %d bytes", BCRYPT_MAX_PASSWORD_BYTES)
        return False
    try:
        return bcrypt.checkpw(secret, stored_hash.encode('utf-8'))
    except ValueError:
        logger.error("ADMIN_PASSWORD_HASH is not a valid bcrypt hash")
        return False


def is_admin_request(request):
    """
    True when the request carries the admin secret.

    Outside DEBUG the bearer token must match ADMIN_PASSWORD_HASH. In DEBUG a
    configured DEV_ADMIN_PASSWORD must match exactly; with none configured all
    requests pass.
    """
    token = bearer_token(request)
    if settings.DEBUG:
        if settings.DEV_ADMIN_PASSWORD:
            return token == settings.DEV_ADMIN_PASSWORD
        if not settings.ADMIN_PASSWORD_HASH:
            logger.warning("DEV_ADMIN_PASSWORD not set; allowing admin request in development")
            return True
    return check_admin_password(token)


class BearerSecretAuthentication(authentication.BaseAuthentication):
    """
    Never identifies a user; it only advertises the Bearer scheme so that
    denied writes answer 401 instead of 403.
    """

    def authenticate(self, request):
        return None

    def authenticate_header(self, request):
        return 'Bearer realm="api"'


class AdminSecretOrReadOnly(permissions.BasePermission):
    """Reads are public; writes need the admin bearer secret."""

    message = 'Unauthorized'

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        allowed = is_admin_request(request)
        if not allowed:
            logger.warning("Rejected admin request %s %s", request.method, request.path)
        return allowed
