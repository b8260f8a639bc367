"""
Bearer token helpers for django-blog-api.

Tokens are signed with ``django.core.signing`` and carry only the user id;
they expire after ``BLOG_API["TOKEN_MAX_AGE"]`` seconds.
"""
import logging

from django.contrib.auth import get_user_model
from django.core import signing

from .conf import blog_settings

logger = logging.getLogger(__name__)


def issue_token(user):
    """Return a signed bearer token for ``user``."""
    return signing.dumps({"id": user.pk}, salt=blog_settings.TOKEN_SALT)


def user_from_token(token):
    """
    Resolve a bearer token to an active user.

    Returns None for malformed, expired or unknown tokens.
    """
    try:
        payload = signing.loads(
            token,
            salt=blog_settings.TOKEN_SALT,
            max_age=blog_settings.TOKEN_MAX_AGE,
        )
    except signing.SignatureExpired:
        logger.info("Rejected expired token")
        return None
    except signing.BadSignature:
        return None

    User = get_user_model()
    return User.objects.filter(pk=payload.get("id"), is_active=True).first()


def user_from_request(request):
    """Read ``Authorization: Bearer <token>`` and return the user or None."""
    header = request.META.get("HTTP_AUTHORIZATION", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return user_from_token(token.strip())
