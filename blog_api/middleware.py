"""
Middleware for django-blog-api.

Add to MIDDLEWARE in your Django settings:

    MIDDLEWARE = [
        ...
        "blog_api.middleware.ApiExceptionMiddleware",
    ]
"""
import logging

from django.http import JsonResponse

logger = logging.getLogger(__name__)


class ApiExceptionMiddleware:
    """
    Collapse uncaught exceptions under the API prefix into a JSON 500.

    The exception is logged with its traceback; clients only see the
    generic server error envelope.
    """

    def __init__(self, get_response, prefix="/api/"):
        self.get_response = get_response
        self.prefix = prefix

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if not request.path.startswith(self.prefix):
            return None
        logger.exception(
            "Unhandled error on %s %s", request.method, request.path
        )
        return JsonResponse(
            {"success": False, "message": "Server error"},
            status=500,
        )
