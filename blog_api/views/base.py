"""
Base classes shared by the JSON views.
"""
import json

from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from ..auth import user_from_request
from ..exceptions import (
    ApiError,
    BadRequest,
    NotAuthenticated,
    NotFound,
    PermissionDenied,
    ValidationFailed,
)


def success(data=None, status=200, pagination=None, message=None, **extra):
    """Build the success envelope ``{success, data, pagination?}``."""
    payload = {"success": True}
    if message is not None:
        payload["message"] = message
    if data is not None:
        payload["data"] = data
    if pagination is not None:
        payload["pagination"] = pagination
    payload.update(extra)
    return JsonResponse(payload, status=status)


def get_or_404(queryset, message, **lookup):
    """Fetch one object or raise NotFound with ``message``."""
    obj = queryset.filter(**lookup).first()
    if obj is None:
        raise NotFound(message)
    return obj


def validate(form):
    """Return cleaned data or raise ValidationFailed with the form errors."""
    if not form.is_valid():
        raise ValidationFailed.from_form(form)
    return form.cleaned_data


@method_decorator(csrf_exempt, name="dispatch")
class ApiView(View):
    """
    JSON view base.

    Resolves the bearer token into ``request.api_user`` (None when absent),
    parses JSON bodies into ``self.payload`` and turns ApiError into the
    error envelope.
    """

    def dispatch(self, request, *args, **kwargs):
        request.api_user = user_from_request(request)
        try:
            self.payload = self.parse_body(request)
            self.check_access(request)
            return super().dispatch(request, *args, **kwargs)
        except ApiError as exc:
            return JsonResponse(exc.as_payload(), status=exc.status)

    def check_access(self, request):
        """Hook for access mixins; runs before the handler."""

    def parse_body(self, request):
        if not request.body:
            return {}
        try:
            payload = json.loads(request.body)
        except ValueError:
            raise BadRequest("Invalid JSON body")
        if not isinstance(payload, dict):
            raise BadRequest("JSON body must be an object")
        return payload

    def http_method_not_allowed(self, request, *args, **kwargs):
        response = super().http_method_not_allowed(request, *args, **kwargs)
        return JsonResponse(
            {"success": False, "message": "Method not allowed"},
            status=405,
            headers={"Allow": response["Allow"]},
        )


class AuthRequiredMixin:
    """Reject requests without a valid bearer token (401)."""

    def check_access(self, request):
        require_user(request)
        super().check_access(request)


class RoleRequiredMixin(AuthRequiredMixin):
    """Require one of ``allowed_roles`` (403 otherwise)."""

    allowed_roles = ()

    def check_access(self, request):
        super().check_access(request)
        if request.api_user.role not in self.allowed_roles:
            raise PermissionDenied(
                f"User role {request.api_user.role} is not authorized to access this route"
            )


def require_user(request):
    """Return the authenticated user or raise NotAuthenticated."""
    if request.api_user is None:
        raise NotAuthenticated()
    return request.api_user


def ensure_owner_or_admin(obj, user, action):
    """Raise PermissionDenied unless ``user`` owns ``obj`` or is an admin."""
    if obj.is_owned_by(user) or user.is_admin:
        return
    raise PermissionDenied(f"Not authorized to {action}")
