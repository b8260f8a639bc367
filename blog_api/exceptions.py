"""
Exceptions raised by models and views of django-blog-api.

Views never build error responses by hand: they raise one of these and
``ApiView.dispatch`` turns it into the JSON error envelope.
"""


class ApiError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status = 400
    default_message = "Bad request"

    def __init__(self, message=None, status=None):
        self.message = message or self.default_message
        if status is not None:
            self.status = status
        super().__init__(self.message)

    def as_payload(self):
        return {"success": False, "message": self.message}


class BadRequest(ApiError):
    status = 400
    default_message = "Bad request"


class NotAuthenticated(ApiError):
    status = 401
    default_message = "Not authorized, no valid token"


class PermissionDenied(ApiError):
    status = 403
    default_message = "Not authorized to perform this action"


class NotFound(ApiError):
    status = 404
    default_message = "Not found"


class ValidationFailed(ApiError):
    """Carries a list of ``{"field": ..., "message": ...}`` entries."""

    status = 400
    default_message = "Validation failed"

    def __init__(self, errors, message=None):
        self.errors = list(errors)
        super().__init__(message)

    @classmethod
    def from_form(cls, form):
        """Flatten Django form errors into field/message pairs."""
        errors = []
        for field, messages in form.errors.items():
            for message in messages:
                errors.append({"field": field, "message": message})
        return cls(errors)

    def as_payload(self):
        return {"success": False, "errors": self.errors}
