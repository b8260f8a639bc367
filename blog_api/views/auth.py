"""
Authentication endpoints: register, login, current user, password reset.
"""
import logging

from django.contrib.auth import get_user_model
from django.contrib.auth.tokens import default_token_generator
from django.core.mail import send_mail
from django.utils.encoding import force_bytes, force_str
from django.utils.http import urlsafe_base64_decode, urlsafe_base64_encode

from ..auth import issue_token
from ..conf import blog_settings
from ..exceptions import BadRequest, NotAuthenticated
from ..forms import ForgotPasswordForm, LoginForm, RegisterForm, ResetPasswordForm
from ..serializers import user_private
from .base import ApiView, AuthRequiredMixin, success, validate

logger = logging.getLogger(__name__)

RESET_ACK = "If an account with that email exists, a password reset link has been sent"


class RegisterView(ApiView):
    """Create an account and return it with a bearer token."""

    def post(self, request):
        data = validate(RegisterForm(data=self.payload))
        user = get_user_model().objects.create_user(
            username=data["username"],
            email=data["email"],
            password=data["password"],
            first_name=data["first_name"],
            last_name=data["last_name"],
        )
        logger.info("Registered user %s (%s)", user.pk, user.username)
        return success(
            {"user": user_private(user), "token": issue_token(user)},
            status=201,
        )


class LoginView(ApiView):
    """Exchange email and password for a bearer token."""

    def post(self, request):
        data = validate(LoginForm(data=self.payload))
        user = get_user_model().objects.filter(email__iexact=data["email"]).first()
        if user is None or not user.check_password(data["password"]):
            raise NotAuthenticated("Invalid credentials")
        if not user.is_active:
            raise NotAuthenticated("Account is disabled")
        return success({"user": user_private(user), "token": issue_token(user)})


class MeView(AuthRequiredMixin, ApiView):
    def get(self, request):
        return success({"user": user_private(request.api_user)})


class ForgotPasswordView(ApiView):
    """
    Send a password reset link.

    The response is identical whether or not the address is registered.
    """

    def post(self, request):
        data = validate(ForgotPasswordForm(data=self.payload))
        user = get_user_model().objects.filter(
            email__iexact=data["email"], is_active=True
        ).first()
        if user is not None:
            uidb64 = urlsafe_base64_encode(force_bytes(user.pk))
            token = default_token_generator.make_token(user)
            link = blog_settings.PASSWORD_RESET_URL.format(uidb64=uidb64, token=token)
            send_mail(
                "Password reset",
                f"Use this link to choose a new password:\n\n{link}\n",
                None,
                [user.email],
            )
            logger.info("Sent password reset link to user %s", user.pk)
        return success(message=RESET_ACK)


class ResetPasswordView(ApiView):
    def post(self, request, uidb64, token):
        data = validate(ResetPasswordForm(data=self.payload))
        user = _user_from_uid(uidb64)
        if user is None or not default_token_generator.check_token(user, token):
            raise BadRequest("Invalid or expired reset token")
        user.set_password(data["password"])
        user.save(update_fields=["password", "updated_at"])
        logger.info("Password reset for user %s", user.pk)
        return success(message="Password has been reset")


def _user_from_uid(uidb64):
    User = get_user_model()
    try:
        pk = force_str(urlsafe_base64_decode(uidb64))
        return User.objects.filter(pk=int(pk)).first()
    except (TypeError, ValueError, OverflowError):
        return None
