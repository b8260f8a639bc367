"""
Input validation for django-blog-api.

Request bodies are JSON objects; they are bound to these forms as plain
dicts and ``ValidationFailed.from_form`` reports the collected errors.
"""
from django import forms
from django.contrib.auth import get_user_model
from django.contrib.auth.validators import UnicodeUsernameValidator

from .conf import blog_settings
from .models import Post, User


class TagListField(forms.Field):
    """A JSON array of strings."""

    default_error_messages = {
        "invalid": "Tags must be an array",
    }

    def to_python(self, value):
        if value in self.empty_values:
            return []
        if not isinstance(value, (list, tuple)):
            raise forms.ValidationError(self.error_messages["invalid"], code="invalid")
        if not all(isinstance(item, str) for item in value):
            raise forms.ValidationError(self.error_messages["invalid"], code="invalid")
        return list(value)


class StringInputMixin:
    """Reject JSON values that are not strings instead of calling str() on them."""

    default_error_messages = {
        "not_string": "Must be a string",
    }

    def to_python(self, value):
        if value not in self.empty_values and not isinstance(value, str):
            raise forms.ValidationError(self.error_messages["not_string"], code="not_string")
        return super().to_python(value)


class StrictCharField(StringInputMixin, forms.CharField):
    pass


class StrictEmailField(StringInputMixin, forms.EmailField):
    pass


class StrictBooleanField(forms.Field):
    """
    A JSON boolean; ``"true"`` and ``"false"`` are accepted as well.

    Missing or null means "not given" and cleans to None.
    """

    default_error_messages = {
        "invalid": "Must be a boolean",
    }

    def to_python(self, value):
        if value in (None, ""):
            return None
        if isinstance(value, bool):
            return value
        if value in ("true", "false"):
            return value == "true"
        raise forms.ValidationError(self.error_messages["invalid"], code="invalid")


class PartialFormMixin:
    """Only the keys present in the request body count as changes."""

    def changed_fields(self):
        return {
            name: value
            for name, value in self.cleaned_data.items()
            if name in self.data
        }


# Auth

class RegisterForm(forms.Form):
    username = StrictCharField(
        min_length=3,
        max_length=30,
        validators=[UnicodeUsernameValidator()],
        error_messages={
            "min_length": "Username must be at least 3 characters long",
            "max_length": "Username cannot exceed 30 characters",
        },
    )
    email = StrictEmailField(error_messages={"invalid": "Please enter a valid email"})
    password = StrictCharField(
        min_length=6,
        strip=False,
        error_messages={"min_length": "Password must be at least 6 characters long"},
    )
    first_name = StrictCharField(
        max_length=50,
        error_messages={"required": "First name is required"},
    )
    last_name = StrictCharField(
        max_length=50,
        error_messages={"required": "Last name is required"},
    )

    def clean_username(self):
        username = self.cleaned_data["username"]
        if get_user_model().objects.filter(username__iexact=username).exists():
            raise forms.ValidationError("Username is already taken")
        return username

    def clean_email(self):
        email = self.cleaned_data["email"].lower()
        if get_user_model().objects.filter(email__iexact=email).exists():
            raise forms.ValidationError("Email is already registered")
        return email


class LoginForm(forms.Form):
    email = StrictEmailField(error_messages={"invalid": "Please enter a valid email"})
    password = StrictCharField(strip=False)


class ForgotPasswordForm(forms.Form):
    email = StrictEmailField(error_messages={"invalid": "Please enter a valid email"})


class ResetPasswordForm(forms.Form):
    password = StrictCharField(
        min_length=6,
        strip=False,
        error_messages={"min_length": "Password must be at least 6 characters long"},
    )


# Users

class ProfileForm(PartialFormMixin, forms.Form):
    first_name = StrictCharField(required=False, max_length=50)
    last_name = StrictCharField(required=False, max_length=50)
    bio = StrictCharField(
        required=False,
        max_length=blog_settings.BIO_MAX_LENGTH,
        error_messages={"max_length": "Bio cannot exceed 500 characters"},
    )
    avatar = StrictCharField(required=False, max_length=500)

    def clean(self):
        cleaned = super().clean()
        for name in ("first_name", "last_name"):
            if name in self.data and not cleaned.get(name):
                self.add_error(name, "This field cannot be blank")
        return cleaned


class AdminUserForm(PartialFormMixin, forms.Form):
    role = forms.ChoiceField(
        required=False,
        choices=User.Role.choices,
        error_messages={"invalid_choice": "Invalid role"},
    )
    is_verified = StrictBooleanField(
        required=False,
        error_messages={"invalid": "is_verified must be a boolean"},
    )


# Posts

class PostForm(PartialFormMixin, forms.Form):
    """
    Post create/update form.

    Bound with ``partial=True`` for updates: every field becomes optional and
    only submitted keys are applied.
    """

    title = StrictCharField(
        max_length=blog_settings.TITLE_MAX_LENGTH,
        error_messages={
            "required": "Title is required",
            "max_length": "Title must be between 1 and 200 characters",
        },
    )
    content = StrictCharField(
        min_length=blog_settings.CONTENT_MIN_LENGTH,
        strip=False,
        error_messages={
            "required": "Content is required",
            "min_length": "Content must be at least 10 characters long",
        },
    )
    excerpt = StrictCharField(
        required=False,
        max_length=blog_settings.EXCERPT_MAX_LENGTH,
        error_messages={"max_length": "Excerpt cannot exceed 300 characters"},
    )
    category = forms.ChoiceField(
        required=False,
        choices=blog_settings.CATEGORY_CHOICES,
        error_messages={"invalid_choice": "Invalid category"},
    )
    tags = TagListField(required=False)
    featured_image = StrictCharField(required=False, max_length=500)
    status = forms.ChoiceField(
        required=False,
        choices=Post.Status.choices,
        error_messages={"invalid_choice": "Invalid status"},
    )

    def __init__(self, *args, partial=False, **kwargs):
        super().__init__(*args, **kwargs)
        if partial:
            for field in self.fields.values():
                field.required = False


class PostStatusForm(forms.Form):
    status = forms.ChoiceField(
        choices=Post.Status.choices,
        error_messages={
            "required": "Invalid status",
            "invalid_choice": "Invalid status",
        },
    )


# Comments

class CommentForm(forms.Form):
    content = StrictCharField(
        max_length=blog_settings.COMMENT_MAX_LENGTH,
        error_messages={
            "required": "Comment must be between 1 and 1000 characters",
            "max_length": "Comment must be between 1 and 1000 characters",
        },
    )
    post_id = forms.IntegerField(
        error_messages={
            "required": "Post ID is required",
            "invalid": "Invalid post ID",
        },
    )
    parent_comment_id = forms.IntegerField(
        required=False,
        error_messages={"invalid": "Invalid parent comment ID"},
    )


class CommentEditForm(forms.Form):
    content = StrictCharField(
        max_length=blog_settings.COMMENT_MAX_LENGTH,
        error_messages={
            "required": "Comment must be between 1 and 1000 characters",
            "max_length": "Comment must be between 1 and 1000 characters",
        },
    )
