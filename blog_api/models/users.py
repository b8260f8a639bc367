"""
User model and follow graph for django-blog-api.
"""
import logging

from django.contrib.auth.models import AbstractUser
from django.db import models, transaction

from ..exceptions import BadRequest

logger = logging.getLogger(__name__)


class User(AbstractUser):
    """
    Blog user.

    Set ``AUTH_USER_MODEL = "blog_api.User"`` in the host project.

    Supports:
    - Roles (user, admin, moderator)
    - Follower/following graph stored as a single self-referencing M2M
    - Cascading account deletion
    """

    class Role(models.TextChoices):
        USER = "user", "User"
        ADMIN = "admin", "Admin"
        MODERATOR = "moderator", "Moderator"

    email = models.EmailField(unique=True)
    bio = models.TextField(blank=True, max_length=500)
    avatar = models.CharField(max_length=500, blank=True)
    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.USER,
        db_index=True,
    )
    is_verified = models.BooleanField(default=False)

    # An edge A -> B means "A follows B"; B.followers is the reverse side.
    following = models.ManyToManyField(
        "self",
        symmetrical=False,
        related_name="followers",
        blank=True,
    )

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.username

    def save(self, *args, **kwargs):
        if self.email:
            self.email = self.email.strip().lower()
        super().save(*args, **kwargs)

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def follower_count(self):
        return self.followers.count()

    @property
    def following_count(self):
        return self.following.count()

    @property
    def is_admin(self):
        return self.role == self.Role.ADMIN

    def is_following(self, other):
        return self.following.filter(pk=other.pk).exists()

    def follow(self, other):
        """Follow another user. Both sides of the edge change together."""
        if other.pk == self.pk:
            raise BadRequest("You cannot follow yourself")
        if self.is_following(other):
            raise BadRequest("You are already following this user")
        self.following.add(other)

    def unfollow(self, other):
        """Stop following another user."""
        if not self.is_following(other):
            raise BadRequest("You are not following this user")
        self.following.remove(other)

    @transaction.atomic
    def delete_account(self):
        """
        Delete the user with everything they own.

        Removes their posts (with all comments on them), their comments
        elsewhere (with direct replies) and every follow edge in either
        direction. Returns a dict of deleted counts per model label.
        """
        from .comments import Comment
        from .posts import Post

        user_id = self.pk
        counts = {}

        _, per_model = Post.objects.filter(author=self).delete()
        _merge_counts(counts, per_model)
        _, per_model = Comment.objects.filter(author=self).delete()
        _merge_counts(counts, per_model)

        self.following.clear()
        self.followers.clear()

        _, per_model = super().delete()
        _merge_counts(counts, per_model)

        logger.info("Deleted user %s with cascade counts %s", user_id, counts)
        return counts


def _merge_counts(totals, per_model):
    for label, count in per_model.items():
        totals[label] = totals.get(label, 0) + count
