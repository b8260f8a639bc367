"""
Comment model for django-blog-api.
"""
from django.conf import settings
from django.db import models
from django.utils import timezone

from ..exceptions import BadRequest


class CommentQuerySet(models.QuerySet):
    def top_level(self):
        return self.filter(parent__isnull=True)

    def with_counts(self):
        return self.annotate(
            num_likes=models.Count("likes", distinct=True),
            num_replies=models.Count("replies", distinct=True),
        )


class Comment(models.Model):
    """
    Comment on a post.

    Supports:
    - One level of threaded replies via parent field
    - Edit tracking
    - Guarded likes
    """

    post = models.ForeignKey(
        "blog_api.Post",
        on_delete=models.CASCADE,
        related_name="comments",
    )
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="comments",
    )
    # Deleting a comment removes its direct replies
    parent = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        on_delete=models.CASCADE,
        related_name="replies",
    )
    content = models.TextField(max_length=1000)
    likes = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        related_name="liked_comments",
        blank=True,
    )
    is_edited = models.BooleanField(default=False)
    edited_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CommentQuerySet.as_manager()

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["post", "-created_at"], name="blog_comment_post_idx"),
            models.Index(fields=["parent", "created_at"], name="blog_comment_parent_idx"),
            models.Index(fields=["author", "-created_at"], name="blog_comment_author_idx"),
        ]

    def __str__(self):
        return f"Comment by {self.author} on {self.post}"

    @property
    def preview(self):
        """Return truncated content for admin display."""
        if len(self.content) > 100:
            return self.content[:100] + "..."
        return self.content

    @property
    def is_reply(self):
        """Check if this is a reply to another comment."""
        return self.parent_id is not None

    @property
    def like_count(self):
        if hasattr(self, "num_likes"):
            return self.num_likes
        return self.likes.count()

    @property
    def reply_count(self):
        if hasattr(self, "num_replies"):
            return self.num_replies
        return self.replies.count()

    def is_owned_by(self, user):
        return user is not None and self.author_id == user.pk

    def edit(self, new_content):
        """Replace the content, flagging the comment as edited if it changed."""
        new_content = new_content.strip()
        if new_content == self.content:
            return
        self.content = new_content
        self.is_edited = True
        self.edited_at = timezone.now()
        self.save(update_fields=["content", "is_edited", "edited_at", "updated_at"])

    def is_liked_by(self, user):
        return self.likes.filter(pk=user.pk).exists()

    def like(self, user):
        """Add a like from ``user``; returns the new like count."""
        if self.is_liked_by(user):
            raise BadRequest("Comment already liked")
        self.likes.add(user)
        return self.likes.count()

    def unlike(self, user):
        """Remove the like from ``user``; returns the new like count."""
        if not self.is_liked_by(user):
            raise BadRequest("Comment not liked")
        self.likes.remove(user)
        return self.likes.count()
