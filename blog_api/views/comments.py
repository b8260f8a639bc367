"""
Comment endpoints: threads per post, replies, CRUD and likes.
"""
import logging

from django.db.models import Prefetch

from ..exceptions import PermissionDenied, ValidationFailed
from ..forms import CommentEditForm, CommentForm
from ..models import Comment, Post
from ..pagination import paginate
from ..serializers import comment_data
from .base import (
    ApiView,
    AuthRequiredMixin,
    ensure_owner_or_admin,
    get_or_404,
    success,
    validate,
)

logger = logging.getLogger(__name__)


def comment_queryset():
    return Comment.objects.with_counts().select_related("author")


class PostCommentsView(ApiView):
    """Top-level comments of a post, newest first, each with its replies."""

    def get(self, request, post_id):
        replies = Prefetch("replies", queryset=comment_queryset().order_by("created_at", "pk"))
        qs = (
            comment_queryset()
            .top_level()
            .filter(post_id=post_id)
            .prefetch_related(replies)
            .order_by("-created_at", "-pk")
        )
        comments, pagination = paginate(qs, request)
        return success(
            [comment_data(c, replies=c.replies.all()) for c in comments],
            pagination=pagination,
        )


class CommentCreateView(AuthRequiredMixin, ApiView):
    """
    Add a comment, or a reply when parent_comment_id is given.

    Replies must target a top-level comment on the same post.
    """

    def post(self, request):
        data = validate(CommentForm(data=self.payload))
        post = get_or_404(Post.objects.all(), "Post not found", pk=data["post_id"])

        parent = None
        if data.get("parent_comment_id"):
            parent = get_or_404(
                Comment.objects.all(),
                "Parent comment not found",
                pk=data["parent_comment_id"],
            )
            if parent.post_id != post.pk:
                raise ValidationFailed([{
                    "field": "parent_comment_id",
                    "message": "Parent comment belongs to a different post",
                }])
            if parent.is_reply:
                raise ValidationFailed([{
                    "field": "parent_comment_id",
                    "message": "Cannot reply to a reply",
                }])

        comment = Comment.objects.create(
            post=post,
            author=request.api_user,
            parent=parent,
            content=data["content"],
        )
        return success(comment_data(comment), status=201)


class CommentDetailView(AuthRequiredMixin, ApiView):
    def put(self, request, pk):
        data = validate(CommentEditForm(data=self.payload))
        comment = get_or_404(Comment.objects.all(), "Comment not found", pk=pk)
        if not comment.is_owned_by(request.api_user):
            raise PermissionDenied("Not authorized to update this comment")
        comment.edit(data["content"])
        return success(comment_data(comment))

    def delete(self, request, pk):
        comment = get_or_404(Comment.objects.all(), "Comment not found", pk=pk)
        ensure_owner_or_admin(comment, request.api_user, "delete this comment")
        _, counts = comment.delete()
        logger.info("User %s deleted comment %s (%s)", request.api_user.pk, pk, counts)
        return success(message="Comment deleted successfully")


class CommentLikeView(AuthRequiredMixin, ApiView):
    def post(self, request, pk):
        comment = get_or_404(Comment.objects.all(), "Comment not found", pk=pk)
        like_count = comment.like(request.api_user)
        return success(message="Comment liked successfully", like_count=like_count)

    def delete(self, request, pk):
        comment = get_or_404(Comment.objects.all(), "Comment not found", pk=pk)
        like_count = comment.unlike(request.api_user)
        return success(message="Comment unliked successfully", like_count=like_count)


class CommentRepliesView(ApiView):
    def get(self, request, pk):
        qs = comment_queryset().filter(parent_id=pk).order_by("created_at", "pk")
        replies, pagination = paginate(qs, request)
        return success([comment_data(r) for r in replies], pagination=pagination)
