"""
Post endpoints: listing, search, feed, CRUD and likes.
"""
import logging

from django.db.models import Prefetch, Q

from ..conf import blog_settings
from ..exceptions import NotFound
from ..forms import PostForm
from ..models import Post
from ..pagination import paginate
from ..serializers import comment_data, post_detail, post_summary
from .base import (
    ApiView,
    AuthRequiredMixin,
    ensure_owner_or_admin,
    get_or_404,
    require_user,
    success,
    validate,
)
from .comments import comment_queryset

logger = logging.getLogger(__name__)

SORT_FIELDS = {"published_at", "created_at", "view_count", "title", "read_time"}


def post_list_queryset():
    """Posts with author, tags and like/comment counts loaded for listing."""
    return (
        Post.objects.with_counts()
        .select_related("author")
        .prefetch_related("tags")
    )


def sort_ordering(request, default="published_at"):
    sort_by = request.GET.get("sort_by") or default
    if sort_by not in SORT_FIELDS:
        sort_by = default
    if request.GET.get("sort_order", "desc") == "asc":
        return [sort_by, "-pk"]
    return [f"-{sort_by}", "-pk"]


def _post_id(key):
    if not key.isdigit():
        raise NotFound("Post not found")
    return int(key)


def apply_post_fields(post, fields):
    """Copy submitted form values onto ``post``; returns pending tag names."""
    tags = fields.pop("tags", None)
    for name, value in fields.items():
        # Blank values for required columns mean "leave unchanged"
        if name in ("title", "content", "category", "status") and not value:
            continue
        setattr(post, name, value)
    return tags


class PostListView(ApiView):
    """
    Published posts.

    Query parameters: search, category, author, sort_by, sort_order,
    page, limit.
    """

    def get(self, request):
        qs = post_list_queryset().published()

        search = request.GET.get("search", "").strip()
        if search:
            qs = qs.filter(
                Q(title__icontains=search)
                | Q(content__icontains=search)
                | Q(tags__name__icontains=search)
            ).distinct()

        category = request.GET.get("category")
        if category:
            qs = qs.filter(category=category)

        author = request.GET.get("author")
        if author:
            qs = qs.filter(author_id=author) if author.isdigit() else qs.none()

        posts, pagination = paginate(qs.order_by(*sort_ordering(request)), request)
        return success([post_summary(p) for p in posts], pagination=pagination)

    def post(self, request):
        user = require_user(request)
        data = validate(PostForm(data=self.payload))
        post = Post(author=user)
        tags = apply_post_fields(post, dict(data))
        if not post.category:
            post.category = blog_settings.DEFAULT_CATEGORY
        if not post.status:
            post.status = Post.Status.DRAFT
        post.save()
        if tags:
            post.set_tags(tags)
        logger.info("User %s created post %s", user.pk, post.pk)
        return success(post_detail(post), status=201)


class PostFeedView(AuthRequiredMixin, ApiView):
    """Published posts by the users the caller follows."""

    def get(self, request):
        qs = post_list_queryset().published().filter(
            author__in=request.api_user.following.all()
        )
        posts, pagination = paginate(qs.order_by("-published_at", "-pk"), request)
        return success([post_summary(p) for p in posts], pagination=pagination)


class CategoryListView(ApiView):
    def get(self, request):
        return success(list(blog_settings.CATEGORIES))


class PostDetailView(ApiView):
    """
    A single post.

    GET looks the post up by slug and is public; PUT and DELETE take the
    numeric id and are limited to the owner or an admin.
    """

    def get(self, request, key):
        post = get_or_404(
            post_list_queryset().published(),
            "Post not found",
            slug=key,
        )
        post.increment_view_count()

        replies = Prefetch("replies", queryset=comment_queryset().order_by("created_at", "pk"))
        threads = (
            comment_queryset()
            .top_level()
            .filter(post=post)
            .prefetch_related(replies)
            .order_by("-created_at", "-pk")
        )
        comments = [comment_data(c, replies=c.replies.all()) for c in threads]
        return success(post_detail(post, comments=comments))

    def put(self, request, key):
        user = require_user(request)
        form = PostForm(data=self.payload, partial=True)
        validate(form)
        post = get_or_404(Post.objects.all(), "Post not found", pk=_post_id(key))
        ensure_owner_or_admin(post, user, "update this post")

        tags = apply_post_fields(post, form.changed_fields())
        post.save()
        if tags is not None:
            post.set_tags(tags)
        return success(post_detail(post))

    def delete(self, request, key):
        user = require_user(request)
        post = get_or_404(Post.objects.all(), "Post not found", pk=_post_id(key))
        ensure_owner_or_admin(post, user, "delete this post")
        post_id = post.pk
        _, counts = post.delete()
        logger.info("User %s deleted post %s (%s)", user.pk, post_id, counts)
        return success(message="Post deleted successfully")


class PostLikeView(AuthRequiredMixin, ApiView):
    def post(self, request, pk):
        post = get_or_404(Post.objects.all(), "Post not found", pk=pk)
        like_count = post.like(request.api_user)
        return success(message="Post liked successfully", like_count=like_count)

    def delete(self, request, pk):
        post = get_or_404(Post.objects.all(), "Post not found", pk=pk)
        like_count = post.unlike(request.api_user)
        return success(message="Post unliked successfully", like_count=like_count)
