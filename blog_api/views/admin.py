"""
Moderation endpoints for admins and moderators.
"""
import logging

from django.contrib.auth import get_user_model
from django.db.models import Count, Q
from django.db.models.functions import TruncMonth
from django.utils import timezone

from ..conf import blog_settings
from ..forms import AdminUserForm, PostStatusForm
from ..models import Comment, Post, User
from ..pagination import paginate
from ..serializers import comment_data, post_summary, user_private
from .base import ApiView, RoleRequiredMixin, get_or_404, success, validate
from .comments import comment_queryset
from .posts import post_list_queryset

logger = logging.getLogger(__name__)


def months_ago(now, months):
    """First instant of the month ``months`` before ``now``'s month."""
    index = now.year * 12 + (now.month - 1) - months
    return now.replace(
        year=index // 12,
        month=index % 12 + 1,
        day=1,
        hour=0,
        minute=0,
        second=0,
        microsecond=0,
    )


class AdminView(RoleRequiredMixin, ApiView):
    allowed_roles = (User.Role.ADMIN, User.Role.MODERATOR)


class DashboardView(AdminView):
    def get(self, request):
        UserModel = get_user_model()
        recent = blog_settings.DASHBOARD_RECENT_ITEMS

        since = months_ago(timezone.now(), blog_settings.DASHBOARD_MONTHS)
        monthly_users = (
            UserModel.objects.filter(created_at__gte=since)
            .annotate(month=TruncMonth("created_at"))
            .values("month")
            .annotate(count=Count("id"))
            .order_by("month")
        )
        posts_by_category = (
            Post.objects.values("category")
            .annotate(count=Count("id"))
            .order_by("-count", "category")
        )

        return success({
            "total_users": UserModel.objects.count(),
            "total_posts": Post.objects.count(),
            "total_comments": Comment.objects.count(),
            "published_posts": Post.objects.published().count(),
            "draft_posts": Post.objects.filter(status=Post.Status.DRAFT).count(),
            "recent_users": [
                {
                    "id": u.pk,
                    "username": u.username,
                    "email": u.email,
                    "created_at": u.created_at,
                }
                for u in UserModel.objects.order_by("-created_at", "-pk")[:recent]
            ],
            "recent_posts": [
                {
                    "id": p.pk,
                    "title": p.title,
                    "author": p.author_id,
                    "status": p.status,
                    "created_at": p.created_at,
                }
                for p in Post.objects.order_by("-created_at", "-pk")[:recent]
            ],
            "posts_by_category": [
                {"category": row["category"], "count": row["count"]}
                for row in posts_by_category
            ],
            "monthly_users": [
                {
                    "year": row["month"].year,
                    "month": row["month"].month,
                    "count": row["count"],
                }
                for row in monthly_users
            ],
        })


class AdminUserListView(AdminView):
    def get(self, request):
        qs = get_user_model().objects.all()
        search = request.GET.get("search", "").strip()
        if search:
            qs = qs.filter(
                Q(username__icontains=search)
                | Q(email__icontains=search)
                | Q(first_name__icontains=search)
                | Q(last_name__icontains=search)
            )
        role = request.GET.get("role")
        if role:
            qs = qs.filter(role=role)
        page, pagination = paginate(qs.order_by("-created_at", "-pk"), request)
        return success([user_private(u) for u in page], pagination=pagination)


class AdminUserDetailView(AdminView):
    def put(self, request, pk):
        form = AdminUserForm(data=self.payload)
        validate(form)
        user = get_or_404(get_user_model().objects.all(), "User not found", pk=pk)

        changes = {
            name: value
            for name, value in form.changed_fields().items()
            if value not in ("", None)
        }
        for name, value in changes.items():
            setattr(user, name, value)
        if changes:
            user.save(update_fields=list(changes) + ["updated_at"])
            logger.info(
                "User %s updated account %s: %s", request.api_user.pk, user.pk, changes
            )
        return success(user_private(user))

    def delete(self, request, pk):
        user = get_or_404(get_user_model().objects.all(), "User not found", pk=pk)
        user.delete_account()
        return success(message="User deleted successfully")


class AdminPostListView(AdminView):
    def get(self, request):
        qs = post_list_queryset()
        status = request.GET.get("status")
        if status:
            qs = qs.filter(status=status)
        category = request.GET.get("category")
        if category:
            qs = qs.filter(category=category)
        posts, pagination = paginate(qs.order_by("-created_at", "-pk"), request)
        return success([post_summary(p) for p in posts], pagination=pagination)


class AdminPostDetailView(AdminView):
    def put(self, request, pk):
        data = validate(PostStatusForm(data=self.payload))
        post = get_or_404(post_list_queryset(), "Post not found", pk=pk)
        post.status = data["status"]
        post.save()
        logger.info("User %s set post %s to %s", request.api_user.pk, post.pk, post.status)
        return success(post_summary(post))

    def delete(self, request, pk):
        post = get_or_404(Post.objects.all(), "Post not found", pk=pk)
        _, counts = post.delete()
        logger.info("User %s deleted post %s (%s)", request.api_user.pk, pk, counts)
        return success(message="Post deleted successfully")


class AdminCommentListView(AdminView):
    def get(self, request):
        qs = comment_queryset().select_related("post").order_by("-created_at", "-pk")
        comments, pagination = paginate(qs, request)
        data = []
        for comment in comments:
            item = comment_data(comment)
            item["post"] = {
                "id": comment.post_id,
                "title": comment.post.title,
                "slug": comment.post.slug,
            }
            data.append(item)
        return success(data, pagination=pagination)


class AdminCommentDetailView(AdminView):
    def delete(self, request, pk):
        comment = get_or_404(Comment.objects.all(), "Comment not found", pk=pk)
        _, counts = comment.delete()
        logger.info("User %s deleted comment %s (%s)", request.api_user.pk, pk, counts)
        return success(message="Comment deleted successfully")
