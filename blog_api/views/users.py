"""
User endpoints: directory, profiles, follow graph.
"""
import logging

from django.contrib.auth import get_user_model
from django.db.models import Q

from ..conf import blog_settings
from ..forms import ProfileForm
from ..pagination import paginate
from ..serializers import post_summary, user_private, user_public, user_summary
from .base import ApiView, AuthRequiredMixin, get_or_404, success, validate
from .posts import post_list_queryset

logger = logging.getLogger(__name__)


def users():
    return get_user_model().objects.filter(is_active=True)


class UserListView(ApiView):
    """Public user directory with search over names and bio."""

    def get(self, request):
        qs = users()
        search = request.GET.get("search", "").strip()
        if search:
            qs = qs.filter(
                Q(username__icontains=search)
                | Q(first_name__icontains=search)
                | Q(last_name__icontains=search)
                | Q(bio__icontains=search)
            )
        page, pagination = paginate(qs.order_by("-created_at", "-pk"), request)
        return success([user_public(u) for u in page], pagination=pagination)


class ProfileView(AuthRequiredMixin, ApiView):
    """Update the caller's own profile."""

    def put(self, request):
        form = ProfileForm(data=self.payload)
        validate(form)
        user = request.api_user
        changes = form.changed_fields()
        for name, value in changes.items():
            setattr(user, name, value)
        if changes:
            user.save(update_fields=list(changes) + ["updated_at"])
        return success(user_private(user))


class UserDetailView(ApiView):
    """A public profile with the most recent published posts."""

    def get(self, request, pk):
        user = get_or_404(users(), "User not found", pk=pk)
        posts = (
            post_list_queryset()
            .published()
            .filter(author=user)
            .order_by("-published_at", "-pk")[:blog_settings.PROFILE_RECENT_POSTS]
        )
        return success({
            "user": user_public(user),
            "posts": [post_summary(p) for p in posts],
        })


class FollowView(AuthRequiredMixin, ApiView):
    def post(self, request, pk):
        target = get_or_404(users(), "User not found", pk=pk)
        request.api_user.follow(target)
        logger.info("User %s followed %s", request.api_user.pk, target.pk)
        return success(message="User followed successfully")

    def delete(self, request, pk):
        target = get_or_404(users(), "User not found", pk=pk)
        request.api_user.unfollow(target)
        logger.info("User %s unfollowed %s", request.api_user.pk, target.pk)
        return success(message="User unfollowed successfully")


class FollowersView(ApiView):
    def get(self, request, pk):
        user = get_or_404(users(), "User not found", pk=pk)
        return success([user_summary(u) for u in user.followers.order_by("username")])


class FollowingView(ApiView):
    def get(self, request, pk):
        user = get_or_404(users(), "User not found", pk=pk)
        return success([user_summary(u) for u in user.following.order_by("username")])


class UserPostsView(ApiView):
    def get(self, request, pk):
        user = get_or_404(users(), "User not found", pk=pk)
        qs = post_list_queryset().published().filter(author=user)
        posts, pagination = paginate(qs.order_by("-published_at", "-pk"), request)
        return success([post_summary(p) for p in posts], pagination=pagination)
