"""
URL configuration for django-blog-api.

Include in your project urls.py:

    path('api/', include('blog_api.urls')),
"""
from django.urls import include, path

from .views import admin, auth, comments, posts, users

app_name = "blog_api"

auth_patterns = [
    path("register/", auth.RegisterView.as_view(), name="register"),
    path("login/", auth.LoginView.as_view(), name="login"),
    path("me/", auth.MeView.as_view(), name="me"),
    path("forgot-password/", auth.ForgotPasswordView.as_view(), name="forgot_password"),
    path(
        "reset-password/<str:uidb64>/<str:token>/",
        auth.ResetPasswordView.as_view(),
        name="reset_password",
    ),
]

post_patterns = [
    path("", posts.PostListView.as_view(), name="post_list"),
    # Fixed paths before the slug catch-all
    path("feed/", posts.PostFeedView.as_view(), name="post_feed"),
    path("categories/", posts.CategoryListView.as_view(), name="post_categories"),
    path("<int:pk>/like/", posts.PostLikeView.as_view(), name="post_like"),
    path("<str:key>/", posts.PostDetailView.as_view(), name="post_detail"),
]

user_patterns = [
    path("", users.UserListView.as_view(), name="user_list"),
    path("profile/", users.ProfileView.as_view(), name="user_profile"),
    path("<int:pk>/", users.UserDetailView.as_view(), name="user_detail"),
    path("<int:pk>/follow/", users.FollowView.as_view(), name="user_follow"),
    path("<int:pk>/followers/", users.FollowersView.as_view(), name="user_followers"),
    path("<int:pk>/following/", users.FollowingView.as_view(), name="user_following"),
    path("<int:pk>/posts/", users.UserPostsView.as_view(), name="user_posts"),
]

comment_patterns = [
    path("", comments.CommentCreateView.as_view(), name="comment_create"),
    path("post/<int:post_id>/", comments.PostCommentsView.as_view(), name="post_comments"),
    path("<int:pk>/", comments.CommentDetailView.as_view(), name="comment_detail"),
    path("<int:pk>/like/", comments.CommentLikeView.as_view(), name="comment_like"),
    path("<int:pk>/replies/", comments.CommentRepliesView.as_view(), name="comment_replies"),
]

admin_patterns = [
    path("dashboard/", admin.DashboardView.as_view(), name="admin_dashboard"),
    path("users/", admin.AdminUserListView.as_view(), name="admin_users"),
    path("users/<int:pk>/", admin.AdminUserDetailView.as_view(), name="admin_user_detail"),
    path("posts/", admin.AdminPostListView.as_view(), name="admin_posts"),
    path("posts/<int:pk>/", admin.AdminPostDetailView.as_view(), name="admin_post_detail"),
    path("comments/", admin.AdminCommentListView.as_view(), name="admin_comments"),
    path(
        "comments/<int:pk>/",
        admin.AdminCommentDetailView.as_view(),
        name="admin_comment_detail",
    ),
]

urlpatterns = [
    path("auth/", include(auth_patterns)),
    path("posts/", include(post_patterns)),
    path("users/", include(user_patterns)),
    path("comments/", include(comment_patterns)),
    path("admin/", include(admin_patterns)),
]
