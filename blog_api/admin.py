"""
Django admin configuration for blog_api.
"""
from django.contrib import admin
from django.contrib.auth import forms as auth_forms
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import Comment, Post, Tag, User


class UserCreationForm(auth_forms.UserCreationForm):
    class Meta(auth_forms.UserCreationForm.Meta):
        model = User
        fields = ("username", "email")


class UserChangeForm(auth_forms.UserChangeForm):
    class Meta(auth_forms.UserChangeForm.Meta):
        model = User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    form = UserChangeForm
    add_form = UserCreationForm
    list_display = [
        "username",
        "email",
        "full_name",
        "role",
        "is_verified",
        "is_active",
        "created_at",
    ]
    list_filter = ["role", "is_verified", "is_active", "is_staff"]
    search_fields = ["username", "email", "first_name", "last_name"]
    filter_horizontal = ["following", "groups", "user_permissions"]
    readonly_fields = ["created_at", "updated_at", "last_login", "date_joined"]

    fieldsets = BaseUserAdmin.fieldsets + (
        ("Profile", {
            "fields": ("bio", "avatar", "role", "is_verified", "following")
        }),
        ("Timestamps", {
            "fields": ("created_at", "updated_at"),
            "classes": ("collapse",),
        }),
    )
    add_fieldsets = (
        (None, {
            "classes": ("wide",),
            "fields": ("username", "email", "password1", "password2"),
        }),
    )

    actions = ["verify_users"]

    @admin.action(description="Mark selected users as verified")
    def verify_users(self, request, queryset):
        count = queryset.update(is_verified=True)
        self.message_user(request, f"{count} users verified.")

    def delete_model(self, request, obj):
        obj.delete_account()

    def delete_queryset(self, request, queryset):
        for user in queryset:
            user.delete_account()


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    list_display = ["name", "slug", "created_at"]
    search_fields = ["name", "slug"]
    readonly_fields = ["created_at"]


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = [
        "title_preview",
        "author",
        "status",
        "category",
        "view_count",
        "read_time",
        "published_at",
        "created_at",
    ]
    list_filter = ["status", "category", "created_at"]
    search_fields = ["title", "content", "author__username"]
    raw_id_fields = ["author"]
    filter_horizontal = ["tags", "likes"]
    date_hierarchy = "created_at"
    readonly_fields = [
        "slug",
        "read_time",
        "view_count",
        "published_at",
        "created_at",
        "updated_at",
    ]

    fieldsets = (
        (None, {
            "fields": ("title", "slug", "content", "excerpt", "author")
        }),
        ("Taxonomy", {
            "fields": ("category", "tags", "featured_image")
        }),
        ("Status", {
            "fields": ("status", "published_at")
        }),
        ("Engagement", {
            "fields": ("likes", "view_count", "read_time"),
            "classes": ("collapse",),
        }),
        ("Metadata", {
            "fields": ("created_at", "updated_at"),
            "classes": ("collapse",),
        }),
    )

    actions = ["publish_posts", "archive_posts"]

    def title_preview(self, obj):
        """Truncated title for list display."""
        return obj.title[:60] + "..." if len(obj.title) > 60 else obj.title

    title_preview.short_description = "Title"

    @admin.action(description="Publish selected posts")
    def publish_posts(self, request, queryset):
        for post in queryset:
            post.publish()
        self.message_user(request, f"{queryset.count()} posts published.")

    @admin.action(description="Archive selected posts")
    def archive_posts(self, request, queryset):
        for post in queryset:
            post.archive()
        self.message_user(request, f"{queryset.count()} posts archived.")


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = [
        "preview",
        "author",
        "post",
        "parent",
        "is_edited",
        "created_at",
    ]
    list_filter = ["is_edited", "created_at"]
    search_fields = ["content", "author__username", "post__title"]
    raw_id_fields = ["post", "author", "parent"]
    filter_horizontal = ["likes"]
    readonly_fields = ["is_edited", "edited_at", "created_at", "updated_at"]
