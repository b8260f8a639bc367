"""
Response shaping for django-blog-api.

Each function turns a model instance into a plain dict; datetimes are left
as objects for ``JsonResponse``'s encoder. Passwords are never included.
"""


def user_summary(user):
    """Fields embedded wherever a user is referenced (authors, followers)."""
    return {
        "id": user.pk,
        "username": user.username,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "full_name": user.full_name,
        "avatar": user.avatar,
    }


def user_public(user):
    data = user_summary(user)
    data.update({
        "bio": user.bio,
        "follower_count": user.follower_count,
        "following_count": user.following_count,
        "created_at": user.created_at,
    })
    return data


def user_private(user):
    """Public profile plus account fields, for the user themselves and admins."""
    data = user_public(user)
    data.update({
        "email": user.email,
        "role": user.role,
        "is_verified": user.is_verified,
        "is_active": user.is_active,
        "updated_at": user.updated_at,
    })
    return data


def post_summary(post):
    return {
        "id": post.pk,
        "title": post.title,
        "slug": post.slug,
        "excerpt": post.excerpt,
        "category": post.category,
        "tags": [tag.name for tag in post.tags.all()],
        "featured_image": post.featured_image,
        "status": post.status,
        "read_time": post.read_time,
        "view_count": post.view_count,
        "like_count": post.like_count,
        "comment_count": post.comment_count,
        "author": user_summary(post.author),
        "published_at": post.published_at,
        "created_at": post.created_at,
    }


def post_detail(post, comments=None):
    data = post_summary(post)
    data.update({
        "content": post.content,
        "is_published": post.is_published,
        "likes": list(post.likes.values_list("pk", flat=True)),
        "updated_at": post.updated_at,
    })
    if comments is not None:
        data["comments"] = comments
    return data


def comment_data(comment, replies=None):
    data = {
        "id": comment.pk,
        "content": comment.content,
        "post": comment.post_id,
        "parent_comment": comment.parent_id,
        "author": user_summary(comment.author),
        "like_count": comment.like_count,
        "reply_count": comment.reply_count,
        "is_edited": comment.is_edited,
        "edited_at": comment.edited_at,
        "created_at": comment.created_at,
        "updated_at": comment.updated_at,
    }
    if replies is not None:
        data["replies"] = [comment_data(reply) for reply in replies]
    return data
