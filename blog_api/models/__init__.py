"""
Models for django-blog-api.

All models are importable from blog_api.models:

    from blog_api.models import User, Post, Tag, Comment
"""
from .users import User
from .posts import Tag, Post
from .comments import Comment

__all__ = [
    "User",
    "Tag",
    "Post",
    "Comment",
]
