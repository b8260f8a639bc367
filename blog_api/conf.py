"""
Configuration settings for django-blog-api.

Override these in your Django settings.py:

    BLOG_API = {
        'POSTS_PER_PAGE': 20,
        'WORDS_PER_MINUTE': 250,
        ...
    }
"""
from django.conf import settings

DEFAULTS = {
    # Pagination
    "POSTS_PER_PAGE": 10,
    "MAX_PAGE_SIZE": 100,

    # Posts
    "CATEGORIES": [
        "Technology",
        "Lifestyle",
        "Travel",
        "Food",
        "Health",
        "Business",
        "Education",
        "Entertainment",
        "Sports",
        "Other",
    ],
    "DEFAULT_CATEGORY": "Other",
    "TITLE_MAX_LENGTH": 200,
    "CONTENT_MIN_LENGTH": 10,
    "EXCERPT_LENGTH": 150,
    "EXCERPT_MAX_LENGTH": 300,
    "WORDS_PER_MINUTE": 200,
    "SLUG_MAX_LENGTH": 220,

    # Comments
    "COMMENT_MAX_LENGTH": 1000,

    # Users
    "BIO_MAX_LENGTH": 500,
    "PROFILE_RECENT_POSTS": 5,

    # Auth
    "TOKEN_MAX_AGE": 60 * 60 * 24 * 30,
    "TOKEN_SALT": "blog_api.auth",
    "PASSWORD_RESET_URL": "/reset-password/{uidb64}/{token}",

    # Admin dashboard
    "DASHBOARD_RECENT_ITEMS": 5,
    "DASHBOARD_MONTHS": 6,
}


class BlogApiSettings:
    """
    Lazy settings object that reads from Django settings.

    Access via: from blog_api.conf import blog_settings
    """

    def __getattr__(self, name):
        if name not in DEFAULTS:
            raise AttributeError(f"Invalid blog_api setting: {name}")

        user_settings = getattr(settings, "BLOG_API", {})
        return user_settings.get(name, DEFAULTS[name])

    @property
    def CATEGORY_CHOICES(self):
        """Return categories as Django choices."""
        return [(name, name) for name in self.CATEGORIES]


blog_settings = BlogApiSettings()
