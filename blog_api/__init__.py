"""
django-blog-api - A JSON blogging API for Django.

Features:
- Users with roles and a follower/following graph
- Posts with derived slugs, read time and publish timestamps
- Threaded comments (one level of replies)
- Guarded likes on posts and comments
- Paginated listing, search and an admin dashboard
"""

__version__ = "0.1.0"
