"""
JSON views for django-blog-api, grouped by resource.
"""
