"""
Page/limit pagination for list endpoints.
"""
import math

from .conf import blog_settings


def _positive_int(value, default):
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def page_params(request):
    """Return (page, limit) from the query string, falling back to defaults."""
    page = _positive_int(request.GET.get("page"), 1)
    limit = _positive_int(request.GET.get("limit"), blog_settings.POSTS_PER_PAGE)
    return page, min(limit, blog_settings.MAX_PAGE_SIZE)


def paginate(queryset, request):
    """
    Slice ``queryset`` for the requested page.

    Returns (items, pagination) where pagination is
    ``{"page", "limit", "total", "pages"}`` and pages is ceil(total / limit).
    """
    page, limit = page_params(request)
    total = queryset.count()
    offset = (page - 1) * limit
    # Past the last page; never hand an unbounded OFFSET to the database
    if offset >= total:
        items = []
    else:
        items = list(queryset[offset:offset + limit])
    pagination = {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit),
    }
    return items, pagination
