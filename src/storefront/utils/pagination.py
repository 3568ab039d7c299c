"""Page/limit pagination over Protean querysets."""

import math

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def page_window(page=1, limit=DEFAULT_LIMIT):
    """Clamp `page` and `limit` to sane values and return them with the offset."""
    page = max(int(page or 1), 1)
    limit = min(max(int(limit or DEFAULT_LIMIT), 1), MAX_LIMIT)
    return page, limit, (page - 1) * limit


def paginate(queryset, page=1, limit=DEFAULT_LIMIT):
    """Run `queryset` for one page.

    Returns a dict with ``items`` (aggregates on this page), ``count``,
    ``total``, ``page`` and ``pages``.
    """
    page, limit, offset = page_window(page, limit)
    results = queryset.offset(offset).limit(limit).all()

    return {
        "items": results.items,
        "count": len(results.items),
        "total": results.total,
        "page": page,
        "pages": math.ceil(results.total / limit) if results.total else 0,
    }
