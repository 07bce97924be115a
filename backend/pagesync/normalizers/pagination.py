# pagesync/normalizers/pagination.py
from typing import Any, Callable, Dict


def normalize_pagination(
    pagination,
    normalize_fn: Callable[[Any], Dict[str, Any]],
) -> Dict[str, Any]:
    """
    Normalize a Flask-SQLAlchemy ``Pagination`` into the list envelope
    shared by every list endpoint.
    """
    return {
        "docs": [normalize_fn(item) for item in pagination.items],
        "totalDocs": pagination.total or 0,
        "totalPages": pagination.pages,
        "page": pagination.page,
        "limit": pagination.per_page,
        "hasPrevPage": pagination.has_prev,
        "hasNextPage": pagination.has_next,
    }
