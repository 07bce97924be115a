# pagesync/utils/pagination.py
from __future__ import annotations

from typing import Any, Optional

from flask_sqlalchemy.query import Query

from pagesync.errors import ValidationError


def parse_sort(sort: Optional[str], columns: dict[str, Any], default: str) -> Any:
    """
    Resolve a ``"-field"`` / ``"field"`` sort string to an ORDER BY clause.

    Only keys of ``columns`` are accepted.
    """
    sort = sort or default
    descending = sort.startswith("-")
    name = sort.lstrip("-")

    column = columns.get(name)
    if column is None:
        raise ValidationError(f"Cannot sort by '{name}'", field="sort")

    return column.desc() if descending else column.asc()


def paginate_query(query: Query, *, page: int, limit: int):
    """
    Offset-paginate a query.

    Out-of-range pages return an empty page instead of 404.
    """
    if page < 1:
        raise ValidationError("Page must be at least 1", field="page")
    if limit < 1:
        raise ValidationError("Limit must be greater than zero", field="limit")

    return query.paginate(page=page, per_page=limit, error_out=False)
