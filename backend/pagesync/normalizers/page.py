import copy

from pagesync.utils.versioning import snapshot_page


def _timestamp(value):
    return value.isoformat() if value else None


def normalize_page(page, draft=True):
    """
    Page record -> API document.

    ``draft=True`` returns the latest working state; ``draft=False``
    returns the last published state, or None if never published.
    """
    if draft:
        state = snapshot_page(page)
    elif page.published is not None:
        state = copy.deepcopy(page.published)
    else:
        return None

    return {
        **state,
        "id": page.id,
        "createdAt": _timestamp(page.created_at),
        "updatedAt": _timestamp(page.updated_at),
    }
