# pagesync/domain/invariants/homepage.py
"""
At most one page per collection may carry ``isHomepage=true``.

The homepage is not stored anywhere as its own record; it is whatever
page currently holds the flag, so the rule is checked on demand. Every
write path that can set the flag goes through this module.
"""
from typing import Any, Dict, Optional

from flask import current_app

from pagesync.errors import HomepageConflictError

# Context flag telling the store to skip ``enforce_homepage_unique`` for one write
SKIP_HOMEPAGE_GUARD = "skip_homepage_guard"


def find_homepage_holder(store, collection: str, exclude_id: Optional[str]) -> Optional[Dict[str, Any]]:
    """The page holding the flag in its latest or its published state, if any."""
    conditions = [{"or": [
        {"isHomepage": {"equals": True}},
        {"published.isHomepage": {"equals": True}},
    ]}]
    if exclude_id:
        conditions.append({"id": {"not_equals": exclude_id}})

    result = store.find(collection, where={"and": conditions}, limit=1)
    return result["docs"][0] if result["docs"] else None


def unset_homepage(store, collection: str, doc_id: str, *, holder_status: Optional[str] = None) -> Dict[str, Any]:
    """
    Clear the flag on ``doc_id`` without re-entering the guard.

    A holder with a pending draft keeps that draft unpublished; its
    published state is patched separately so neither copy still claims
    the homepage.
    """
    doc = store.update(
        collection,
        doc_id,
        {"isHomepage": False},
        draft=holder_status != "published",
        context={SKIP_HOMEPAGE_GUARD: True},
    )

    published = store.find_by_id(collection, doc_id, draft=False)
    if published and published.get("isHomepage"):
        store.patch_published(collection, doc_id, {"isHomepage": False})

    return doc


def prepare_homepage_swap(
    store,
    collection: str,
    target_id: Optional[str],
    intended_is_homepage: bool,
    swap_requested: bool,
) -> Optional[Dict[str, Any]]:
    """
    Make room for ``target_id`` to become the homepage.

    Returns the former holder when a swap happened, None when there was
    nothing to do. Raises HomepageConflictError when another page holds
    the flag and no swap was requested.
    """
    if not intended_is_homepage:
        return None

    holder = find_homepage_holder(store, collection, exclude_id=target_id)
    if holder is None:
        return None

    if not swap_requested:
        current_app.logger.info(
            "Homepage conflict in %s: %s requested, %s already holds it",
            collection, target_id, holder["id"],
        )
        raise HomepageConflictError(holder)

    unset_homepage(store, collection, holder["id"], holder_status=holder.get("status"))
    current_app.logger.info(
        "Homepage swapped in %s: %s -> %s", collection, holder["id"], target_id
    )
    return holder


def enforce_homepage_unique(store, *, collection, doc_id, data, context):
    """Store before-change hook; refuses a second homepage unless told to skip."""
    if context.get(SKIP_HOMEPAGE_GUARD):
        return

    prepare_homepage_swap(
        store,
        collection,
        doc_id,
        data.get("isHomepage") is True,
        swap_requested=False,
    )
