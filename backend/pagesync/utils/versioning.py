import copy

from pagesync.utils.paths import deep_merge

# Document keys backed by dedicated Page columns; every other key lives in Page.fields
COLUMN_FIELDS = {
    "title": "title",
    "slug": "slug",
    "status": "status",
    "isHomepage": "is_homepage",
    "editorContent": "editor_content",
}


def snapshot_page(page):
    """Versioned fields of the page's current (latest) state."""
    snapshot = copy.deepcopy(page.fields or {})
    for key, attr in COLUMN_FIELDS.items():
        snapshot[key] = copy.deepcopy(getattr(page, attr))
    return snapshot


def apply_snapshot(page, snapshot):
    """Replace the page's current state with ``snapshot`` wholesale."""
    snapshot = copy.deepcopy(snapshot)
    for key, attr in COLUMN_FIELDS.items():
        if key in snapshot:
            setattr(page, attr, snapshot.pop(key))
    page.is_homepage = bool(page.is_homepage)
    # New dict so SQLAlchemy sees the JSON column change
    page.fields = snapshot


def apply_changes(page, data):
    """
    Merge a partial update into the page's current state.

    Structured groups deep-merge field by field; editorContent is
    replaced outright.
    """
    state = snapshot_page(page)
    changes = copy.deepcopy(data)
    editor_content = changes.pop("editorContent", None)

    deep_merge(state, changes)
    if "editorContent" in data:
        state["editorContent"] = editor_content

    apply_snapshot(page, state)


def next_version(page_id):
    from pagesync.models.page_version import PageVersion

    last = (
        PageVersion.query
        .filter_by(page_id=page_id)
        .order_by(PageVersion.version.desc())
        .first()
    )
    return (last.version + 1) if last else 1
