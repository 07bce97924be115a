import pytest

from pagesync.store.sqlalchemy_store import build_where


def test_or_matches_either_branch(store):
    store.create("pages", {"title": "Home", "slug": "home"})
    store.create("pages", {"title": "About", "slug": "about"})
    store.create("pages", {"title": "Team", "slug": "team"})

    result = store.find(
        "pages",
        where={"or": [{"slug": {"equals": "home"}}, {"title": {"contains": "bou"}}]},
        sort="slug",
    )

    assert [doc["slug"] for doc in result["docs"]] == ["about", "home"]


def test_unknown_operator_is_rejected(app):
    with pytest.raises(ValueError):
        build_where({"slug": {"in": ["home", "about"]}})


def test_unknown_field_is_rejected(app):
    with pytest.raises(ValueError):
        build_where({"editorContent": {"equals": {}}})
