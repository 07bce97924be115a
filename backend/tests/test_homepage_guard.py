import pytest

from pagesync.domain.invariants.homepage import (
    SKIP_HOMEPAGE_GUARD,
    enforce_homepage_unique,
    find_homepage_holder,
    prepare_homepage_swap,
)
from pagesync.errors import HomepageConflictError


class ExplodingStore:
    """Fails the test if the guard touches the store at all."""

    def find(self, *args, **kwargs):
        raise AssertionError("store.find should not be called")

    def update(self, *args, **kwargs):
        raise AssertionError("store.update should not be called")


def _homepages(store):
    result = store.find("pages", where={"isHomepage": {"equals": True}}, limit=10)
    return result["docs"]


def _seed(store, title, slug, is_homepage=False, draft=True):
    doc = store.create(
        "pages",
        {"title": title, "slug": slug, "isHomepage": False},
        draft=draft,
    )
    if is_homepage:
        doc = store.update(
            "pages", doc["id"], {"isHomepage": True}, draft=draft
        )
    return doc


def test_not_becoming_homepage_does_not_query(app):
    assert prepare_homepage_swap(ExplodingStore(), "pages", "p1", False, False) is None
    assert prepare_homepage_swap(ExplodingStore(), "pages", "p1", False, True) is None


def test_hook_skip_flag_bypasses_guard(app):
    enforce_homepage_unique(
        ExplodingStore(),
        collection="pages",
        doc_id="p1",
        data={"isHomepage": True},
        context={SKIP_HOMEPAGE_GUARD: True},
    )


def test_first_homepage_needs_no_swap(store):
    page = _seed(store, "Home", "home")
    assert prepare_homepage_swap(store, "pages", page["id"], True, False) is None


def test_page_already_holding_flag_is_not_a_conflict(store):
    home = _seed(store, "Home", "home", is_homepage=True)
    assert find_homepage_holder(store, "pages", exclude_id=home["id"]) is None
    assert prepare_homepage_swap(store, "pages", home["id"], True, False) is None


def test_conflict_names_current_holder(store):
    home = _seed(store, "Home", "home", is_homepage=True)
    about = _seed(store, "About", "about")

    with pytest.raises(HomepageConflictError) as exc_info:
        prepare_homepage_swap(store, "pages", about["id"], True, False)

    error = exc_info.value
    assert error.status_code == 409
    assert error.field == "isHomepage"
    assert error.existing_homepage == {"id": home["id"], "title": "Home", "slug": "home"}
    assert error.message == '"Home" is already set as the homepage'
    assert store.find_by_id("pages", home["id"])["isHomepage"] is True


def test_swap_unsets_former_holder(store):
    home = _seed(store, "Home", "home", is_homepage=True)
    about = _seed(store, "About", "about")

    former = prepare_homepage_swap(store, "pages", about["id"], True, True)
    assert former["id"] == home["id"]
    assert store.find_by_id("pages", home["id"])["isHomepage"] is False

    store.update("pages", about["id"], {"isHomepage": True}, context={SKIP_HOMEPAGE_GUARD: True})
    assert [doc["id"] for doc in _homepages(store)] == [about["id"]]


def test_swap_keeps_published_holder_published(store):
    home = _seed(store, "Home", "home", is_homepage=True, draft=False)
    about = _seed(store, "About", "about")

    prepare_homepage_swap(store, "pages", about["id"], True, True)

    latest = store.find_by_id("pages", home["id"])
    published = store.find_by_id("pages", home["id"], draft=False)
    assert latest["status"] == "published"
    assert published["isHomepage"] is False


def test_store_hook_rejects_second_homepage(store):
    _seed(store, "Home", "home", is_homepage=True)
    about = _seed(store, "About", "about")

    with pytest.raises(HomepageConflictError):
        store.update("pages", about["id"], {"isHomepage": True})


def test_collections_are_independent(store):
    _seed(store, "Home", "home", is_homepage=True)
    other = store.create("landing", {"title": "Promo", "slug": "promo"})
    assert prepare_homepage_swap(store, "landing", other["id"], True, False) is None


def _published_homepages(store):
    result = store.find("pages", where={"published.isHomepage": {"equals": True}}, limit=10)
    return [doc["id"] for doc in result["docs"]]


def test_swap_clears_live_flag_of_holder_with_pending_draft(store):
    home = _seed(store, "Home", "home", is_homepage=True, draft=False)
    store.update("pages", home["id"], {"title": "Home (editing)"}, draft=True)
    about = _seed(store, "About", "about")

    former = prepare_homepage_swap(store, "pages", about["id"], True, True)
    store.update(
        "pages",
        about["id"],
        {"isHomepage": True},
        draft=False,
        context={SKIP_HOMEPAGE_GUARD: True},
    )

    assert former["id"] == home["id"]
    assert _published_homepages(store) == [about["id"]]

    live = store.find_by_id("pages", home["id"], draft=False)
    latest = store.find_by_id("pages", home["id"])
    assert live["isHomepage"] is False
    assert live["title"] == "Home"
    assert latest["status"] == "draft"
    assert latest["title"] == "Home (editing)"
    assert latest["isHomepage"] is False


def test_live_homepage_still_holds_slot_after_draft_unset(store):
    home = _seed(store, "Home", "home", is_homepage=True, draft=False)
    store.update(
        "pages", home["id"], {"isHomepage": False}, draft=True,
    )
    about = _seed(store, "About", "about")

    with pytest.raises(HomepageConflictError) as exc_info:
        prepare_homepage_swap(store, "pages", about["id"], True, False)

    assert exc_info.value.existing_homepage["id"] == home["id"]


def test_patch_published_leaves_draft_alone(store):
    page = _seed(store, "Home", "home", draft=False)
    store.update("pages", page["id"], {"meta": {"title": "Draft"}}, draft=True)

    live = store.patch_published("pages", page["id"], {"meta": {"noindex": True}})

    assert live["meta"] == {"noindex": True}
    latest = store.find_by_id("pages", page["id"])
    assert latest["meta"] == {"title": "Draft"}
    assert latest["status"] == "draft"


def test_patch_published_on_unpublished_page_is_noop(store):
    page = _seed(store, "Draft only", "draft-only")

    assert store.patch_published("pages", page["id"], {"isHomepage": False}) is None
    assert store.find_by_id("pages", page["id"], draft=False) is None
