from pagesync.domain.invariants.editor_content import find_duplicate_item_ids


def test_no_duplicates():
    content = {
        "root": {"props": {}},
        "content": [
            {"type": "Hero", "props": {"id": "hero-1"}},
            {"type": "Text", "props": {"id": "text-1"}},
        ],
        "zones": {"sidebar": [{"type": "Text", "props": {"id": "hero-1"}}]},
    }
    # Same id in a different list is not a duplicate
    assert find_duplicate_item_ids(content) == {}


def test_duplicates_reported_per_list():
    content = {
        "content": [
            {"type": "Hero", "props": {"id": "a"}},
            {"type": "Hero", "props": {"id": "a"}},
            {"type": "Text", "props": {}},
            {"type": "Text", "props": {}},
        ],
        "zones": {
            "footer": [
                {"type": "Link", "props": {"id": "l"}},
                {"type": "Link", "props": {"id": "l"}},
            ],
        },
    }
    assert find_duplicate_item_ids(content) == {"content": ["a"], "zones.footer": ["l"]}


def test_empty_editor_content():
    assert find_duplicate_item_ids(None) == {}
    assert find_duplicate_item_ids({}) == {}
