import pytest

from pagesync.domain.root_props import (
    DEFAULT_ROOT_PROPS_MAPPINGS,
    FieldMapping,
    merge_mappings,
    translate,
)
from pagesync.errors import TransformError


def test_merge_mappings_without_customs_returns_defaults():
    assert merge_mappings() == DEFAULT_ROOT_PROPS_MAPPINGS
    assert merge_mappings([]) == DEFAULT_ROOT_PROPS_MAPPINGS


def test_custom_mapping_replaces_default_with_same_key():
    custom = FieldMapping("metaTitle", "seo.headline", transform=str.upper)
    merged = merge_mappings([custom])

    by_key = [m for m in merged if m.from_key == "metaTitle"]
    assert by_key == [custom]
    assert len(merged) == len(DEFAULT_ROOT_PROPS_MAPPINGS)

    # Replaced in place, not moved to the end
    default_keys = [m.from_key for m in DEFAULT_ROOT_PROPS_MAPPINGS]
    assert [m.from_key for m in merged] == default_keys


def test_custom_only_mappings_are_appended():
    merged = merge_mappings([FieldMapping("heroImage", "meta.image"), FieldMapping("title", "meta.title")])
    keys = [m.from_key for m in merged]
    assert keys[-1] == "heroImage"
    assert keys.count("title") == 1
    assert next(m for m in merged if m.from_key == "title").to == "meta.title"


def test_field_mapping_from_dict():
    mapping = FieldMapping.from_dict({"from": "author", "to": "meta.author"})
    assert mapping == FieldMapping("author", "meta.author")


def test_translate_builds_nested_patch():
    patch = translate({
        "title": "Home",
        "metaTitle": "Home | Site",
        "noindex": False,
        "conversionValue": 25,
        "unmapped": "ignored",
    })
    assert patch == {
        "title": "Home",
        "meta": {"title": "Home | Site", "noindex": False},
        "conversionTracking": {"conversionValue": 25},
    }


def test_translate_skips_absent_props_entirely():
    patch = translate({"pageLayout": "wide"})
    assert patch == {"pageLayout": "wide"}
    assert "meta" not in patch
    assert "conversionTracking" not in patch
    assert "isHomepage" not in patch


def test_translate_writes_explicit_none():
    assert translate({"metaDescription": None}) == {"meta": {"description": None}}


def test_translate_applies_transform():
    mappings = [FieldMapping("conversionValue", "conversionTracking.conversionValue", transform=float)]
    assert translate({"conversionValue": "12.5"}, mappings) == {
        "conversionTracking": {"conversionValue": 12.5}
    }


def test_translate_raises_transform_error():
    def explode(value):
        raise RuntimeError("bad date")

    with pytest.raises(TransformError) as exc_info:
        translate({"publishDate": "nope"}, [FieldMapping("publishDate", "publishedAt", transform=explode)])

    assert exc_info.value.field == "publishDate"
    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_translate_does_not_mutate_input():
    props = {"metaTitle": "x"}
    translate(props)
    assert props == {"metaTitle": "x"}
