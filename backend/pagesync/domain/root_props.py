# pagesync/domain/root_props.py
"""
Translate the visual editor's root props into structured page fields.

The editor keeps page-level settings (title, SEO, layout, homepage flag)
as a flat map on its root node. Each ``FieldMapping`` routes one of those
props to a dot path in the page document, optionally through a transform.
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from pagesync.errors import TransformError
from pagesync.utils.paths import MISSING, set_nested_value


@dataclass(frozen=True)
class FieldMapping:
    from_key: str
    to: str
    transform: Optional[Callable[[Any], Any]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FieldMapping":
        return cls(
            from_key=data["from"],
            to=data["to"],
            transform=data.get("transform"),
        )


DEFAULT_ROOT_PROPS_MAPPINGS: List[FieldMapping] = [
    # Core page fields
    FieldMapping("title", "title"),
    FieldMapping("slug", "slug"),
    FieldMapping("pageLayout", "pageLayout"),
    FieldMapping("pageType", "pageType"),
    FieldMapping("isHomepage", "isHomepage"),

    # SEO
    FieldMapping("metaTitle", "meta.title"),
    FieldMapping("metaDescription", "meta.description"),
    FieldMapping("noindex", "meta.noindex"),
    FieldMapping("nofollow", "meta.nofollow"),
    FieldMapping("excludeFromSitemap", "meta.excludeFromSitemap"),

    # Conversion tracking
    FieldMapping("isConversionPage", "conversionTracking.isConversionPage"),
    FieldMapping("conversionType", "conversionTracking.conversionType"),
    FieldMapping("conversionValue", "conversionTracking.conversionValue"),
]


def merge_mappings(custom: Optional[Iterable[FieldMapping]] = None) -> List[FieldMapping]:
    """
    Build the effective mapping list.

    Defaults go in first; a custom mapping with the same ``from_key``
    replaces the default in place, custom-only keys are appended.
    """
    if not custom:
        return list(DEFAULT_ROOT_PROPS_MAPPINGS)

    by_key: Dict[str, FieldMapping] = {}

    for mapping in DEFAULT_ROOT_PROPS_MAPPINGS:
        by_key[mapping.from_key] = mapping

    for mapping in custom:
        by_key[mapping.from_key] = mapping

    return list(by_key.values())


def translate(
    root_props: Mapping[str, Any],
    custom_mappings: Optional[Iterable[FieldMapping]] = None,
) -> Dict[str, Any]:
    """
    Return a sparse patch of structured fields for ``root_props``.

    Props missing from the input are skipped entirely so a partial edit
    never clobbers stored values. Pure; no store access.
    """
    patch: Dict[str, Any] = {}

    for mapping in merge_mappings(custom_mappings):
        value = root_props.get(mapping.from_key, MISSING)
        if value is MISSING:
            continue

        if mapping.transform is not None:
            try:
                value = mapping.transform(value)
            except Exception as exc:
                raise TransformError(
                    f"Transform for root prop '{mapping.from_key}' failed: {exc}",
                    field=mapping.from_key,
                ) from exc

        set_nested_value(patch, mapping.to, value)

    return patch
