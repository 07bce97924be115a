# pagesync/schemas/pages.py
"""Request types for page operations, validated once at the HTTP boundary."""
from typing import Any, Dict, List, Literal, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as SchemaValidationError

from pagesync.errors import ValidationError

PageStatus = Literal["draft", "published"]

M = TypeVar("M", bound=BaseModel)


class ContentItem(BaseModel):
    """One block in the editor tree. Props are free-form beyond ``id``."""

    model_config = ConfigDict(extra="allow")

    type: str
    props: Dict[str, Any] = Field(default_factory=dict)


class RootNode(BaseModel):
    model_config = ConfigDict(extra="allow")

    props: Dict[str, Any] = Field(default_factory=dict)


class EditorContent(BaseModel):
    model_config = ConfigDict(extra="allow")

    root: RootNode = Field(default_factory=RootNode)
    content: List[ContentItem] = Field(default_factory=list)
    zones: Dict[str, List[ContentItem]] = Field(default_factory=dict)


class _Request(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True, str_strip_whitespace=True)


class CreatePageRequest(_Request):
    title: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    editor_content: Optional[EditorContent] = Field(default=None, alias="editorContent")
    status: Optional[PageStatus] = None


class UpdatePageRequest(_Request):
    editor_content: Optional[EditorContent] = Field(default=None, alias="editorContent")
    title: Optional[str] = Field(default=None, min_length=1)
    slug: Optional[str] = Field(default=None, min_length=1)
    status: Optional[PageStatus] = None
    is_homepage: Optional[bool] = Field(default=None, alias="isHomepage")
    # Any other structured fields (meta, conversionTracking, pageLayout, ...)
    fields: Dict[str, Any] = Field(default_factory=dict)
    swap_homepage: bool = Field(default=False, alias="swapHomepage")
    autosave: bool = False

    @field_validator("fields")
    @classmethod
    def no_reserved_fields(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        reserved = {"id", "status", "editorContent", "createdAt", "updatedAt"} & value.keys()
        if reserved:
            raise ValueError(f"fields cannot set {', '.join(sorted(reserved))}")
        return value


class RestoreVersionRequest(_Request):
    version_id: str = Field(min_length=1, alias="versionId")


class ListPagesQuery(_Request):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1)
    search: str = ""
    status: Literal["draft", "published", "all"] = "all"
    sort: str = "-updatedAt"


class ListVersionsQuery(_Request):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1)


def parse_request(model: Type[M], data: Any) -> M:
    """
    Validate ``data`` into ``model``.

    Pydantic errors become the project's ValidationError pointing at the
    first offending field.
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    try:
        return model.model_validate(data)
    except SchemaValidationError as exc:
        errors = exc.errors(include_url=False, include_context=False, include_input=False)
        first = errors[0]
        field = ".".join(str(part) for part in first["loc"])
        details = [
            {"field": ".".join(str(part) for part in e["loc"]), "message": e["msg"]}
            for e in errors
        ]
        raise ValidationError(
            f"Validation failed: {field}: {first['msg']}",
            field=field,
            details=details,
        ) from exc
