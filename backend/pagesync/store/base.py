# pagesync/store/base.py
"""
Document store contract consumed by the page lifecycle.

Any backend that implements ``DocumentStore`` can sit behind the
controller; ``SqlAlchemyDocumentStore`` is the one the app ships with.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, TypedDict


class FindResult(TypedDict):
    docs: List[Dict[str, Any]]
    totalDocs: int
    totalPages: int
    page: int
    limit: int
    hasPrevPage: bool
    hasNextPage: bool


class StoreError(Exception):
    """Unexpected backend failure. Message may contain internals; never surface it."""


class StoreValidationError(StoreError):
    """
    A write was rejected by store-level validation.

    ``errors`` is a list of ``{"field": ..., "message": ...}`` entries.
    """

    def __init__(self, errors: List[Dict[str, str]]):
        super().__init__(", ".join(e.get("message") or e["field"] for e in errors))
        self.errors = errors

    def field_error(self, field: str) -> Optional[Dict[str, str]]:
        return next((e for e in self.errors if e.get("field") == field), None)


class BeforeChangeHook(Protocol):
    def __call__(
        self,
        store: "DocumentStore",
        *,
        collection: str,
        doc_id: Optional[str],
        data: Dict[str, Any],
        context: Dict[str, Any],
    ) -> None: ...


class DocumentStore(Protocol):
    def find(
        self,
        collection: str,
        where: Optional[Dict[str, Any]] = None,
        page: int = 1,
        limit: int = 10,
        sort: Optional[str] = None,
    ) -> FindResult: ...

    def find_by_id(self, collection: str, doc_id: str, draft: bool = True) -> Optional[Dict[str, Any]]: ...

    def create(
        self,
        collection: str,
        data: Dict[str, Any],
        draft: bool = True,
        context: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]: ...

    def update(
        self,
        collection: str,
        doc_id: str,
        data: Dict[str, Any],
        draft: bool = True,
        context: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]: ...

    def delete(self, collection: str, doc_id: str) -> Dict[str, Any]: ...

    def find_versions(
        self,
        collection: str,
        where: Dict[str, Any],
        sort: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> FindResult: ...

    def restore_version(self, collection: str, version_id: str) -> Dict[str, Any]: ...

    def patch_published(
        self,
        collection: str,
        doc_id: str,
        data: Dict[str, Any],
    ) -> Optional[Dict[str, Any]]: ...


class DocumentNotFound(StoreError):
    """No document (or version) with the requested id in the collection."""
