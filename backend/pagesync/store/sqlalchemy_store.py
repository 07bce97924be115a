# pagesync/store/sqlalchemy_store.py
import copy
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, or_, true
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from pagesync.extensions import db
from pagesync.models.base import utc_now
from pagesync.models.page import Page
from pagesync.models.page_version import PageVersion
from pagesync.normalizers.page import normalize_page
from pagesync.normalizers.pagination import normalize_pagination
from pagesync.normalizers.version import normalize_version
from pagesync.utils.pagination import paginate_query, parse_sort
from pagesync.utils.paths import deep_merge
from pagesync.utils.versioning import apply_changes, apply_snapshot, next_version, snapshot_page
from .base import BeforeChangeHook, DocumentNotFound, FindResult, StoreError, StoreValidationError

WHERE_COLUMNS = {
    "id": Page.id,
    "title": Page.title,
    "slug": Page.slug,
    "status": Page.status,
    "isHomepage": Page.is_homepage,
    "published.isHomepage": Page.published_is_homepage,
}

PAGE_SORT_COLUMNS = {
    "createdAt": Page.created_at,
    "updatedAt": Page.updated_at,
    "title": Page.title,
    "slug": Page.slug,
}

VERSION_SORT_COLUMNS = {
    "createdAt": PageVersion.created_at,
    "updatedAt": PageVersion.updated_at,
}

REQUIRED_FIELDS = ("title", "slug")


def _condition(column, op: str, value: Any):
    if op == "equals":
        return column == value
    if op == "not_equals":
        return column != value
    if op == "contains":
        return column.ilike(f"%{value}%")
    raise ValueError(f"Unsupported where operator: {op}")


def build_where(where: Optional[Dict[str, Any]]):
    """
    Translate a ``{"field": {"op": value}, "and": [...], "or": [...]}`` filter into SQL.

    Only the fields in ``WHERE_COLUMNS`` are queryable.
    """
    if not where:
        return true()

    clauses = []

    for field, condition in where.items():
        if field == "and":
            clauses.append(and_(*(build_where(part) for part in condition)))
            continue
        if field == "or":
            clauses.append(or_(*(build_where(part) for part in condition)))
            continue

        column = WHERE_COLUMNS.get(field)
        if column is None:
            raise ValueError(f"Unsupported where field: {field}")

        for op, value in condition.items():
            clauses.append(_condition(column, op, value))

    return and_(*clauses)


class SqlAlchemyDocumentStore:
    """
    Page document store on top of Flask-SQLAlchemy.

    Writes flush but never commit; wrap operations in
    ``pagesync.utils.transaction.transactional``. Every create/update
    appends a PageVersion snapshot.
    """

    def __init__(self, before_change: Optional[List[BeforeChangeHook]] = None):
        self.before_change: List[BeforeChangeHook] = list(before_change or [])

    # ------------------------
    # Reads
    # ------------------------

    def find(self, collection, where=None, page=1, limit=10, sort=None) -> FindResult:
        query = Page.query.filter(
            Page.collection == collection,
            build_where(where),
        ).order_by(
            parse_sort(sort, PAGE_SORT_COLUMNS, default="-updatedAt"),
            Page.id.desc(),
        )

        pagination = paginate_query(query, page=page, limit=limit)
        return normalize_pagination(pagination, normalize_page)

    def find_by_id(self, collection, doc_id, draft=True):
        page = Page.query.filter_by(collection=collection, id=doc_id).first()
        if not page:
            return None
        return normalize_page(page, draft=draft)

    def find_versions(self, collection, where, sort=None, page=1, limit=20) -> FindResult:
        query = PageVersion.query.filter(PageVersion.collection == collection)

        for field, column in (("parent", PageVersion.page_id), ("id", PageVersion.id)):
            if field not in where:
                continue
            value = where[field]
            if isinstance(value, dict):
                value = value["equals"]
            query = query.filter(column == value)

        order = parse_sort(sort, VERSION_SORT_COLUMNS, default="-createdAt")
        descending = (sort or "-createdAt").startswith("-")
        # Concurrent writers can share a version number; id keeps paging stable
        if descending:
            query = query.order_by(order, PageVersion.version.desc(), PageVersion.id.desc())
        else:
            query = query.order_by(order, PageVersion.version.asc(), PageVersion.id.asc())

        pagination = paginate_query(query, page=page, limit=limit)
        return normalize_pagination(pagination, normalize_version)

    # ------------------------
    # Writes
    # ------------------------

    def create(self, collection, data, draft=True, context=None):
        context = context or {}
        self._run_hooks(collection, None, data, context)

        missing = [field for field in REQUIRED_FIELDS if not data.get(field)]
        if missing:
            raise StoreValidationError(
                [{"field": field, "message": f"{field} is required"} for field in missing]
            )
        self._check_unique_slug(collection, data["slug"])

        page = Page()
        page.id = str(uuid.uuid4())
        page.collection = collection
        apply_changes(page, data)
        self._set_status(page, draft)

        db.session.add(page)
        self._record_version(page, autosave=context.get("autosave", False))
        self._flush()

        return normalize_page(page)

    def update(self, collection, doc_id, data, draft=True, context=None):
        context = context or {}
        page = self._get_page(collection, doc_id)

        self._run_hooks(collection, doc_id, data, context)

        empty = [field for field in REQUIRED_FIELDS if field in data and not data[field]]
        if empty:
            raise StoreValidationError(
                [{"field": field, "message": f"{field} cannot be empty"} for field in empty]
            )
        if "slug" in data and data["slug"] != page.slug:
            self._check_unique_slug(collection, data["slug"], exclude_id=page.id)

        apply_changes(page, data)
        self._set_status(page, draft)
        page.updated_at = utc_now()

        self._record_version(page, autosave=context.get("autosave", False))
        self._flush()

        return normalize_page(page)

    def delete(self, collection, doc_id):
        page = self._get_page(collection, doc_id)
        doc = normalize_page(page)

        db.session.delete(page)
        self._flush()

        return doc

    def restore_version(self, collection, version_id):
        version = PageVersion.query.filter_by(collection=collection, id=version_id).first()
        if not version:
            raise DocumentNotFound(f"Version {version_id} not found")

        page = version.page
        snapshot = version.snapshot

        if snapshot.get("slug") != page.slug:
            self._check_unique_slug(collection, snapshot.get("slug"), exclude_id=page.id)

        apply_snapshot(page, snapshot)
        if page.status == "published":
            self._publish(page)
        page.updated_at = utc_now()

        self._record_version(page, autosave=False)
        self._flush()

        return normalize_page(page)

    def patch_published(self, collection, doc_id, data):
        """
        Deep-merge ``data`` into the published state only.

        The latest state, status and version history are left alone, so a
        pending draft stays unpublished. No-op for a never-published page.
        """
        page = self._get_page(collection, doc_id)
        if page.published is None:
            return None

        self._publish(page, deep_merge(copy.deepcopy(page.published), data))
        self._flush()

        return normalize_page(page, draft=False)

    # ------------------------
    # Internals
    # ------------------------

    def _get_page(self, collection, doc_id) -> Page:
        page = Page.query.filter_by(collection=collection, id=doc_id).first()
        if not page:
            raise DocumentNotFound(f"Document {doc_id} not found in {collection}")
        return page

    def _run_hooks(self, collection, doc_id, data, context):
        for hook in self.before_change:
            hook(self, collection=collection, doc_id=doc_id, data=data, context=context)

    def _check_unique_slug(self, collection, slug, exclude_id=None):
        query = Page.query.filter(Page.collection == collection, Page.slug == slug)
        if exclude_id:
            query = query.filter(Page.id != exclude_id)

        if db.session.query(query.exists()).scalar():
            raise StoreValidationError(
                [{"field": "slug", "message": "Value must be unique"}]
            )

    @classmethod
    def _set_status(cls, page: Page, draft: bool) -> None:
        page.status = "draft" if draft else "published"
        if not draft:
            cls._publish(page)

    @staticmethod
    def _publish(page: Page, state=None) -> None:
        page.published = state if state is not None else snapshot_page(page)
        page.published_is_homepage = bool(page.published.get("isHomepage"))

    @staticmethod
    def _record_version(page: Page, *, autosave: bool) -> PageVersion:
        version = PageVersion()
        version.page_id = page.id
        version.collection = page.collection
        with db.session.no_autoflush:
            version.version = next_version(page.id)
        version.status = page.status
        version.snapshot = snapshot_page(page)
        version.autosave = bool(autosave)

        db.session.add(version)
        return version

    @staticmethod
    def _flush() -> None:
        try:
            db.session.flush()
        except IntegrityError as exc:
            if "slug" in str(exc.orig).lower():
                raise StoreValidationError(
                    [{"field": "slug", "message": "Value must be unique"}]
                ) from exc
            raise StoreError(str(exc)) from exc
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc
