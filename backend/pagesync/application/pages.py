# pagesync/application/pages.py
from typing import Any, Dict, Iterable, Optional

from flask import current_app

from pagesync.auth.hooks import PageAuthHooks
from pagesync.domain.invariants.editor_content import find_duplicate_item_ids
from pagesync.domain.invariants.homepage import SKIP_HOMEPAGE_GUARD, prepare_homepage_swap
from pagesync.domain.lifecycle.page import initial_status, is_publishing
from pagesync.domain.root_props import FieldMapping, translate
from pagesync.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    PageOperationError,
    UnauthenticatedError,
    ValidationError,
)
from pagesync.schemas.pages import (
    CreatePageRequest,
    ListPagesQuery,
    ListVersionsQuery,
    UpdatePageRequest,
)
from pagesync.store.base import DocumentNotFound, DocumentStore, StoreError, StoreValidationError
from pagesync.utils.audit import log_action
from pagesync.utils.paths import deep_merge
from pagesync.utils.transaction import transactional

DEFAULT_EDITOR_CONTENT: Dict[str, Any] = {
    "root": {"props": {"title": ""}},
    "content": [],
    "zones": {},
}


class PageLifecycleController:
    """
    Validates, merges, versions and commits page edits.

    Every operation authenticates and authorizes before touching the
    store. Writes run in a single transaction so a failed homepage swap
    or commit leaves nothing behind.
    """

    def __init__(
        self,
        store: DocumentStore,
        auth: PageAuthHooks,
        *,
        collection: str = "pages",
        root_props_mapping: Optional[Iterable[FieldMapping]] = None,
        max_limit: int = 100,
    ):
        self.store = store
        self.auth = auth
        self.collection = collection
        self.root_props_mapping = list(root_props_mapping or [])
        self.max_limit = max_limit

    # ------------------------
    # Auth
    # ------------------------

    def _authenticate(self, request) -> Dict[str, Any]:
        result = self.auth.authenticate(request)
        if not result.authenticated or not result.user:
            raise UnauthenticatedError(result.error)
        return result.user

    def _authorize(self, capability: str, user, page_id: Optional[str] = None, message: Optional[str] = None):
        permission = self.auth.check(capability, user, page_id)
        if not permission.allowed:
            raise ForbiddenError(permission.error or message)

    def _require_page(self, page_id: str, draft: bool = True) -> Dict[str, Any]:
        doc = self.store.find_by_id(self.collection, page_id, draft=draft)
        if doc is None:
            raise NotFoundError("Page not found")
        return doc

    # ------------------------
    # Store error shaping
    # ------------------------

    def _run(self, operation: str, fn):
        """Run ``fn`` in a transaction and reshape store failures for callers."""
        try:
            with transactional():
                return fn()
        except StoreValidationError as exc:
            slug_error = exc.field_error("slug")
            if slug_error:
                raise ConflictError(
                    "A page with this slug already exists. Please choose a different slug.",
                    field="slug",
                ) from exc
            first = exc.errors[0]
            raise ValidationError(
                f"Validation failed: {', '.join(e.get('message') or e['field'] for e in exc.errors)}",
                field=first.get("field"),
                details=exc.errors,
            ) from exc
        except DocumentNotFound as exc:
            raise NotFoundError("Page not found") from exc
        except StoreError as exc:
            current_app.logger.exception("Store failure during %s", operation)
            raise PageOperationError(f"Failed to {operation} page") from exc

    # ------------------------
    # Operations
    # ------------------------

    def list_pages(self, request, query: ListPagesQuery) -> Dict[str, Any]:
        user = self._authenticate(request)
        self._authorize("list", user)

        conditions = []
        if query.search:
            conditions.append({"title": {"contains": query.search}})
        if query.status != "all":
            conditions.append({"status": {"equals": query.status}})

        return self.store.find(
            self.collection,
            where={"and": conditions} if conditions else None,
            page=query.page,
            limit=min(query.limit, self.max_limit),
            sort=query.sort,
        )

    def create_page(self, request, body: CreatePageRequest) -> Dict[str, Any]:
        user = self._authenticate(request)
        self._authorize("create", user)

        status = initial_status(body.status)
        if is_publishing(status):
            self._authorize("publish", user, message="Not authorized to publish pages")

        if body.editor_content is not None:
            editor_content = body.editor_content.model_dump(by_alias=True)
        else:
            editor_content = {
                **DEFAULT_EDITOR_CONTENT,
                "root": {"props": {**DEFAULT_EDITOR_CONTENT["root"]["props"], "title": body.title}},
            }

        data = {
            "title": body.title,
            "slug": body.slug,
            "isHomepage": False,
            "editorContent": editor_content,
        }

        def commit():
            doc = self.store.create(self.collection, data, draft=not is_publishing(status))
            log_action(
                action="page.create",
                entity_type="page",
                entity_id=doc["id"],
                actor_id=user["id"],
                payload={"title": doc["title"], "slug": doc["slug"], "status": doc["status"]},
            )
            return doc

        return self._run("create", commit)

    def get_page(self, request, page_id: str, draft: bool = True) -> Dict[str, Any]:
        user = self._authenticate(request)
        self._authorize("view", user, page_id)
        return self._require_page(page_id, draft=draft)

    def update_page(self, request, page_id: str, body: UpdatePageRequest) -> Dict[str, Any]:
        # 1-2b. authenticate, authorize edit, authorize publish if publishing
        user = self._authenticate(request)
        self._authorize("edit", user, page_id)

        publishing = is_publishing(body.status)
        if publishing:
            self._authorize("publish", user, page_id, message="Not authorized to publish pages")

        self._require_page(page_id)

        # 3. root props -> structured field patch
        editor_content = None
        root_props: Dict[str, Any] = {}
        if body.editor_content is not None:
            editor_content = body.editor_content.model_dump(by_alias=True)
            root_props = editor_content["root"]["props"]

            duplicates = find_duplicate_item_ids(editor_content)
            if duplicates:
                current_app.logger.warning(
                    "Page %s has content items with duplicate ids: %s", page_id, duplicates
                )

        patch = translate(root_props, self.root_props_mapping)

        # 4. merge; explicit request fields win over translated ones
        payload = self._build_payload(body, editor_content, patch)

        def commit():
            # 5. homepage invariant
            guarded = payload.get("isHomepage") is True
            former_holder = prepare_homepage_swap(
                self.store,
                self.collection,
                page_id,
                guarded,
                body.swap_homepage,
            )

            # 6. commit
            context = {"autosave": body.autosave}
            if guarded:
                context[SKIP_HOMEPAGE_GUARD] = True

            doc = self.store.update(
                self.collection,
                page_id,
                payload,
                draft=not publishing,
                context=context,
            )

            if former_holder is not None:
                log_action(
                    action="page.homepage_swap",
                    entity_type="page",
                    entity_id=page_id,
                    actor_id=user["id"],
                    payload={"from": former_holder["id"], "to": page_id},
                )
            log_action(
                action="page.publish" if publishing else "page.update",
                entity_type="page",
                entity_id=page_id,
                actor_id=user["id"],
                payload={"fields": sorted(payload.keys()), "autosave": body.autosave},
            )
            return doc

        # 7. updated document
        return self._run("update", commit)

    @staticmethod
    def _build_payload(body: UpdatePageRequest, editor_content, patch: Dict[str, Any]) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if editor_content is not None:
            payload["editorContent"] = editor_content

        deep_merge(payload, patch)
        deep_merge(payload, body.fields)

        if body.title is not None:
            payload["title"] = body.title
        if body.slug is not None:
            payload["slug"] = body.slug
        if body.is_homepage is not None:
            payload["isHomepage"] = body.is_homepage

        return payload

    def delete_page(self, request, page_id: str) -> Dict[str, Any]:
        user = self._authenticate(request)
        self._authorize("delete", user, page_id)
        self._require_page(page_id)

        def commit():
            doc = self.store.delete(self.collection, page_id)
            log_action(
                action="page.delete",
                entity_type="page",
                entity_id=page_id,
                actor_id=user["id"],
                payload={"slug": doc["slug"]},
            )
            return doc

        return self._run("delete", commit)

    def list_versions(self, request, page_id: str, query: ListVersionsQuery) -> Dict[str, Any]:
        user = self._authenticate(request)
        self._authorize("view", user, page_id)
        self._require_page(page_id)

        return self.store.find_versions(
            self.collection,
            where={"parent": page_id},
            sort="-createdAt",
            page=query.page,
            limit=min(query.limit, self.max_limit),
        )

    def restore_version(self, request, page_id: str, version_id: str) -> Dict[str, Any]:
        """
        Replace the page's current state with a stored snapshot.

        Skips root-prop translation and the homepage guard; the snapshot
        is written back as-is.
        """
        user = self._authenticate(request)
        self._authorize("edit", user, page_id)
        self._require_page(page_id)

        matches = self.store.find_versions(
            self.collection,
            where={"parent": page_id, "id": version_id},
            limit=1,
        )
        if not matches["docs"]:
            raise NotFoundError("Version not found")

        def commit():
            doc = self.store.restore_version(self.collection, version_id)
            log_action(
                action="page.restore",
                entity_type="page",
                entity_id=page_id,
                actor_id=user["id"],
                payload={"version_id": version_id, "status": doc["status"]},
            )
            return doc

        doc = self._run("restore", commit)
        if doc.get("isHomepage"):
            current_app.logger.warning(
                "Restored page %s carries isHomepage=true; homepage uniqueness was not re-checked",
                page_id,
            )
        return doc

