from typing import Any, Dict, List, Optional

from flask import jsonify
from werkzeug.exceptions import HTTPException


class PageSyncError(Exception):
    """Base class for every error the page lifecycle surfaces to callers."""

    status_code = 500
    default_message = "Page operation failed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class ValidationError(PageSyncError):
    status_code = 400
    default_message = "Validation failed"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        field: Optional[str] = None,
        details: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(message)
        self.field = field
        self.details = details or []

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        if self.field:
            body["field"] = self.field
        if self.details:
            body["details"] = self.details
        return body


class TransformError(ValidationError):
    """A root prop mapping transform raised while translating editor props."""

    status_code = 422
    default_message = "Root prop transform failed"


class ConflictError(PageSyncError):
    status_code = 409
    default_message = "Conflict"

    def __init__(self, message: Optional[str] = None, *, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        if self.field:
            body["field"] = self.field
        return body


class HomepageConflictError(ConflictError):
    """
    Another page in the collection already holds the homepage flag.

    Carries the competing page so callers can offer a swap.
    """

    def __init__(self, existing_homepage: Dict[str, Any]):
        title = existing_homepage.get("title") or existing_homepage.get("id")
        super().__init__(
            f'"{title}" is already set as the homepage',
            field="isHomepage",
        )
        self.existing_homepage = {
            "id": existing_homepage.get("id"),
            "title": existing_homepage.get("title"),
            "slug": existing_homepage.get("slug"),
        }

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        body["data"] = {"existingHomepage": self.existing_homepage}
        return body


class AuthorizationError(PageSyncError):
    status_code = 403
    default_message = "Forbidden"


class UnauthenticatedError(AuthorizationError):
    status_code = 401
    default_message = "Unauthorized"


class ForbiddenError(AuthorizationError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(PageSyncError):
    status_code = 404
    default_message = "Page not found"


class PageOperationError(PageSyncError):
    """Unexpected failure; the message never carries store internals."""

    status_code = 500


def register_error_handlers(app):
    @app.errorhandler(PageSyncError)
    def handle_page_sync_error(error):
        response = jsonify(error.to_dict())
        response.status_code = error.status_code
        return response

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        response = jsonify({"error": error.description})
        response.status_code = error.code or 500
        return response

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        app.logger.exception("Unhandled error: %s", error)
        response = jsonify({"error": "Internal server error"})
        response.status_code = 500
        return response
