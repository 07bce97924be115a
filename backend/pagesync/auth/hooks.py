# pagesync/auth/hooks.py
"""
Authentication and authorization hooks for page operations.

``authenticate`` is required; every ``can_*`` check is optional and
defaults to "allowed for any authenticated user". ``can_publish`` falls
back to ``can_edit`` when unset.
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional

from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

User = Dict[str, Any]


@dataclass
class AuthResult:
    authenticated: bool
    user: Optional[User] = None
    error: Optional[str] = None


@dataclass
class PermissionResult:
    allowed: bool
    error: Optional[str] = None


PermissionCheck = Callable[..., PermissionResult]

CAPABILITIES = ("list", "view", "create", "edit", "publish", "delete")


@dataclass
class PageAuthHooks:
    authenticate: Callable[[Any], AuthResult]
    can_list: Optional[PermissionCheck] = None
    can_view: Optional[PermissionCheck] = None
    can_create: Optional[PermissionCheck] = None
    can_edit: Optional[PermissionCheck] = None
    can_publish: Optional[PermissionCheck] = None
    can_delete: Optional[PermissionCheck] = None

    def check(self, capability: str, user: User, page_id: Optional[str] = None) -> PermissionResult:
        if capability not in CAPABILITIES:
            raise ValueError(f"Unknown capability: {capability}")

        check = getattr(self, f"can_{capability}")
        if capability == "publish" and check is None:
            check = self.can_edit

        if check is None:
            return PermissionResult(allowed=True)

        if capability in ("list", "create"):
            return check(user)
        return check(user, page_id)


def jwt_authenticate(request) -> AuthResult:
    """Resolve the caller from a Flask-JWT-Extended access token, if any."""
    try:
        verify_jwt_in_request(optional=True)
    except (JWTExtendedException, PyJWTError) as exc:
        return AuthResult(authenticated=False, error=str(exc) or "Invalid token")

    identity = get_jwt_identity()
    if identity is None:
        return AuthResult(authenticated=False)

    claims = get_jwt()
    return AuthResult(
        authenticated=True,
        user={"id": str(identity), "role": claims.get("role")},
    )


def _require_role(roles: Optional[Iterable[str]], error: str) -> Optional[PermissionCheck]:
    if roles is None:
        return None
    allowed_roles = frozenset(roles)

    def check(user, page_id=None):
        if user.get("role") in allowed_roles:
            return PermissionResult(allowed=True)
        return PermissionResult(allowed=False, error=error)

    return check


def role_based_hooks(
    *,
    edit_roles: Optional[Iterable[str]] = None,
    publish_roles: Optional[Iterable[str]] = None,
    delete_roles: Optional[Iterable[str]] = None,
    authenticate: Callable[[Any], AuthResult] = jwt_authenticate,
) -> PageAuthHooks:
    """Hooks gated on the ``role`` claim. ``None`` leaves a capability open."""
    can_edit = _require_role(edit_roles, "Insufficient permissions")

    return PageAuthHooks(
        authenticate=authenticate,
        can_create=can_edit,
        can_edit=can_edit,
        can_publish=_require_role(publish_roles, "Not authorized to publish pages"),
        can_delete=_require_role(delete_roles, "Insufficient permissions"),
    )
