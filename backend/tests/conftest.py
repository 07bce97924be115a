import pytest
from flask_jwt_extended import create_access_token

from pagesync import create_app
from pagesync.application.pages import PageLifecycleController
from pagesync.auth.hooks import AuthResult, role_based_hooks
from pagesync.domain.invariants.homepage import enforce_homepage_unique
from pagesync.extensions import db
from pagesync.store.sqlalchemy_store import SqlAlchemyDocumentStore

ADMIN = {"id": "user-admin", "role": "admin"}
EDITOR = {"id": "user-editor", "role": "editor"}
VIEWER = {"id": "user-viewer", "role": "viewer"}


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store(app):
    return SqlAlchemyDocumentStore(before_change=[enforce_homepage_unique])


def _user_as_request(request):
    # Controller tests pass the acting user in place of an HTTP request
    if request is None:
        return AuthResult(authenticated=False, error="No session")
    return AuthResult(authenticated=True, user=request)


@pytest.fixture
def controller(store):
    hooks = role_based_hooks(
        edit_roles=("admin", "editor"),
        publish_roles=("admin",),
        delete_roles=("admin",),
        authenticate=_user_as_request,
    )
    return PageLifecycleController(store, hooks, collection="pages")


def bearer(app, user):
    token = create_access_token(identity=user["id"], additional_claims={"role": user["role"]})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(app):
    return bearer(app, ADMIN)


@pytest.fixture
def editor_headers(app):
    return bearer(app, EDITOR)
