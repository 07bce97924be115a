from pagesync.schemas.pages import CreatePageRequest, UpdatePageRequest

from tests.conftest import ADMIN


def create_page(controller, title, slug, user=ADMIN, **extra):
    return controller.create_page(user, CreatePageRequest(title=title, slug=slug, **extra))


def update_page(controller, page_id, user=ADMIN, **body):
    return controller.update_page(user, page_id, UpdatePageRequest.model_validate(body))


def editor_content(root_props=None, content=None, zones=None):
    return {
        "root": {"props": root_props or {}},
        "content": content or [],
        "zones": zones or {},
    }


def api_create(client, headers, title, slug):
    resp = client.post("/api/v1/pages", json={"title": title, "slug": slug}, headers=headers)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["doc"]
