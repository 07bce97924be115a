# pagesync/api/v1/pages.py
from flask import current_app, jsonify, request

from pagesync.schemas.pages import (
    CreatePageRequest,
    ListPagesQuery,
    ListVersionsQuery,
    RestoreVersionRequest,
    UpdatePageRequest,
    parse_request,
)
from . import v1_bp


def pages_controller():
    return current_app.extensions["pagesync"]


def _json_body():
    return request.get_json(silent=True)


# ------------------------
# Pages
# ------------------------

@v1_bp.route("/pages", methods=["GET"])
def list_pages():
    query = parse_request(ListPagesQuery, request.args.to_dict())
    return jsonify(pages_controller().list_pages(request, query)), 200


@v1_bp.route("/pages", methods=["POST"])
def create_page():
    body = parse_request(CreatePageRequest, _json_body())
    doc = pages_controller().create_page(request, body)
    return jsonify({"doc": doc}), 201


@v1_bp.route("/pages/<page_id>", methods=["GET"])
def get_page(page_id):
    # Editors load the latest draft unless explicitly asking for the published copy
    draft = request.args.get("draft", "true").lower() != "false"
    doc = pages_controller().get_page(request, page_id, draft=draft)
    return jsonify({"doc": doc}), 200


@v1_bp.route("/pages/<page_id>", methods=["PATCH"])
def update_page(page_id):
    body = parse_request(UpdatePageRequest, _json_body())
    doc = pages_controller().update_page(request, page_id, body)
    return jsonify({"doc": doc, "published": doc["status"] == "published"}), 200


@v1_bp.route("/pages/<page_id>", methods=["DELETE"])
def delete_page(page_id):
    pages_controller().delete_page(request, page_id)
    return jsonify({"success": True}), 200


# ------------------------
# Versions
# ------------------------

@v1_bp.route("/pages/<page_id>/versions", methods=["GET"])
def list_versions(page_id):
    args = request.args.to_dict()
    args.setdefault("limit", current_app.config["PAGES_VERSIONS_DEFAULT_LIMIT"])
    query = parse_request(ListVersionsQuery, args)
    return jsonify(pages_controller().list_versions(request, page_id, query)), 200


@v1_bp.route("/pages/<page_id>/versions", methods=["POST"])
def restore_version(page_id):
    body = parse_request(RestoreVersionRequest, _json_body())
    doc = pages_controller().restore_version(request, page_id, body.version_id)
    return jsonify({"doc": doc}), 200
