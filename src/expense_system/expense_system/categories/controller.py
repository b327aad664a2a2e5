from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/categories", methods=["GET"], endpoint="list_categories")
    @login_required
    def list_categories():
        return jsonify([c.to_dict() for c in container.category_service.list_all()])

    @app.route("/api/categories/<int:category_id>", methods=["GET"], endpoint="get_category")
    @login_required
    def get_category(category_id: int):
        return jsonify(container.category_service.get(category_id).to_dict())
