from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_optional_date
from ..common.http import current_user_id, json_body, login_required
from ..container import Container
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    svc = container.expense_service

    def _query_int(name: str, default: int) -> int:
        raw = request.args.get(name, "")
        if raw == "":
            return default
        try:
            return int(raw)
        except ValueError:
            raise ValidationError(f"{name} must be an integer")

    def _expense_fields(data: dict) -> dict:
        return {
            "category_id": data.get("category_id"),
            "amount": data.get("amount"),
            "expense_date": parse_optional_date(data.get("expense_date"), "Expense date"),
            "description": data.get("description"),
        }

    @app.route("/api/expenses", methods=["GET"], endpoint="list_my_expenses")
    @login_required
    def list_my_expenses():
        page = svc.list_mine(
            user_id=current_user_id(),
            page=_query_int("page", 0),
            size=_query_int("size", DEFAULT_PAGE_SIZE),
        )
        return jsonify(page.to_dict())

    @app.route("/api/expenses", methods=["POST"], endpoint="create_expense")
    @login_required
    def create_expense():
        expense = svc.create(user_id=current_user_id(), **_expense_fields(json_body()))
        return jsonify(expense.to_dict()), 201

    @app.route("/api/expenses/<int:expense_id>", methods=["GET"], endpoint="get_expense")
    @login_required
    def get_expense(expense_id: int):
        return jsonify(svc.get(expense_id=expense_id, user_id=current_user_id()).to_dict())

    @app.route("/api/expenses/<int:expense_id>", methods=["PUT"], endpoint="update_expense")
    @login_required
    def update_expense(expense_id: int):
        expense = svc.update(expense_id=expense_id, user_id=current_user_id(), **_expense_fields(json_body()))
        return jsonify(expense.to_dict())

    @app.route("/api/expenses/<int:expense_id>", methods=["DELETE"], endpoint="delete_expense")
    @login_required
    def delete_expense(expense_id: int):
        svc.delete(expense_id=expense_id, user_id=current_user_id())
        return "", 204

    @app.route("/api/expenses/<int:expense_id>/submit", methods=["POST"], endpoint="submit_expense")
    @login_required
    def submit_expense(expense_id: int):
        return jsonify(svc.submit(expense_id=expense_id, user_id=current_user_id()).to_dict())

    @app.route("/api/expenses/pending", methods=["GET"], endpoint="pending_expenses")
    @login_required
    def pending_expenses():
        return jsonify([e.to_dict() for e in svc.list_pending(user_id=current_user_id())])

    @app.route("/api/expenses/<int:expense_id>/approve", methods=["POST"], endpoint="approve_expense")
    @login_required
    def approve_expense(expense_id: int):
        expense = svc.approve(
            expense_id=expense_id,
            user_id=current_user_id(),
            review_notes=json_body().get("review_notes", ""),
        )
        return jsonify(expense.to_dict())

    @app.route("/api/expenses/<int:expense_id>/reject", methods=["POST"], endpoint="reject_expense")
    @login_required
    def reject_expense(expense_id: int):
        expense = svc.reject(
            expense_id=expense_id,
            user_id=current_user_id(),
            review_notes=json_body().get("review_notes", ""),
        )
        return jsonify(expense.to_dict())
