from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_optional_date
from ..common.http import current_user_id, login_required
from ..common.validators import require_positive_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/reports/summary", methods=["GET"], endpoint="report_summary")
    @login_required
    def report_summary():
        raw_category = request.args.get("category_id", "").strip()
        report = container.report_service.build_summary(
            user_id=current_user_id(),
            start_date=parse_optional_date(request.args.get("start_date"), "Start date"),
            end_date=parse_optional_date(request.args.get("end_date"), "End date"),
            category_id=require_positive_int(raw_category, "Category ID") if raw_category else None,
            status=request.args.get("status"),
        )
        return jsonify(report.to_dict())
