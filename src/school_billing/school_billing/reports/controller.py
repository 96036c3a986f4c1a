from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import today_local
from ..common.http import json_errors
from ..common.money import format_money
from ..common.validators import require_iso_date, require_non_empty
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _today():
        value = request.args.get("today")
        if value:
            return require_iso_date(value, "Today")
        return today_local(app.config.get("TIMEZONE_OFFSET_HOURS"))

    @app.route("/api/reports/fees", methods=["GET"], endpoint="reports_fees")
    @json_errors
    def reports_fees():
        cycle_id = require_non_empty(request.args.get("cycle_id", ""), "Cycle")
        report = container.financial_aggregator.student_fees(cycle_id=cycle_id, today=_today())
        return jsonify({"students": report.students, "totalDebt": format_money(report.total_debt)})

    @app.route("/api/reports/dashboard", methods=["GET"], endpoint="reports_dashboard")
    @json_errors
    def reports_dashboard():
        cycle_id = require_non_empty(request.args.get("cycle_id", ""), "Cycle")
        data = container.financial_aggregator.dashboard(cycle_id=cycle_id)
        month = request.args.get("month") or _today().strftime("%Y-%m")
        return jsonify(
            {
                "totalCollected": format_money(data.total_collected),
                "totalDebt": format_money(data.total_debt),
                "monthlyCollected": data.monthly_collected,
                "collectedThisMonth": format_money(container.financial_aggregator.collected_in_month(month)),
            }
        )
