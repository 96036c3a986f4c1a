from __future__ import annotations

from flask import Flask, jsonify, request

from ..billing.serializers import discount_json
from ..common.datetime_utils import format_iso_date, today_local
from ..common.http import json_errors, payload
from ..common.months import normalize_month
from ..container import Container
from .model import AcademicCycle, EventDiscount


def event_json(ev: EventDiscount) -> dict:
    pct = ev.discount_percentage
    return {
        "id": ev.event_id,
        "name": ev.name,
        "startDate": format_iso_date(ev.start_date),
        "endDate": format_iso_date(ev.end_date),
        "targetMonthYear": ev.target_month,
        "discountPercentage": int(pct) if pct == pct.to_integral_value() else float(pct),
    }


def cycle_json(cycle: AcademicCycle) -> dict:
    return {
        "id": cycle.cycle_id,
        "name": cycle.name,
        "startDate": format_iso_date(cycle.start_date) if cycle.start_date else None,
        "endDate": format_iso_date(cycle.end_date) if cycle.end_date else None,
        "months": cycle.month_tokens(),
        "events": [event_json(e) for e in cycle.events],
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/cycles", methods=["GET"], endpoint="cycles_list")
    def cycles_list():
        return jsonify([cycle_json(c) for c in container.cycle_service.list_cycles()])

    @app.route("/api/cycles", methods=["POST"], endpoint="cycles_create")
    @json_errors
    def cycles_create():
        data = payload()
        cycle = container.cycle_service.create_cycle(
            name=data.get("name", ""),
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
        )
        return jsonify(cycle_json(cycle)), 201

    @app.route("/api/cycles/<cycle_id>", methods=["PUT"], endpoint="cycles_update")
    @json_errors
    def cycles_update(cycle_id: str):
        data = payload()
        cycle = container.cycle_service.update_cycle(
            cycle_id=cycle_id,
            name=data.get("name", ""),
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
        )
        return jsonify(cycle_json(cycle))

    @app.route("/api/cycles/current", methods=["GET"], endpoint="cycles_current")
    def cycles_current():
        cycle = container.cycle_service.detect_current(today_local(app.config.get("TIMEZONE_OFFSET_HOURS")))
        if not cycle:
            return jsonify({"error": "No cycle covers the current month"}), 404
        return jsonify(cycle_json(cycle))

    @app.route("/api/cycles/<cycle_id>/events", methods=["POST"], endpoint="cycles_add_event")
    @json_errors
    def cycles_add_event(cycle_id: str):
        data = payload()
        event = container.cycle_service.add_event(
            cycle_id=cycle_id,
            name=data.get("name", ""),
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
            discount_percentage=data.get("discountPercentage"),
        )
        return jsonify(event_json(event)), 201

    @app.route("/api/cycles/<cycle_id>/events/<event_id>", methods=["DELETE"], endpoint="cycles_remove_event")
    @json_errors
    def cycles_remove_event(cycle_id: str, event_id: str):
        if not container.cycle_service.remove_event(cycle_id=cycle_id, event_id=event_id):
            return jsonify({"error": "Event does not exist"}), 404
        return "", 204

    @app.route("/api/cycles/<cycle_id>/discounts", methods=["GET"], endpoint="cycles_month_discount")
    @json_errors
    def cycles_month_discount(cycle_id: str):
        cycle = container.cycles_repo.get_by_id(cycle_id)
        if not cycle:
            return jsonify({"error": "Academic cycle does not exist"}), 404
        month = normalize_month(request.args.get("month", ""))
        return jsonify(discount_json(container.discount_resolver.resolve_for_cycle(cycle, month)))
