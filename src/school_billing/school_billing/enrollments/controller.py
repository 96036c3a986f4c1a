from __future__ import annotations

from flask import Flask, jsonify

from ..billing.serializers import installment_json
from ..common.datetime_utils import format_iso_date
from ..common.http import json_errors, payload
from ..container import Container
from .model import Enrollment
from .service import EnrollmentPlan


def enrollment_json(enrollment: Enrollment) -> dict:
    return {
        "id": enrollment.enrollment_id,
        "studentId": enrollment.student_id,
        "classId": enrollment.class_id,
        "date": format_iso_date(enrollment.date),
        "status": enrollment.status.value,
        "withdrawalDate": format_iso_date(enrollment.withdrawal_date) if enrollment.withdrawal_date else None,
    }


def plan_json(plan: EnrollmentPlan) -> dict:
    return {
        "enrollment": enrollment_json(plan.enrollment),
        "installments": [installment_json(i) for i in plan.installments],
    }


def register(app: Flask, container: Container) -> None:
    svc = container.enrollment_service

    @app.route("/api/enrollments", methods=["POST"], endpoint="enrollments_create")
    @json_errors
    def enrollments_create():
        data = payload()
        plan = svc.create(
            student_id=data.get("studentId", ""),
            class_id=data.get("classId", ""),
            start_date=data.get("date"),
        )
        return jsonify(plan_json(plan)), 201

    @app.route("/api/enrollments/<enrollment_id>/withdraw", methods=["POST"], endpoint="enrollments_withdraw")
    @json_errors
    def enrollments_withdraw(enrollment_id: str):
        enrollment = svc.withdraw(enrollment_id=enrollment_id, withdrawal_date=payload().get("withdrawalDate"))
        return jsonify(enrollment_json(enrollment))

    @app.route("/api/enrollments/<enrollment_id>/date", methods=["POST"], endpoint="enrollments_change_date")
    @json_errors
    def enrollments_change_date(enrollment_id: str):
        installments = svc.recalculate_for_date_change(enrollment_id=enrollment_id, new_date=payload().get("date"))
        return jsonify({"installments": [installment_json(i) for i in installments]})

    @app.route("/api/enrollments/<enrollment_id>/transfer", methods=["POST"], endpoint="enrollments_transfer")
    @json_errors
    def enrollments_transfer(enrollment_id: str):
        data = payload()
        plan = svc.transfer(
            enrollment_id=enrollment_id,
            target_class_id=data.get("classId", ""),
            transfer_date=data.get("date"),
        )
        return jsonify(plan_json(plan)), 201

    @app.route("/api/enrollments/<enrollment_id>", methods=["DELETE"], endpoint="enrollments_remove")
    @json_errors
    def enrollments_remove(enrollment_id: str):
        deleted = svc.remove(enrollment_id=enrollment_id)
        return jsonify({"deletedInstallments": deleted})

    @app.route("/api/enrollments/<enrollment_id>/installments", methods=["GET"], endpoint="enrollments_installments")
    def enrollments_installments(enrollment_id: str):
        items = container.installments_repo.list_for_enrollment(enrollment_id)
        return jsonify([installment_json(i) for i in items])
