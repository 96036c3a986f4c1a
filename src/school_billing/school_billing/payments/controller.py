from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import format_iso_date
from ..common.http import json_errors, payload
from ..common.money import format_money
from ..container import Container
from .model import Payment


def payment_json(payment: Payment) -> dict:
    return {
        "id": payment.payment_id,
        "studentId": payment.student_id,
        "enrollmentId": payment.enrollment_id,
        "installmentId": payment.installment_id,
        "amount": format_money(payment.amount),
        "date": format_iso_date(payment.date),
        "monthYear": payment.month,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/installments/<installment_id>/payments", methods=["POST"], endpoint="payments_record")
    @json_errors
    def payments_record(installment_id: str):
        payment = container.payment_service.record_payment(
            installment_id=installment_id,
            payment_date=payload().get("date"),
        )
        return jsonify(payment_json(payment)), 201

    @app.route("/api/payments", methods=["GET"], endpoint="payments_list")
    def payments_list():
        return jsonify([payment_json(p) for p in container.payments_repo.list_all()])
