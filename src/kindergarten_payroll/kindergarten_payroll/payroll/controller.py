from __future__ import annotations

import click
from flask import Flask, g, jsonify, request

from ..common.datetime_utils import month_label, now_local, parse_month_label
from ..common.http import actor_required, json_body
from ..core.actor import require_admin
from ..container import Container
from .model import Payroll


def to_dict(p: Payroll) -> dict:
    return {
        "id": p.payroll_id,
        "staff_id": p.staff_id,
        "period": p.period,
        "base_accrual": p.base_accrual,
        "bonuses": p.bonuses,
        "penalties": p.penalties,
        "total": p.total,
        "status": p.status.value,
        "payment_date": p.payment_date.isoformat() if p.payment_date else None,
        "history": [
            {"timestamp": e.timestamp.isoformat(), "action": e.action, "amount": e.amount, "comment": e.comment}
            for e in p.history
        ],
    }


def _target_month(value) -> str:
    if not value:
        return month_label(now_local().date())
    parse_month_label(value)
    return value


def register(app: Flask, container: Container) -> None:
    svc = container.payroll_service

    @app.route("/api/payroll/generate", methods=["POST"], endpoint="payroll_generate")
    @actor_required
    def generate():
        require_admin(g.actor)
        month = _target_month(json_body().get("month"))
        result = container.payroll_generator.generate(month, actor=g.actor)
        return jsonify({"success": True, **result.to_dict()}), 200

    @app.route("/api/child-payments/generate", methods=["POST"], endpoint="child_payments_generate")
    @actor_required
    def generate_child_payments():
        require_admin(g.actor)
        month = _target_month(json_body().get("month"))
        result = container.child_payment_generator.generate(month, actor=g.actor)
        return jsonify({"success": True, **result.to_dict()}), 200

    @app.route("/api/payroll/<int:payroll_id>/approve", methods=["POST"], endpoint="payroll_approve")
    @actor_required
    def approve(payroll_id: int):
        return jsonify({"success": True, "payroll": to_dict(svc.approve(g.actor, payroll_id))}), 200

    @app.route("/api/payroll/<int:payroll_id>/pay", methods=["POST"], endpoint="payroll_pay")
    @actor_required
    def pay(payroll_id: int):
        return jsonify({"success": True, "payroll": to_dict(svc.mark_paid(g.actor, payroll_id))}), 200

    @app.route("/api/payroll/<int:payroll_id>/recalculate", methods=["POST"], endpoint="payroll_recalculate")
    @actor_required
    def recalculate(payroll_id: int):
        return jsonify({"success": True, "payroll": to_dict(svc.recalculate(g.actor, payroll_id))}), 200

    @app.route("/api/payroll/<int:payroll_id>/fines", methods=["POST"], endpoint="payroll_fine")
    @actor_required
    def add_fine(payroll_id: int):
        data = json_body()
        payroll = svc.apply_fine(g.actor, payroll_id, amount=data.get("amount"), comment=data.get("comment") or "")
        return jsonify({"success": True, "payroll": to_dict(payroll)}), 200

    @app.route("/api/payroll/report", methods=["GET"], endpoint="payroll_report")
    @actor_required
    def report():
        require_admin(g.actor)
        data = container.payroll_report_service.build_month_report(period=_target_month(request.args.get("month")))
        return jsonify({"success": True, "rows": data.rows, "summary": data.summary}), 200

    # Entry points for the external scheduler (cron): `flask generate-payroll --month 2025-06`.
    @app.cli.command("generate-payroll")
    @click.option("--month", default=None, help="Target month YYYY-MM (default: current month)")
    def generate_payroll_command(month):
        result = container.payroll_generator.generate(_target_month(month))
        click.echo(result.to_dict())

    @app.cli.command("generate-child-payments")
    @click.option("--month", default=None, help="Target month YYYY-MM (default: current month)")
    def generate_child_payments_command(month):
        result = container.child_payment_generator.generate(_target_month(month))
        click.echo(result.to_dict())
