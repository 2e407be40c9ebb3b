from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, respond
from ..container import Container
from . import actions


def register(app: Flask, container: Container) -> None:
    service = container.checkin_service

    @app.route("/api/teachers/checkins", methods=["POST"], endpoint="teacher_clock_in")
    def teacher_clock_in():
        return respond(actions.clock_in(service, json_body()))

    @app.route("/api/teachers/checkins/<check_in_id>/clock-out", methods=["POST"], endpoint="teacher_clock_out")
    def teacher_clock_out(check_in_id: str):
        return respond(actions.clock_out(service, check_in_id, json_body()))

    @app.route("/api/teachers/checkins/admin", methods=["POST"], endpoint="teacher_admin_clock_in")
    def teacher_admin_clock_in():
        return respond(actions.admin_clock_in(service, json_body()))

    @app.route("/api/teachers/checkins/auto-clock-out", methods=["POST"], endpoint="teacher_auto_clock_out")
    def teacher_auto_clock_out():
        return respond(actions.auto_clock_out(service))

    @app.route("/api/teachers/checkins/late-report", methods=["GET"], endpoint="teacher_late_report")
    def teacher_late_report():
        return respond(actions.late_report(service, request.args.to_dict()))
