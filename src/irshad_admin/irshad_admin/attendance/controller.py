from __future__ import annotations

import io

from flask import Flask, request, send_file

from ..common.http import json_body, respond
from ..container import Container
from . import actions
from .qr import render_png


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance/sessions", methods=["POST"], endpoint="create_attendance_session")
    def create_attendance_session():
        return respond(actions.create_session(service, json_body()))

    @app.route("/api/attendance/sessions", methods=["GET"], endpoint="list_attendance_sessions")
    def list_attendance_sessions():
        return respond(actions.list_sessions(service, request.args.to_dict()))

    @app.route("/api/attendance/sessions/<session_id>", methods=["GET"], endpoint="get_attendance_session")
    def get_attendance_session(session_id: str):
        return respond(actions.get_session(service, session_id))

    @app.route("/api/attendance/sessions/<session_id>", methods=["DELETE"], endpoint="delete_attendance_session")
    def delete_attendance_session(session_id: str):
        return respond(actions.delete_session(service, session_id))

    @app.route("/api/attendance/sessions/<session_id>/records", methods=["POST"], endpoint="mark_attendance")
    def mark_attendance(session_id: str):
        return respond(actions.mark_attendance(service, session_id, json_body()))

    @app.route("/api/attendance/sessions/<session_id>/close", methods=["POST"], endpoint="close_attendance_session")
    def close_attendance_session(session_id: str):
        return respond(actions.close_session(service, session_id))

    @app.route("/api/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    def attendance_stats():
        return respond(actions.get_stats(service, request.args.to_dict()))

    @app.route("/api/attendance/students/<profile_id>/history", methods=["GET"], endpoint="student_attendance_history")
    def student_attendance_history(profile_id: str):
        return respond(actions.student_history(service, profile_id))

    @app.route("/api/attendance/sessions/<session_id>/checkin-token", methods=["GET"], endpoint="session_checkin_token")
    def session_checkin_token(session_id: str):
        return respond(actions.issue_checkin_token(service, session_id))

    @app.route("/api/attendance/sessions/<session_id>/qr", methods=["GET"], endpoint="session_qr_image")
    def session_qr_image(session_id: str):
        result = actions.issue_checkin_token(service, session_id)
        if not result.success:
            return respond(result)
        buf = io.BytesIO(render_png(result.data.url))
        return send_file(buf, mimetype="image/png")

    @app.route("/api/attendance/checkin/<token>", methods=["POST"], endpoint="student_token_checkin")
    def student_token_checkin(token: str):
        return respond(actions.check_in_with_token(service, token, json_body()))
