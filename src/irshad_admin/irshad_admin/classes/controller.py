from __future__ import annotations

from flask import Flask

from ..common.http import json_body, respond
from ..container import Container
from . import actions


def register(app: Flask, container: Container) -> None:
    @app.route("/api/classes/<class_id>/students", methods=["POST"], endpoint="assign_class_student")
    def assign_class_student(class_id: str):
        return respond(actions.assign_student(container.class_service, class_id, json_body()))

    @app.route("/api/classes/enrollments/<enrollment_id>", methods=["DELETE"], endpoint="remove_class_student")
    def remove_class_student(enrollment_id: str):
        return respond(actions.remove_student(container.class_service, enrollment_id))
