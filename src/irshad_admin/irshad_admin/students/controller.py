from __future__ import annotations

from flask import Flask

from ..common.http import json_body, respond
from ..container import Container
from . import actions


def register(app: Flask, container: Container) -> None:
    @app.route("/api/students/duplicates", methods=["GET"], endpoint="student_duplicates")
    def student_duplicates():
        return respond(actions.find_duplicates(container.duplicate_service))

    @app.route("/api/students/duplicates/resolve", methods=["POST"], endpoint="resolve_student_duplicates")
    def resolve_student_duplicates():
        return respond(actions.resolve_duplicates(container.duplicate_service, json_body()))

    @app.route("/api/students/duplicates/resolve-batch", methods=["POST"], endpoint="batch_resolve_student_duplicates")
    def batch_resolve_student_duplicates():
        return respond(actions.batch_resolve(container.duplicate_service, json_body()))
