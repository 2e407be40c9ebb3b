from __future__ import annotations

from flask import Flask

from ..common.http import json_body, respond
from ..container import Container
from . import actions


def register(app: Flask, container: Container) -> None:
    @app.route("/api/batches", methods=["GET"], endpoint="list_batches")
    def list_batches():
        return respond(actions.list_batches(container.batch_service))

    @app.route("/api/batches/<batch_id>", methods=["GET"], endpoint="get_batch")
    def get_batch(batch_id: str):
        return respond(actions.get_batch(container.batch_service, batch_id))

    @app.route("/api/batches/<batch_id>/assign", methods=["POST"], endpoint="assign_batch_students")
    def assign_batch_students(batch_id: str):
        return respond(actions.assign_students(container.batch_service, batch_id, json_body()))

    @app.route("/api/batches/transfer", methods=["POST"], endpoint="transfer_batch_students")
    def transfer_batch_students():
        return respond(actions.transfer_students(container.batch_service, json_body()))

    @app.route("/api/batches/unassign", methods=["POST"], endpoint="unassign_batch_students")
    def unassign_batch_students():
        return respond(actions.unassign_students(container.batch_service, json_body()))
