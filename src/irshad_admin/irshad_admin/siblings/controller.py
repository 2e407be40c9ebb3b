from __future__ import annotations

from flask import Flask

from ..common.http import json_body, respond
from ..container import Container
from . import actions


def register(app: Flask, container: Container) -> None:
    @app.route("/api/siblings", methods=["POST"], endpoint="link_siblings")
    def link_siblings():
        return respond(actions.link(container.sibling_service, json_body()))

    @app.route("/api/siblings", methods=["DELETE"], endpoint="unlink_siblings")
    def unlink_siblings():
        return respond(actions.unlink(container.sibling_service, json_body()))

    @app.route("/api/persons/<person_id>/siblings", methods=["GET"], endpoint="person_siblings")
    def person_siblings(person_id: str):
        return respond(actions.siblings_of(container.sibling_service, person_id))
