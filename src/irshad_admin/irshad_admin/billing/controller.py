from __future__ import annotations

from flask import Flask, request

from ..common.http import respond
from ..container import Container
from . import actions


def register(app: Flask, container: Container) -> None:
    @app.route("/api/billing/families/<family_id>/rate", methods=["GET"], endpoint="family_rate")
    def family_rate(family_id: str):
        return respond(actions.family_rate(container.billing_service, family_id, request.args.to_dict()))

    @app.route("/api/billing/mahad-rate", methods=["GET"], endpoint="mahad_rate")
    def mahad_rate():
        return respond(actions.mahad_rate(container.billing_service, request.args.to_dict()))
