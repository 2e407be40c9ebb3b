from __future__ import annotations

from typing import Any

from flask import jsonify, request

from .actions import ActionResult


def json_body() -> Any:
    return request.get_json(silent=True) or {}


def respond(result: ActionResult):
    return jsonify(result.to_dict()), result.http_status
