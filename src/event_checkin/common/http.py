from __future__ import annotations

from flask import jsonify, request

from ..core.exceptions import DomainError


def error_response(message: str, status: int):
    return jsonify({"success": False, "error": message}), status


def domain_error_response(exc: DomainError):
    return error_response(str(exc), exc.status_code)


def json_body() -> dict:
    """Request JSON as a dict; empty or non-object bodies become {}."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
