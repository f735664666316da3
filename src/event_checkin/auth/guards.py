from __future__ import annotations

from functools import wraps

from flask import g, request

from ..common.http import domain_error_response, error_response
from ..core.exceptions import AuthenticationError
from .service import AuthService


def bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Authentication required")
    return token.strip()


class Guards:
    """View decorators that resolve the bearer token into ``g.current_user``."""

    def __init__(self, auth_service: AuthService):
        self._auth = auth_service

    def auth_required(self, view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                g.current_user = self._auth.resolve(bearer_token())
            except AuthenticationError as e:
                return domain_error_response(e)
            return view(*args, **kwargs)

        return wrapper

    def admin_required(self, view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                g.current_user = self._auth.resolve(bearer_token())
            except AuthenticationError as e:
                return domain_error_response(e)

            if not g.current_user.is_admin:
                return error_response("Admin access required", 403)
            return view(*args, **kwargs)

        return wrapper
