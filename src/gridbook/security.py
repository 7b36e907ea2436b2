"""Bearer-token guard for API routes."""

from __future__ import annotations

from functools import wraps
from typing import Callable, Optional, TypeVar

from flask import g, request

from .context import get_context
from .errors import AuthenticationError

F = TypeVar("F", bound=Callable)

BEARER_PREFIX = "Bearer "


def bearer_token() -> Optional[str]:
    """Return the token from the ``Authorization`` header, if any."""

    header = request.headers.get("Authorization", "")
    if not header.startswith(BEARER_PREFIX):
        return None
    return header[len(BEARER_PREFIX):].strip() or None


def login_required(view: F) -> F:
    """Reject the request with 401 unless it carries a valid token."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        g.user_id = get_context().tokens.verify(bearer_token())
        return view(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_user_id() -> int:
    user_id = g.get("user_id")
    if user_id is None:
        raise AuthenticationError("Unauthorized")
    return user_id
