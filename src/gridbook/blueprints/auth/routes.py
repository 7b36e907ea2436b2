"""Email OTP sign-in routes."""

from __future__ import annotations

from flask import jsonify

from ...context import get_context
from ...models.user import User
from ...security import current_user_id, login_required
from ..common import load_form
from . import bp
from .forms import SendOtpForm, VerifyOtpForm

_PUBLIC_USER_FIELDS = {"id", "email", "is_verified", "last_login", "created_at"}


def _user_json(user: User) -> dict:
    return user.model_dump(mode="json", include=_PUBLIC_USER_FIELDS)


@bp.post("/send-otp")
def send_otp():
    """Mail a one-time code to the address in the body."""

    form = load_form(SendOtpForm)
    email = get_context().auth.send_otp(form.email)
    return jsonify({"message": "OTP sent successfully", "email": email})


@bp.post("/verify-otp")
def verify_otp():
    """Exchange a valid code for a bearer token."""

    form = load_form(VerifyOtpForm)
    token, user = get_context().auth.verify_otp(form.email, form.otp)
    return jsonify({"message": "Login successful", "token": token, "user": _user_json(user)})


@bp.get("/me")
@login_required
def me():
    user = get_context().auth.current_user(current_user_id())
    return jsonify({"user": _user_json(user)})
