"""Email one-time-password sign in and bearer token handling."""

from __future__ import annotations

import re
import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError
from jose import JWTError, jwt

from ..domain.repositories import UserRepository
from ..errors import AuthenticationError, MailDeliveryError, NotFoundError, ValidationError
from ..logging_config import get_logger
from ..models._time import utcnow
from ..models.user import User
from .mailer import Mailer, render_otp_email

logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")
OTP_SUBJECT = "Your OTP for Gridbook Login"

_hasher = PasswordHasher()


def generate_otp() -> str:
    """Return a random six-digit code."""

    return str(100000 + secrets.randbelow(900000))


def normalize_email(email: Optional[str]) -> str:
    if not email or not email.strip():
        raise ValidationError("Email is required")
    email = email.strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Invalid email format")
    return email


class TokenService:
    """Issue and verify HS256 bearer tokens carrying the user id."""

    def __init__(self, secret: str, *, algorithm: str = "HS256", expires_days: int = 7) -> None:
        self.secret = secret
        self.algorithm = algorithm
        self.expires_days = expires_days

    def issue(self, user_id: int, *, now: Optional[datetime] = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            "sub": str(user_id),
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + timedelta(days=self.expires_days)).timestamp()),
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def verify(self, token: Optional[str]) -> int:
        """Return the user id inside ``token``.

        Raises:
            AuthenticationError: missing, malformed, expired or forged token.
        """
        if not token:
            raise AuthenticationError("No token provided")
        try:
            claims = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as exc:
            raise AuthenticationError("Invalid token") from exc
        try:
            return int(claims["sub"])
        except (KeyError, TypeError, ValueError) as exc:
            raise AuthenticationError("Invalid token") from exc


class AuthService:
    """Sign users in with a code mailed to them."""

    def __init__(
        self,
        users: UserRepository,
        mailer: Mailer,
        tokens: TokenService,
        *,
        otp_ttl_minutes: int = 10,
        clock: Callable[[], datetime] = utcnow,
        otp_generator: Callable[[], str] = generate_otp,
    ) -> None:
        self.users = users
        self.mailer = mailer
        self.tokens = tokens
        self.otp_ttl_minutes = otp_ttl_minutes
        self.clock = clock
        self.otp_generator = otp_generator

    def send_otp(self, email: Optional[str]) -> str:
        """Store a fresh code for ``email`` (creating the user) and mail it."""

        email = normalize_email(email)
        code = self.otp_generator()
        changes = {
            "otp_hash": _hasher.hash(code),
            "otp_expires_at": self.clock() + timedelta(minutes=self.otp_ttl_minutes),
        }

        user = self.users.get_by_email(email)
        if user is None:
            user = self.users.create(User(email=email, **changes))
        else:
            self.users.update(user.id, changes)  # type: ignore[arg-type]

        result = self.mailer.send(email, OTP_SUBJECT, render_otp_email(code, self.otp_ttl_minutes))
        if not result.success:
            logger.warning("OTP email to %s failed: %s", email, result.error)
            raise MailDeliveryError(result.error or "Failed to send OTP email")
        logger.info("OTP sent", extra={"user_id": user.id})
        return email

    def verify_otp(self, email: Optional[str], code: Optional[str]) -> tuple[str, User]:
        """Check ``code`` and return ``(token, user)`` on success."""

        if not email or not code:
            raise ValidationError("Email and OTP are required")
        user = self.users.get_by_email(email)
        if user is None:
            raise NotFoundError("User not found. Please request OTP first.")
        if not user.otp_hash or not _code_matches(user.otp_hash, str(code).strip()):
            raise ValidationError("Invalid OTP")
        if user.otp_expires_at is None or user.otp_expires_at < self.clock():
            raise ValidationError("OTP has expired. Please request a new one.")

        user = self.users.update(
            user.id,  # type: ignore[arg-type]
            {
                "otp_hash": None,
                "otp_expires_at": None,
                "is_verified": True,
                "last_login": self.clock(),
            },
        ) or user
        logger.info("User signed in", extra={"user_id": user.id})
        return self.tokens.issue(user.id), user  # type: ignore[arg-type]

    def current_user(self, user_id: int) -> User:
        user = self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user


def _code_matches(otp_hash: str, code: str) -> bool:
    try:
        return _hasher.verify(otp_hash, code)
    except (VerifyMismatchError, InvalidHash, VerificationError):
        return False


__all__ = ["AuthService", "TokenService", "generate_otp", "normalize_email"]
