# backend/core/security.py
import hashlib
import hmac
import os
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError
from passlib.context import CryptContext

from core.config import settings


JWT_SECRET = settings.jwt_secret
JWT_ALGORITHM = settings.jwt_algorithm

ASSESSMENT_TOKEN_ALPHABET = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
ASSESSMENT_TOKEN_LENGTH = 24

# no 0/O, 1/I: passwords get read out loud and retyped
VIDEO_PASSWORD_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
VIDEO_PASSWORD_LENGTH = 6

ADMIN_FLAG_SUBJECT = "admin"

# ---- TEST MODE (plaintext passwords) ----
# If set, we avoid crypto backends entirely in tests to keep them deterministic.
TEST_PLAINTEXT = os.getenv("TEST_PLAINTEXT_PASSWORDS", "0") == "1"

if TEST_PLAINTEXT:
    def get_password_hash(password: str) -> str:
        return f"plain::{password}"

    def verify_password(plain_password: str, hashed_password: str) -> bool:
        return hashed_password == f"plain::{plain_password}"
else:
    # Production/dev: PBKDF2-SHA256
    pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

    def get_password_hash(password: str) -> str:
        return pwd_context.hash(password)

    def verify_password(plain_password: str, hashed_password: str) -> bool:
        try:
            return pwd_context.verify(plain_password, hashed_password)
        except ValueError:
            # unknown / malformed hash
            return False


def _random_string(alphabet: str, length: int) -> str:
    return "".join(secrets.choice(alphabet) for _ in range(length))


def generate_assessment_token() -> str:
    return _random_string(ASSESSMENT_TOKEN_ALPHABET, ASSESSMENT_TOKEN_LENGTH)


def generate_video_password() -> str:
    return _random_string(VIDEO_PASSWORD_ALPHABET, VIDEO_PASSWORD_LENGTH)


def generate_session_token() -> str:
    return secrets.token_hex(32)


def hash_session_token(token: str) -> str:
    """Sessions are stored by digest; the raw token only lives in the cookie."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def check_admin_password(candidate: Optional[str]) -> bool:
    expected = settings.admin_password
    if not expected or not candidate:
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


def create_admin_flag_token(expires_seconds: Optional[int] = None) -> str:
    """
    Signed value for the admin flag cookie. Carries no identity, only
    "the shared admin password was presented" plus an expiry.
    """
    exp = datetime.now(timezone.utc) + timedelta(
        seconds=expires_seconds or settings.admin_cookie_max_age
    )
    to_encode = {"sub": ADMIN_FLAG_SUBJECT, "exp": exp}
    return jwt.encode(to_encode, JWT_SECRET, algorithm=JWT_ALGORITHM)


def verify_admin_flag_token(token: Optional[str]) -> bool:
    if not token:
        return False
    try:
        payload = jwt.decode(
            token,
            JWT_SECRET,
            algorithms=[JWT_ALGORITHM],
            options={"verify_aud": False},
        )
    except JWTError:
        return False
    return payload.get("sub") == ADMIN_FLAG_SUBJECT
