"""
Password and token security utilities

Stored passwords are either bcrypt hashes or, for accounts provisioned before
hashing was introduced, legacy plaintext. Both are modelled as a Credential so
callers never branch on the raw column value.
"""

import hmac
import logging
import secrets
from dataclasses import dataclass
from typing import Optional, Union

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

# Password hashing
from passlib.context import CryptContext

from .config import SECRET_KEY

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

BCRYPT_PREFIX = "$2"

OTP_MIN = 100000
OTP_MAX = 999999


# ============================================================================
# PASSWORD SECURITY
# ============================================================================


def hash_password(password: str) -> str:
    """Hash password using bcrypt"""
    return pwd_context.hash(password)


@dataclass(frozen=True)
class HashedCredential:
    digest: str

    def verify(self, secret: str) -> bool:
        try:
            return pwd_context.verify(secret, self.digest)
        except (ValueError, TypeError) as e:
            logger.error(f"Password verification error: {e}")
            return False

    @property
    def needs_rehash(self) -> bool:
        return pwd_context.needs_update(self.digest)


@dataclass(frozen=True)
class LegacyCredential:
    plaintext: str

    def verify(self, secret: str) -> bool:
        return hmac.compare_digest(self.plaintext.encode("utf-8"), secret.encode("utf-8"))

    @property
    def needs_rehash(self) -> bool:
        return True


Credential = Union[HashedCredential, LegacyCredential]


def parse_credential(stored: str) -> Credential:
    """Classify a stored password column value"""
    if stored and stored.startswith(BCRYPT_PREFIX):
        return HashedCredential(stored)
    return LegacyCredential(stored or "")


# ============================================================================
# ONE-TIME CODES AND TOKENS
# ============================================================================


def generate_otp() -> str:
    """Generate a 6-digit numeric code drawn uniformly from 100000-999999"""
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))


def generate_token(nbytes: int = 32) -> str:
    """Random hex token (64 characters for the default 32 bytes)"""
    return secrets.token_hex(nbytes)


def generate_session_id() -> str:
    return secrets.token_urlsafe(32)


_session_serializer = URLSafeTimedSerializer(SECRET_KEY, salt="kisandecks-session")


def sign_session_id(session_id: str) -> str:
    """Sign a session id for use as a cookie value"""
    return _session_serializer.dumps(session_id)


def unsign_session_id(cookie_value: str, max_age: int) -> Optional[str]:
    """Return the session id from a signed cookie, or None when tampered or too old"""
    try:
        return _session_serializer.loads(cookie_value, max_age=max_age)
    except SignatureExpired:
        logger.debug("Session cookie signature expired")
        return None
    except BadSignature:
        logger.warning("⚠️ Rejected session cookie with bad signature")
        return None
