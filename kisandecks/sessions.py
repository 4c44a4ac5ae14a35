"""
Server-side sessions

The cookie carries only a signed opaque id. The session record lives in the
expiring store and holds exactly one role-scoped account id.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from fastapi import Depends, Request, Response

from .config import SESSION_COOKIE_NAME, SESSION_COOKIE_SECURE, SESSION_TTL_SECONDS
from .errors import Unauthenticated
from .models import DEFAULT_LEDGER_OWNER, utcnow
from .otp_store import ExpiringStore, get_store
from .security_utils import generate_session_id, sign_session_id, unsign_session_id

logger = logging.getLogger(__name__)

ROLE_KEYS = {"admin": "adminId", "expert": "expertId", "farmer": "farmerId"}


def _session_key(session_id: str) -> str:
    return f"session:{session_id}"


class SessionManager:
    def __init__(self, store: ExpiringStore, ttl_seconds: int = SESSION_TTL_SECONDS):
        self.store = store
        self.ttl_seconds = ttl_seconds

    def create(self, role: str, account_id: int, previous_session_id: Optional[str] = None) -> str:
        """Start a session bound to one account, replacing any session the client held"""
        if role not in ROLE_KEYS:
            raise ValueError(f"Unknown role: {role}")
        if previous_session_id:
            self.destroy(previous_session_id)

        session_id = generate_session_id()
        self.store.set(
            _session_key(session_id),
            {ROLE_KEYS[role]: account_id, "createdAt": utcnow().isoformat()},
            self.ttl_seconds,
        )
        logger.info(f"🔑 Session started for {role} {account_id}")
        return session_id

    def load(self, session_id: Optional[str]) -> dict:
        if not session_id:
            return {}
        return self.store.get(_session_key(session_id)) or {}

    def destroy(self, session_id: Optional[str]) -> None:
        """Remove a session; unknown or missing ids are ignored"""
        if session_id:
            self.store.delete(_session_key(session_id))


@dataclass
class CurrentSession:
    session_id: Optional[str] = None
    data: dict = field(default_factory=dict)

    def account_id(self, role: str) -> Optional[int]:
        return self.data.get(ROLE_KEYS[role])


def get_session_manager(store: ExpiringStore = Depends(get_store)) -> SessionManager:
    """Dependency injection for SessionManager"""
    return SessionManager(store)


def read_session_cookie(request: Request) -> Optional[str]:
    cookie_value = request.cookies.get(SESSION_COOKIE_NAME)
    if not cookie_value:
        return None
    return unsign_session_id(cookie_value, max_age=SESSION_TTL_SECONDS)


def get_current_session(
    request: Request, manager: SessionManager = Depends(get_session_manager)
) -> CurrentSession:
    session_id = read_session_cookie(request)
    data = manager.load(session_id)
    return CurrentSession(session_id=session_id if data else None, data=data)


def attach_session_cookie(response: Response, session_id: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=sign_session_id(session_id),
        max_age=SESSION_TTL_SECONDS,
        httponly=True,
        secure=SESSION_COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(key=SESSION_COOKIE_NAME, path="/")


def require_admin(session: CurrentSession = Depends(get_current_session)) -> int:
    admin_id = session.account_id("admin")
    if not admin_id:
        raise Unauthenticated("Admin authentication required", "एडमिन लॉगिन आवश्यक है")
    return admin_id


def require_expert(session: CurrentSession = Depends(get_current_session)) -> int:
    expert_id = session.account_id("expert")
    if not expert_id:
        raise Unauthenticated("Expert authentication required", "विशेषज्ञ लॉगिन आवश्यक है")
    return expert_id


def require_farmer(session: CurrentSession = Depends(get_current_session)) -> int:
    farmer_id = session.account_id("farmer")
    if not farmer_id:
        raise Unauthenticated("Authentication required", "कृपया पहले लॉगिन करें")
    return farmer_id


def get_ledger_owner(session: CurrentSession = Depends(get_current_session)) -> str:
    """Farmer id that scopes ledger and progress rows; "default" when anonymous"""
    farmer_id = session.account_id("farmer")
    return str(farmer_id) if farmer_id else DEFAULT_LEDGER_OWNER
