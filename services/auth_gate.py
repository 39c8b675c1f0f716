# services/auth_gate.py
import logging
from typing import Optional

from core.errors import ApiError
from services.api_client import StorefrontApi

logger = logging.getLogger(__name__)


class AuthGate:
    """Read-only view of the visitor's upstream session."""

    def __init__(self, user: Optional[dict] = None):
        self.user = user

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_admin(self) -> bool:
        return self.is_authenticated and self.user.get("role") == "admin"

    @classmethod
    async def lookup(cls, api: StorefrontApi) -> "AuthGate":
        """One session lookup; any failure reads as signed out."""
        if not api.auth_token:
            return cls()
        try:
            user = await api.get_current_user()
        except ApiError as e:
            logger.debug("Session lookup failed (%s): %s", e.status, e.message)
            return cls()
        if isinstance(user, dict) and isinstance(user.get("user"), dict):
            user = user["user"]
        return cls(user if isinstance(user, dict) and user else None)
