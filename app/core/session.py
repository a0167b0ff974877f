"""
Explicit authentication session.

A SessionContext is created per request (or once by a long-lived client),
started from an optional bearer token, and updated on sign-in / sign-out.
Protected handlers call require_user(), which raises AuthenticationRequired
carrying the login route the caller should be sent to.

This is a capability check for the API surface only; row-level security in
Supabase remains the authority on what a user may read or write.
"""

from typing import Optional, Dict, Any
from fastapi import HTTPException, status
from app.config import settings
import logging

logger = logging.getLogger(__name__)


class AuthenticationRequired(HTTPException):
    def __init__(self, redirect_to: Optional[str] = None, detail: str = "Authentication required"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )
        self.redirect_to = redirect_to or settings.login_route


class SessionContext:
    def __init__(self, auth_service=None):
        self.auth_service = auth_service
        self.user: Optional[Dict[str, Any]] = None
        self.access_token: Optional[str] = None
        self.loading = True

    @property
    def is_authenticated(self) -> bool:
        return not self.loading and self.user is not None

    @property
    def user_id(self) -> Optional[str]:
        return self.user["id"] if self.user else None

    def start(self, token: Optional[str]) -> "SessionContext":
        """Resolve the identity behind token. An invalid or missing token leaves the session anonymous."""
        self.loading = True
        self.user = None
        self.access_token = None
        try:
            if token and self.auth_service is not None:
                self.user = self.auth_service.get_current_user(token)
                self.access_token = token
        except HTTPException as e:
            logger.debug(f"Session token rejected: {e.detail}")
            self.user = None
        finally:
            self.loading = False
        return self

    def signed_in(self, user: Dict[str, Any], access_token: Optional[str] = None) -> None:
        self.user = user
        self.access_token = access_token
        self.loading = False

    def signed_out(self) -> None:
        if self.access_token and self.auth_service is not None:
            self.auth_service.logout(self.access_token)
        self.user = None
        self.access_token = None
        self.loading = False

    def require_user(self) -> Dict[str, Any]:
        if self.loading:
            raise AuthenticationRequired(detail="Session not established")
        if self.user is None:
            raise AuthenticationRequired()
        return self.user

    def to_dict(self) -> Dict[str, Any]:
        return {
            "authenticated": self.is_authenticated,
            "loading": self.loading,
            "user": self.user,
        }
