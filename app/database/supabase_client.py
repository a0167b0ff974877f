"""
Supabase clients.

Table queries run on a client created for the request and bound to the
caller's access token, so row-level security sees the caller. GoTrue calls
(sign up, sign in, token checks, sign out) go through one shared client whose
data layer is never used.
"""

from typing import Optional

from fastapi import Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from supabase import create_client, Client, ClientOptions
from app.config import settings

bearer = HTTPBearer(auto_error=False)


def _options() -> ClientOptions:
    # No background refresh timers and no stored session on server-side clients.
    return ClientOptions(auto_refresh_token=False, persist_session=False)


class SupabaseClient:
    _auth_client: Client = None
    _service_client: Client = None

    @classmethod
    def get_auth_client(cls) -> Client:
        """Process-wide client for GoTrue calls only; never query tables with it."""
        if cls._auth_client is None:
            cls._auth_client = create_client(settings.supabase_url, settings.supabase_key, options=_options())
        return cls._auth_client

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with service_role key; bypasses RLS. Used for seeding roles and auth admin calls."""
        if cls._service_client is None and settings.supabase_service_role_key:
            cls._service_client = create_client(
                settings.supabase_url, settings.supabase_service_role_key, options=_options()
            )
        return cls._service_client or cls.get_auth_client()

    @classmethod
    def create_session_client(cls, access_token: Optional[str] = None) -> Client:
        """New client whose PostgREST requests carry access_token (anon key when None)."""
        client = create_client(settings.supabase_url, settings.supabase_key, options=_options())
        if access_token:
            client.postgrest.auth(access_token)
        return client


def get_supabase(credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer)) -> Client:
    """Request-scoped data client acting as the bearer of the request's token"""
    token = credentials.credentials if credentials else None
    return SupabaseClient.create_session_client(token)


def get_auth_supabase() -> Client:
    return SupabaseClient.get_auth_client()


def get_service_supabase() -> Client:
    return SupabaseClient.get_service_client()
