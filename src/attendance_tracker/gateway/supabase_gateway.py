from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Mapping, Optional, Sequence

import httpx
from supabase import AsyncClient, AuthError, AuthSessionMissingError, PostgrestAPIError, acreate_client

from .base import AuthSession, AuthUser, GatewayFailure, GatewayResult, SessionListener

logger = logging.getLogger(__name__)

_GATEWAY_ERRORS = (AuthError, PostgrestAPIError, httpx.HTTPError)


def _failure(error: Exception) -> GatewayResult:
    message = getattr(error, "message", None) or str(error) or type(error).__name__
    code = getattr(error, "code", None)
    return GatewayResult(error=GatewayFailure(message=str(message), code=str(code) if code else None))


def _to_user(user: Any) -> Optional[AuthUser]:
    if user is None:
        return None
    return AuthUser(id=str(user.id), email=getattr(user, "email", None))


def _to_session(session: Any) -> Optional[AuthSession]:
    if session is None:
        return None
    expires_at = getattr(session, "expires_at", None)
    return AuthSession(
        access_token=session.access_token,
        user=_to_user(session.user),
        expires_at=datetime.fromtimestamp(expires_at, tz=timezone.utc) if expires_at else None,
    )


class SupabaseGateway:
    """Gateway backed by the Supabase async client.

    Row ownership is enforced by the project's RLS policies; nothing here
    filters by user.
    """

    def __init__(self, client: AsyncClient, *, admin_client: Optional[AsyncClient] = None):
        self._client = client
        self._admin_client = admin_client

    @classmethod
    async def connect(cls, url: str, anon_key: str, *, service_role_key: Optional[str] = None) -> "SupabaseGateway":
        client = await acreate_client(url, anon_key)
        admin_client = await acreate_client(url, service_role_key) if service_role_key else None
        logger.info("Connected to Supabase at %s (admin=%s)", url, admin_client is not None)
        return cls(client, admin_client=admin_client)

    async def _call(self, action: Callable[[], Awaitable[Any]]) -> GatewayResult:
        try:
            return GatewayResult(data=await action())
        except _GATEWAY_ERRORS as e:
            logger.debug("Gateway call failed: %s", e)
            return _failure(e)

    # ----- auth -----

    async def sign_in_with_password(self, email: str, password: str) -> GatewayResult[None]:
        async def action():
            await self._client.auth.sign_in_with_password({"email": email, "password": password})

        return await self._call(action)

    async def sign_up(self, email: str, password: str) -> GatewayResult[AuthUser]:
        async def action():
            response = await self._client.auth.sign_up({"email": email, "password": password})
            return _to_user(response.user)

        return await self._call(action)

    async def sign_out(self) -> GatewayResult[None]:
        return await self._call(self._client.auth.sign_out)

    async def get_session(self) -> GatewayResult[AuthSession]:
        async def action():
            return _to_session(await self._client.auth.get_session())

        return await self._call(action)

    async def get_user(self) -> GatewayResult[AuthUser]:
        async def action():
            try:
                response = await self._client.auth.get_user()
            except AuthSessionMissingError:
                return None
            return _to_user(response.user) if response else None

        return await self._call(action)

    def on_session_change(self, listener: SessionListener) -> Callable[[], None]:
        subscription = self._client.auth.on_auth_state_change(
            lambda _event, session: listener(_to_session(session))
        )
        return subscription.unsubscribe

    async def delete_account(self, user_id: str) -> GatewayResult[None]:
        if self._admin_client is None:
            return GatewayResult(
                error=GatewayFailure("Account deletion requires SUPABASE_SERVICE_ROLE_KEY to be configured")
            )

        async def action():
            await self._admin_client.auth.admin.delete_user(user_id)

        return await self._call(action)

    # ----- tables -----

    async def select(
        self,
        table: str,
        *,
        columns: str = "*",
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Sequence[str] = (),
    ) -> GatewayResult[list]:
        async def action():
            query = self._client.table(table).select(columns)
            for column, value in (filters or {}).items():
                query = query.eq(column, value)
            for column in order_by:
                query = query.order(column)
            response = await query.execute()
            return list(response.data or [])

        return await self._call(action)

    async def insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> GatewayResult[None]:
        async def action():
            await self._client.table(table).insert([dict(r) for r in rows]).execute()

        return await self._call(action)

    async def update(self, table: str, changes: Mapping[str, Any], row_id: str) -> GatewayResult[None]:
        async def action():
            await self._client.table(table).update(dict(changes)).eq("id", row_id).execute()

        return await self._call(action)

    async def delete(self, table: str, row_id: str) -> GatewayResult[None]:
        async def action():
            await self._client.table(table).delete().eq("id", row_id).execute()

        return await self._call(action)
