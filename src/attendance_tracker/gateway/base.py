from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Generic, Mapping, Optional, Protocol, Sequence, TypeVar

from ..core.exceptions import AuthenticationRequired, GatewayError

T = TypeVar("T")


@dataclass(frozen=True)
class AuthUser:
    id: str
    email: Optional[str] = None


@dataclass(frozen=True)
class AuthSession:
    access_token: str
    user: AuthUser
    expires_at: Optional[datetime] = None


@dataclass(frozen=True)
class GatewayFailure:
    """Structured error returned by the gateway.

    `message` is the gateway's own text; it is surfaced as-is, never reclassified.
    """

    message: str
    code: Optional[str] = None


@dataclass(frozen=True)
class GatewayResult(Generic[T]):
    """Either `data` or `error`, never both. Check `error` before trusting `data`."""

    data: Optional[T] = None
    error: Optional[GatewayFailure] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Optional[T]:
        if self.error is not None:
            raise GatewayError(self.error.message)
        return self.data


SessionListener = Callable[[Optional[AuthSession]], None]


class Gateway(Protocol):
    """Remote data gateway used by the stores.

    Every call is async and returns a `GatewayResult`; implementations must
    not let transport or API exceptions escape.
    """

    async def sign_in_with_password(self, email: str, password: str) -> GatewayResult[None]:
        raise NotImplementedError

    async def sign_up(self, email: str, password: str) -> GatewayResult[AuthUser]:
        raise NotImplementedError

    async def sign_out(self) -> GatewayResult[None]:
        raise NotImplementedError

    async def get_session(self) -> GatewayResult[AuthSession]:
        raise NotImplementedError

    async def get_user(self) -> GatewayResult[AuthUser]:
        """Current account, or `data=None` when there is no session."""

        raise NotImplementedError

    def on_session_change(self, listener: SessionListener) -> Callable[[], None]:
        """Register a push listener; fires on every session transition.

        Returns a function that removes the listener.
        """

        raise NotImplementedError

    async def delete_account(self, user_id: str) -> GatewayResult[None]:
        """Administrative account removal (needs a privileged key)."""

        raise NotImplementedError

    async def select(
        self,
        table: str,
        *,
        columns: str = "*",
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Sequence[str] = (),
    ) -> GatewayResult[list]:
        raise NotImplementedError

    async def insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> GatewayResult[None]:
        raise NotImplementedError

    async def update(self, table: str, changes: Mapping[str, Any], row_id: str) -> GatewayResult[None]:
        raise NotImplementedError

    async def delete(self, table: str, row_id: str) -> GatewayResult[None]:
        raise NotImplementedError


async def require_user(gateway: Gateway) -> AuthUser:
    """Resolve the signed-in account or raise `AuthenticationRequired`."""
    user = (await gateway.get_user()).unwrap()
    if user is None:
        raise AuthenticationRequired("User not authenticated")
    return user
