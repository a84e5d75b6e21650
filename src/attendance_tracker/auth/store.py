from __future__ import annotations

import logging
from typing import Callable, Optional

from ..common.store import Observable
from ..core.constants import PROFILES_TABLE
from ..core.exceptions import CompensationFailure, GatewayError
from ..gateway.base import AuthSession, AuthUser, Gateway

logger = logging.getLogger(__name__)


class SessionStore(Observable):
    """Holds the current authenticated session.

    Sign in does not touch state: the gateway's session-change notification
    calls `set_session`, which is the only way state changes apart from a
    successful sign out.
    """

    def __init__(self, gateway: Gateway):
        super().__init__()
        self._gateway = gateway
        self.session: Optional[AuthSession] = None
        # False until startup hydration or the first push has set the session.
        self.ready = False

    @property
    def user(self) -> Optional[AuthUser]:
        return self.session.user if self.session else None

    @property
    def user_id(self) -> Optional[str]:
        return self.session.user.id if self.session else None

    def set_session(self, session: Optional[AuthSession]) -> None:
        self.session = session
        self.ready = True
        self._notify()

    async def sign_in(self, email: str, password: str) -> None:
        (await self._gateway.sign_in_with_password(email, password)).unwrap()

    async def sign_up(self, email: str, password: str, roll_number: str) -> None:
        user = (await self._gateway.sign_up(email, password)).unwrap()
        if user is None:
            raise GatewayError("User was not returned from sign up")
        logger.info("User signed up: %s", user.id)

        result = await self._gateway.insert(PROFILES_TABLE, [{"id": user.id, "roll_number": roll_number}])
        if result.error is not None:
            logger.error("Failed to insert profile for %s: %s", user.id, result.error.message)
            try:
                await self._compensate(user.id)
            except CompensationFailure as e:
                logger.error("%s", e)
            result.unwrap()

        logger.info("Profile created for user: %s", user.id)

    async def _compensate(self, user_id: str) -> None:
        result = await self._gateway.delete_account(user_id)
        if result.error is not None:
            raise CompensationFailure(
                f"Could not delete account {user_id} after failed profile insert: {result.error.message}"
            )
        logger.info("Deleted account %s after failed profile insert", user_id)

    async def sign_out(self) -> None:
        (await self._gateway.sign_out()).unwrap()
        self.set_session(None)


async def bind_session(gateway: Gateway, store: SessionStore) -> Callable[[], None]:
    """Subscribe `store` to session pushes and hydrate it from the gateway.

    Returns the unsubscribe handle; the application root calls it at shutdown.
    """
    unsubscribe = gateway.on_session_change(store.set_session)

    result = await gateway.get_session()
    if result.ok:
        store.set_session(result.data)
    else:
        logger.warning("Could not restore session: %s", result.error.message)
        store.set_session(None)

    return unsubscribe
