from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .auth.store import SessionStore, bind_session
from .common.async_runner import AsyncRunner
from .gateway.base import Gateway
from .gateway.supabase_gateway import SupabaseGateway
from .subjects.store import SubjectsStore
from .timetable.store import TimetableStore


@dataclass(frozen=True)
class Container:
    """Application context handed to the view layer.

    One instance per process; it owns the gateway, the three stores and the
    event loop the stores run on.
    """

    runner: AsyncRunner
    gateway: Gateway

    session_store: SessionStore
    subjects_store: SubjectsStore
    timetable_store: TimetableStore

    _teardown: List[Callable[[], None]] = field(default_factory=list, repr=False)

    def start(self) -> "Container":
        """Subscribe the session store to gateway pushes and hydrate it."""
        unsubscribe = self.runner.run(bind_session(self.gateway, self.session_store))
        self._teardown.append(unsubscribe)
        return self

    def close(self) -> None:
        while self._teardown:
            self._teardown.pop()()
        self.runner.stop()


def build_container(*, gateway: Gateway, runner: Optional[AsyncRunner] = None) -> Container:
    runner = runner or AsyncRunner()
    runner.start()

    return Container(
        runner=runner,
        gateway=gateway,
        session_store=SessionStore(gateway),
        subjects_store=SubjectsStore(gateway),
        timetable_store=TimetableStore(gateway),
    )


def build_supabase_container(*, url: str, anon_key: str, service_role_key: Optional[str] = None) -> Container:
    runner = AsyncRunner().start()
    # The client must be created on the loop that will later use it.
    gateway = runner.run(SupabaseGateway.connect(url, anon_key, service_role_key=service_role_key))
    return build_container(gateway=gateway, runner=runner)
