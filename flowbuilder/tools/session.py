"""Where the workflow builder learns who is calling."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class SessionProvider(Protocol):
    """Supplies the current user id, or None when nobody is signed in."""

    async def get_user_id(self) -> str | None: ...


class StaticSessionProvider:
    """Session provider with a fixed user, for scripts and tests."""

    def __init__(self, user_id: str | None) -> None:
        self.user_id = user_id

    async def get_user_id(self) -> str | None:
        return self.user_id
