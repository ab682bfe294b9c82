"""
Acting-user identity, consumed as a capability.

The kernel never authenticates anyone.  Callers hand it an ``Actor``
obtained from an ``IdentityProvider``; a missing actor is an
``UnauthenticatedError``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from kitstock_kernel.exceptions import UnauthenticatedError


@dataclass(frozen=True)
class Actor:
    """An authenticated user acting on inventory."""

    id: UUID
    name: str
    role: str | None = None


class IdentityProvider(Protocol):
    """External collaborator supplying the acting user."""

    def current_user(self) -> Actor:
        """Return the acting user or raise UnauthenticatedError."""
        ...

    def get_user(self, user_id: UUID) -> Actor | None:
        """Look up a user for display purposes."""
        ...


class StaticIdentityProvider:
    """
    In-process IdentityProvider over a fixed set of users.

    Used by scripts and tests; production wiring supplies the real
    provider of the hosting application.
    """

    def __init__(self, users: list[Actor] | None = None, current: Actor | None = None):
        self._users: dict[UUID, Actor] = {u.id: u for u in users or ()}
        self._current = current
        if current is not None:
            self._users[current.id] = current

    def login(self, actor: Actor) -> None:
        self._users[actor.id] = actor
        self._current = actor

    def logout(self) -> None:
        self._current = None

    def current_user(self) -> Actor:
        if self._current is None:
            raise UnauthenticatedError()
        return self._current

    def get_user(self, user_id: UUID) -> Actor | None:
        return self._users.get(user_id)


def require_actor(actor: Actor | None, operation: str) -> Actor:
    if actor is None:
        raise UnauthenticatedError(operation)
    return actor
