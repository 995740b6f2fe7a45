"""
Protocol classes for structural subtyping (duck typing with type safety).

Any class that implements the required methods is considered compatible,
so the realtime layer can be wired to Redis in production and to in-memory
fakes in tests.
"""

from typing import Protocol, runtime_checkable

from marketplace.schemas.session import UserSessionModel


@runtime_checkable
class SessionLookup(Protocol):
    """
    Read access to login sessions.

    Implementations must be idempotent and free of side effects. A missing
    session is reported as ``None``; an unavailable store raises
    ``SessionLookupError``.
    """

    async def get_session(self, session_id: str) -> UserSessionModel | None:
        ...
