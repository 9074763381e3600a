"""Boundary Protocols: contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - Collaborators outside this package (user directory, authorization) are
      reached only through these Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, tests pass plain fakes
    - `session` is the optional caller-owned transaction handle; it is typed
      loosely so core stays free of SQLAlchemy imports
"""

from typing import Any, Collection, Protocol

from tempsched.core.domain_types import Caller, UserId


class UserExistence(Protocol):
    """Batch lookup of which user identifiers still exist."""
    async def existing_user_ids(
        self, user_ids: Collection[UserId], session: Any = None,
    ) -> set[UserId]: ...


class Authorizer(Protocol):
    """Accepts or rejects a caller before any operation proceeds."""
    def check(self, caller: Caller) -> None: ...
