"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - ScheduleId wraps a UUID; the string form only exists at the API boundary
    - UserId stays a string: user identifiers are opaque to this package
    - DocumentVersion values are the literal envelope keys used on the wire

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

ScheduleId = NewType("ScheduleId", UUID)
UserId = NewType("UserId", str)


# ─── Enums ───────────────────────────────────────────────────────

class DocumentVersion(str, Enum):
    """Schema versions of the persisted schedule document envelope."""
    V1 = "V1"


# ─── Caller ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class Caller:
    """Identity of whoever invokes a service operation."""
    user_id: str | None = None
