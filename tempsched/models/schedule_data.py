"""Schedule Data ORM: one document row per schedule, created lazily on first write.

Invariants:
    - schedule_id is the primary key; its constraint name is schedule_data_pkey
    - data holds raw document bytes; empty bytes mean "no temporary schedules"
    - Rows are never deleted by this package

Design Decisions:
    - LargeBinary over JSON column: the store owns decoding so it can keep
      unknown members and report corrupt bytes as a typed error
"""

import uuid

from sqlalchemy import LargeBinary, PrimaryKeyConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from tempsched.db.base import Base


SCHEDULE_DATA_PKEY = "schedule_data_pkey"


class ScheduleData(Base):
    """Per-schedule document row."""
    __tablename__ = "schedule_data"
    __table_args__ = (
        PrimaryKeyConstraint("schedule_id", name=SCHEDULE_DATA_PKEY),
    )

    schedule_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True))
    data: Mapped[bytes] = mapped_column(
        LargeBinary, nullable=False, default=b"",
    )
