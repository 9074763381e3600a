"""ORM Models: SQLAlchemy declarative models for persisted rows.

Invariants:
    - All models inherit from Base (db/base.py)
    - schedule_data holds one opaque document per schedule; users is read-only here

Design Decisions:
    - One file per table for locality
    - All models imported here so Base.metadata is complete before create_all
      or alembic autogenerate runs
"""

from tempsched.models.schedule_data import ScheduleData  # noqa: F401
from tempsched.models.user import User  # noqa: F401
