"""Declarative Base: the metadata every table in this package registers on.

Invariants:
    - Primary keys are named <table>_pkey, the name PostgreSQL would pick;
      the store recognises the insert race by that name (schedule_data_pkey)
"""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention={"pk": "%(table_name)s_pkey"})
