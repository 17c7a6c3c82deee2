"""Declarative base and type-map for the order-store tables.

Uses SQLAlchemy 2.0 ``DeclarativeBase`` with a ``type_annotation_map``
that maps Python built-in types to portable column types.  Timestamps are
kept as ``Text`` in the storage format (``YYYY-MM-DD HH:MM:SS``) so raw-SQL
repositories and the ORM read the same values.
"""

from __future__ import annotations

from sqlalchemy import Integer, Text
from sqlalchemy.orm import DeclarativeBase


class OrderStoreBase(DeclarativeBase):
    """Shared declarative base for every order-store table.

    * ``str``   → ``Text``
    * ``int``   → ``Integer``
    """

    type_annotation_map = {
        str: Text,
        int: Integer,
    }
