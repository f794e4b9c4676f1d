"""
subgraph_orchestrator.db.base

Declarative base for ORM models.
"""

from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
