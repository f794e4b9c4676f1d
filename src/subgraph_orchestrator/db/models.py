"""
subgraph_orchestrator.db.models

Indexing rule schema.

Responsibilities:
- Define the `IndexingRule` record the orchestrator reads and writes: which
  deployment it targets and on what basis indexing was decided.
"""

from __future__ import annotations

import enum
from datetime import datetime, timezone

from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from subgraph_orchestrator.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class IdentifierType(enum.StrEnum):
    deployment = "DEPLOYMENT"
    subgraph = "SUBGRAPH"
    group = "GROUP"


class DecisionBasis(enum.StrEnum):
    # Stored in the DB; treat values as a stable contract.
    rules = "RULES"
    never = "NEVER"
    always = "ALWAYS"
    offchain = "OFFCHAIN"


class IndexingRule(Base):
    __tablename__ = "indexing_rules"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    identifier: Mapped[str] = mapped_column(String(128), nullable=False, unique=True, index=True)
    identifier_type: Mapped[IdentifierType] = mapped_column(
        Enum(IdentifierType), nullable=False, index=True
    )
    decision_basis: Mapped[DecisionBasis] = mapped_column(
        Enum(DecisionBasis), nullable=False, default=DecisionBasis.rules
    )

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)


# --- Module Notes -----------------------------------------------------------
# Other rule fields (allocation amounts, thresholds) belong to the wider indexer
# schema and are not read by the orchestrator.
