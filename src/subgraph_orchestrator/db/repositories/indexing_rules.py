"""
subgraph_orchestrator.db.repositories.indexing_rules

Repository for `IndexingRule` entities.

Responsibilities:
- Look up, list, upsert and delete indexing rules by identifier.
"""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from subgraph_orchestrator.db.models import DecisionBasis, IdentifierType, IndexingRule


class IndexingRuleRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, identifier: str) -> IndexingRule | None:
        stmt = select(IndexingRule).where(IndexingRule.identifier == identifier)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def list_all(
        self, *, identifier_type: IdentifierType | None = None
    ) -> list[IndexingRule]:
        stmt = select(IndexingRule).order_by(IndexingRule.id)
        if identifier_type is not None:
            stmt = stmt.where(IndexingRule.identifier_type == identifier_type)
        return list((await self._session.execute(stmt)).scalars().all())

    async def upsert(
        self,
        *,
        identifier: str,
        identifier_type: IdentifierType,
        decision_basis: DecisionBasis,
    ) -> IndexingRule:
        existing = await self.get(identifier)
        if existing is not None:
            existing.identifier_type = identifier_type
            existing.decision_basis = decision_basis
            await self._session.flush()
            return existing

        rule = IndexingRule(
            identifier=identifier,
            identifier_type=identifier_type,
            decision_basis=decision_basis,
        )
        self._session.add(rule)
        await self._session.flush()
        return rule

    async def insert_if_absent(
        self,
        *,
        identifier: str,
        identifier_type: IdentifierType,
        decision_basis: DecisionBasis,
    ) -> IndexingRule | None:
        """
        Insert a rule inside a SAVEPOINT.

        Returns None when the identifier is already taken (e.g. a concurrent
        writer inserted it first); the outer transaction stays usable.
        """

        rule = IndexingRule(
            identifier=identifier,
            identifier_type=identifier_type,
            decision_basis=decision_basis,
        )
        try:
            async with self._session.begin_nested():
                self._session.add(rule)
        except IntegrityError:
            return None
        return rule

    async def destroy(self, identifier: str) -> int:
        result = await self._session.execute(
            delete(IndexingRule).where(IndexingRule.identifier == identifier)
        )
        await self._session.flush()
        return result.rowcount or 0


# --- Module Notes -----------------------------------------------------------
# Flush only; commits are owned by `services.deployment_service`.
