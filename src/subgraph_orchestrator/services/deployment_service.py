"""
subgraph_orchestrator.services.deployment_service

Deployment lifecycle service (transaction owner).

Responsibilities:
- Wire the admin client, indexing rule store and orchestrator for one session.
- Commit indexing rule changes whether an ensure succeeds, fails or asks for a retry.
- Translate the retry signal into an explicit status for callers.
"""

from __future__ import annotations

import enum
import random

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from subgraph_orchestrator.db.repositories.indexing_rules import IndexingRuleRepo
from subgraph_orchestrator.orchestrator.engine import DeploymentOrchestrator
from subgraph_orchestrator.orchestrator.errors import GraftRetryRequired
from subgraph_orchestrator.orchestrator.rule_sync import RuleSynchronizer
from subgraph_orchestrator.orchestrator.types import DeploymentID, NodeID
from subgraph_orchestrator.rpc.admin_client import IndexNodeAdminClient
from subgraph_orchestrator.settings import Settings


class EnsureStatus(enum.StrEnum):
    ensured = "ENSURED"
    graft_retry_required = "GRAFT_RETRY_REQUIRED"


class DeploymentService:
    def __init__(
        self,
        *,
        session: AsyncSession,
        settings: Settings,
        http: httpx.AsyncClient,
        rng: random.Random | None = None,
    ) -> None:
        self._session = session
        self._orchestrator = DeploymentOrchestrator(
            client=IndexNodeAdminClient(settings=settings, http=http),
            rules=RuleSynchronizer(IndexingRuleRepo(session)),
            index_node_ids=settings.index_node_ids,
            auto_graft_resolver_depth=settings.auto_graft_resolver_depth,
            rng=rng,
        )

    async def ensure(
        self, *, name: str, deployment: DeploymentID, node: NodeID | None = None
    ) -> tuple[EnsureStatus, DeploymentID | None]:
        """
        Returns (status, dependency); dependency is set only when a graft base
        was provisioned and the caller should ensure again.
        """

        try:
            await self._orchestrator.ensure(name=name, deployment=deployment, node=node)
        except GraftRetryRequired as signal:
            return EnsureStatus.graft_retry_required, signal.dependency
        finally:
            # Rules written before a failing step (e.g. reassign) still describe live deployments.
            await self._commit()
        return EnsureStatus.ensured, None

    async def reassign(self, *, deployment: DeploymentID, node: NodeID | None = None) -> None:
        await self._orchestrator.reassign(deployment=deployment, node=node)

    async def remove(self, *, deployment: DeploymentID) -> bool:
        removed = await self._orchestrator.remove(deployment=deployment)
        await self._commit()
        return removed

    async def _commit(self) -> None:
        # A failed flush leaves the transaction inactive; discard it so the session stays usable.
        if not self._session.is_active:
            await self._session.rollback()
        await self._session.commit()


# --- Module Notes -----------------------------------------------------------
# One service instance per session; sessions are never shared across callers.
