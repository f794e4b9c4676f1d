"""
subgraph_orchestrator.orchestrator.rule_sync

Post-deploy indexing rule synchronisation.

Responsibilities:
- Make sure a freshly deployed deployment has an indexing rule, so later
  reconciliation passes keep it instead of tearing it down.
- Never overwrite a rule that already exists for the deployment.
"""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from subgraph_orchestrator.db.models import DecisionBasis, IdentifierType
from subgraph_orchestrator.db.repositories.indexing_rules import IndexingRuleRepo
from subgraph_orchestrator.observability.logging import get_logger
from subgraph_orchestrator.orchestrator.errors import RuleSyncFailed
from subgraph_orchestrator.orchestrator.types import DeploymentID

log = get_logger(__name__)


class RuleSynchronizer:
    def __init__(self, repo: IndexingRuleRepo) -> None:
        self._repo = repo

    async def ensure_offchain_rule(self, deployment: DeploymentID) -> bool:
        """
        Insert a DEPLOYMENT/OFFCHAIN rule unless one already exists.

        Returns True when a rule was inserted.
        """

        try:
            # Full scan: rule counts stay small and identifiers may be stored untrimmed.
            rules = await self._repo.list_all()
            known = {DeploymentID.parse(r.identifier) for r in rules}
            if deployment in known:
                log.debug("indexing_rule_present", deployment=str(deployment))
                return False

            inserted = await self._repo.insert_if_absent(
                identifier=deployment.ipfs_hash,
                identifier_type=IdentifierType.deployment,
                decision_basis=DecisionBasis.offchain,
            )
        except SQLAlchemyError as e:
            raise RuleSyncFailed(f"indexing rule sync failed for {deployment}: {e}") from e

        if inserted is None:
            # Lost the race to another writer; their rule stands.
            log.debug("indexing_rule_present", deployment=str(deployment), raced=True)
            return False

        log.info("offchain_indexing_rule_added", deployment=str(deployment))
        return True

    async def drop_rule(self, deployment: DeploymentID) -> bool:
        # Without a rule, reconciliation will not try to redeploy a removed deployment.
        try:
            if await self._repo.get(deployment.ipfs_hash) is None:
                return False
            await self._repo.destroy(deployment.ipfs_hash)
        except SQLAlchemyError as e:
            raise RuleSyncFailed(f"indexing rule removal failed for {deployment}: {e}") from e

        log.info("indexing_rule_removed", deployment=str(deployment))
        return True
