"""
subgraph_orchestrator.orchestrator.engine

Deployment orchestration state machine.

Responsibilities:
- `ensure`: create the subgraph name, deploy the deployment, pin it to a node.
- Resolve missing graft bases by ensuring the dependency first (bounded depth).
- `remove`: best-effort unassignment plus indexing rule cleanup.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import Any

from subgraph_orchestrator.observability.logging import get_logger
from subgraph_orchestrator.orchestrator.classification import RemoteErrorKind
from subgraph_orchestrator.orchestrator.errors import (
    DeployFailed,
    EnsureFailed,
    GraftResolutionExhausted,
    GraftRetryRequired,
    OrchestratorError,
    ReassignFailed,
    SubgraphCreateFailed,
    TransportError,
)
from subgraph_orchestrator.orchestrator.graft import resolve_graft_base
from subgraph_orchestrator.orchestrator.placement import select_node
from subgraph_orchestrator.orchestrator.rule_sync import RuleSynchronizer
from subgraph_orchestrator.orchestrator.types import DeploymentID, DeploymentRequest, NodeID
from subgraph_orchestrator.rpc.admin_client import UNASSIGN_NODE, IndexNodeAdminClient

log = get_logger(__name__)


class DeploymentOrchestrator:
    """
    Stateless between calls: recursion depth travels on `DeploymentRequest`, so
    independent callers may run `ensure` concurrently on one instance.
    """

    def __init__(
        self,
        *,
        client: IndexNodeAdminClient,
        rules: RuleSynchronizer,
        index_node_ids: Sequence[NodeID],
        auto_graft_resolver_depth: int = 0,
        rng: random.Random | None = None,
    ) -> None:
        self._client = client
        self._rules = rules
        self._pool = tuple(index_node_ids)
        self._max_depth = auto_graft_resolver_depth
        self._rng = rng

    async def ensure(
        self,
        *,
        name: str,
        deployment: DeploymentID,
        node: NodeID | None = None,
        depth: int = 0,
    ) -> None:
        await self._ensure(
            DeploymentRequest(name=name, deployment=deployment, node=node, depth=depth)
        )

    async def create(self, *, name: str) -> None:
        log.info("create_subgraph_name", name=name)
        try:
            outcome = await self._client.create_subgraph(name=name)
        except TransportError as e:
            raise SubgraphCreateFailed(f"failed to create subgraph name {name!r}: {e}") from e

        if outcome.ok:
            log.info("subgraph_name_created", name=name)
            return
        if outcome.error.kind is RemoteErrorKind.already_exists:
            log.debug("subgraph_name_exists", name=name)
            return
        raise SubgraphCreateFailed(
            f"failed to create subgraph name {name!r}: {outcome.error}"
        ) from outcome.error

    async def deploy(
        self,
        *,
        name: str,
        deployment: DeploymentID,
        node: NodeID | None = None,
        depth: int = 0,
    ) -> Any:
        request = DeploymentRequest(name=name, deployment=deployment, node=node, depth=depth)
        target = select_node(request.node, self._pool, rng=self._rng)
        return await self._deploy(request, target)

    async def reassign(self, *, deployment: DeploymentID, node: NodeID | None = None) -> None:
        target = select_node(node, self._pool, rng=self._rng)
        await self._reassign(deployment, target)

    async def remove(self, *, deployment: DeploymentID) -> bool:
        """
        Unassign the deployment from every node and drop its indexing rule.

        Failures are logged and reported as False; nothing is raised.
        """

        bound = log.bind(deployment=str(deployment))
        bound.info("remove_deployment")
        try:
            outcome = await self._client.reassign_subgraph(
                node=UNASSIGN_NODE, deployment=deployment
            )
            outcome.unwrap()
            bound.info("deployment_removed")
            await self._rules.drop_rule(deployment)
        except OrchestratorError as e:
            bound.error("remove_failed", error=str(e), error_type=type(e).__name__)
            return False
        return True

    async def _ensure(self, request: DeploymentRequest) -> None:
        target = select_node(request.node, self._pool, rng=self._rng)
        bound = log.bind(
            name=request.name,
            deployment=str(request.deployment),
            target_node=target,
            depth=request.depth,
        )
        try:
            await self.create(name=request.name)
            await self._deploy(request, target)
            await self._reassign(request.deployment, target)
        except GraftRetryRequired as signal:
            bound.info("graft_retry_required", dependency=str(signal.dependency))
            raise
        except OrchestratorError as e:
            bound.error("ensure_failed", error=str(e), error_type=type(e).__name__)
            raise EnsureFailed(deployment=request.deployment, node=target, cause=e) from e
        bound.info("deployment_ensured")

    async def _deploy(self, request: DeploymentRequest, target: NodeID) -> Any:
        deployment = request.deployment
        bound = log.bind(
            name=request.name, deployment=str(deployment), target_node=target, depth=request.depth
        )
        bound.info("deploy_subgraph")
        try:
            outcome = await self._client.deploy_subgraph(
                name=request.name, deployment=deployment, node=target
            )
        except TransportError as e:
            raise DeployFailed(f"deploy of {deployment} failed: {e}") from e

        if outcome.ok:
            bound.info("subgraph_deployed", endpoints=outcome.result)
            await self._rules.ensure_offchain_rule(deployment)
            return outcome.result

        error = outcome.error
        if error.kind is not RemoteErrorKind.graft_base_missing:
            raise DeployFailed(f"deploy of {deployment} failed: {error}") from error

        dependency = resolve_graft_base(
            error.message, depth=request.depth, max_depth=self._max_depth
        )
        if dependency is None:
            if request.depth >= self._max_depth:
                raise GraftResolutionExhausted(
                    f"graft base of {deployment} missing and auto-graft resolution "
                    f"stops at depth {self._max_depth}",
                    depth=request.depth,
                    max_depth=self._max_depth,
                ) from error
            raise DeployFailed(
                f"deploy of {deployment} failed on an unreadable graft base: {error}"
            ) from error

        bound.info("graft_base_resolving", dependency=str(dependency))
        await self._ensure(request.for_dependency(dependency, target))

        # Second attempt at the same depth; its outcome is only logged.
        try:
            retry = await self._client.deploy_subgraph(
                name=request.name, deployment=deployment, node=target
            )
        except TransportError as e:
            bound.warning("graft_retry_deploy_failed", error=str(e))
        else:
            bound.info(
                "graft_retry_deploy_submitted",
                ok=retry.ok,
                error=None if retry.ok else retry.error.message,
            )
        raise GraftRetryRequired(deployment=deployment, dependency=dependency)

    async def _reassign(self, deployment: DeploymentID, target: NodeID) -> None:
        bound = log.bind(deployment=str(deployment), target_node=target)
        bound.info("reassign_subgraph")
        try:
            outcome = await self._client.reassign_subgraph(node=target, deployment=deployment)
        except TransportError as e:
            bound.error("reassign_failed", error=str(e))
            raise ReassignFailed(f"reassign of {deployment} to {target} failed: {e}") from e

        if outcome.ok:
            bound.info("subgraph_reassigned")
            return
        error = outcome.error
        if error.kind is RemoteErrorKind.unchanged:
            bound.debug("subgraph_assignment_unchanged")
            raise error
        bound.error("reassign_failed", error=error.message)
        raise ReassignFailed(f"reassign of {deployment} to {target} failed: {error}") from error


# --- Module Notes -----------------------------------------------------------
# A resolved graft base always ends in GraftRetryRequired: the dependency is now
# deployed, but confirming the original deployment is the caller's retry.
