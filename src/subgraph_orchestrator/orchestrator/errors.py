"""
subgraph_orchestrator.orchestrator.errors

Error taxonomy for deployment orchestration.

Responsibilities:
- Distinguish configuration, transport and remote failures.
- Wrap per-step failures (create/deploy/reassign) under `EnsureFailed`.
- Model "graft dependency resolved, retry required" as its own signal.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from subgraph_orchestrator.orchestrator.classification import (
    RemoteErrorKind,
    classify_remote_error,
)
from subgraph_orchestrator.orchestrator.types import DeploymentID, NodeID


class OrchestratorError(Exception):
    """Base class for every error raised by the orchestrator."""


class ConfigurationError(OrchestratorError):
    pass


class TransportError(OrchestratorError):
    def __init__(self, message: str, *, method: str, timed_out: bool = False) -> None:
        super().__init__(message)
        self.method = method
        self.timed_out = timed_out


class RemoteError(OrchestratorError):
    """The admin endpoint answered with a JSON-RPC error payload."""

    def __init__(self, message: str, *, code: int | None = None, data: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.data = data

    @property
    def kind(self) -> RemoteErrorKind:
        return classify_remote_error(self.message)


class SubgraphCreateFailed(OrchestratorError):
    pass


class DeployFailed(OrchestratorError):
    pass


class GraftResolutionExhausted(DeployFailed):
    def __init__(self, message: str, *, depth: int, max_depth: int) -> None:
        super().__init__(message)
        self.depth = depth
        self.max_depth = max_depth


class ReassignFailed(OrchestratorError):
    pass


class RuleSyncFailed(OrchestratorError):
    pass


class EnsureFailed(OrchestratorError):
    def __init__(
        self, *, deployment: DeploymentID, node: NodeID | None, cause: OrchestratorError
    ) -> None:
        super().__init__(f"deployment {deployment} not ensured: {cause}")
        self.deployment = deployment
        self.node = node
        self.cause = cause

    @property
    def benign(self) -> bool:
        # Reassigning onto the node that already holds the deployment.
        return isinstance(self.cause, RemoteError) and self.cause.kind is RemoteErrorKind.unchanged


@dataclass(slots=True, eq=False)
class GraftRetryRequired(Exception):
    """
    Raised once a missing graft base has been provisioned.

    The original deployment was re-submitted but not confirmed; the caller is
    expected to invoke `ensure` again for the top-level request.
    """

    deployment: DeploymentID
    dependency: DeploymentID

    def __str__(self) -> str:
        return (
            f"graft base {self.dependency} resolved for {self.deployment}; retry required"
        )


# --- Module Notes -----------------------------------------------------------
# GraftRetryRequired does not derive from OrchestratorError: `except OrchestratorError`
# never catches a retry signal.
