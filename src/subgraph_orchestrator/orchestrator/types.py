"""
subgraph_orchestrator.orchestrator.types

Value types shared by the gateway, resolver and orchestrator.

Responsibilities:
- Content-addressed deployment identity (IPFS CIDv0 hash).
- Per-call deployment request shape.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# CIDv0: "Qm" followed by 44 base58btc characters.
IPFS_HASH_PREFIX = "Qm"
IPFS_HASH_LENGTH = 46
IPFS_HASH_PATTERN = r"^Qm[1-9A-HJ-NP-Za-km-z]{44}$"
_IPFS_HASH_RE = re.compile(IPFS_HASH_PATTERN)

NodeID = str


@dataclass(frozen=True, slots=True)
class DeploymentID:
    ipfs_hash: str

    def __post_init__(self) -> None:
        if not _IPFS_HASH_RE.match(self.ipfs_hash):
            raise ValueError(f"invalid deployment id: {self.ipfs_hash!r}")

    @classmethod
    def parse(cls, raw: str) -> DeploymentID | None:
        try:
            return cls(raw.strip())
        except (AttributeError, ValueError):
            return None

    def __str__(self) -> str:
        return self.ipfs_hash


@dataclass(frozen=True, slots=True)
class DeploymentRequest:
    """
    One `ensure` invocation.

    `depth` counts graft-resolution levels below the top-level request.
    """

    name: str
    deployment: DeploymentID
    node: NodeID | None = None
    depth: int = 0

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("subgraph name must not be empty")
        if self.depth < 0:
            raise ValueError("depth must be >= 0")

    def for_dependency(self, dependency: DeploymentID, node: NodeID) -> DeploymentRequest:
        return DeploymentRequest(
            name=self.name, deployment=dependency, node=node, depth=self.depth + 1
        )


# --- Module Notes -----------------------------------------------------------
# Requests are built per call and never shared, so concurrent top-level ensures
# stay independent of each other.
