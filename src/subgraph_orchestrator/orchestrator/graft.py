"""
subgraph_orchestrator.orchestrator.graft

Graft base resolution.

Responsibilities:
- Recognise deploy failures caused by a graft base missing from every index node.
- Extract the missing dependency's deployment id from the error message.
- Enforce the auto-graft-resolver depth ceiling.
"""

from __future__ import annotations

from subgraph_orchestrator.observability.logging import get_logger
from subgraph_orchestrator.orchestrator.classification import (
    GRAFT_BASE_SIGNATURE,
    RemoteErrorKind,
    classify_remote_error,
)
from subgraph_orchestrator.orchestrator.types import (
    IPFS_HASH_LENGTH,
    IPFS_HASH_PREFIX,
    DeploymentID,
)

log = get_logger(__name__)


def is_graft_base_failure(message: str) -> bool:
    return classify_remote_error(message) is RemoteErrorKind.graft_base_missing


def extract_graft_base(message: str) -> DeploymentID | None:
    """
    Returns the 46-character hash that starts at the first "Qm" after the
    graft signature, or None when the token is missing or malformed.
    """

    anchor = message.lower().find(GRAFT_BASE_SIGNATURE)
    if anchor < 0:
        return None
    start = message.find(IPFS_HASH_PREFIX, anchor)
    if start < 0:
        return None
    return DeploymentID.parse(message[start : start + IPFS_HASH_LENGTH])


def resolve_graft_base(message: str, *, depth: int, max_depth: int) -> DeploymentID | None:
    if not is_graft_base_failure(message):
        return None

    base = extract_graft_base(message)
    if base is None:
        log.warning("graft_base_unparseable", error=message, depth=depth)
        return None

    if depth >= max_depth:
        log.warning(
            "graft_depth_limit_reached",
            deployment=str(base),
            depth=depth,
            max_depth=max_depth,
        )
        return None

    return base
