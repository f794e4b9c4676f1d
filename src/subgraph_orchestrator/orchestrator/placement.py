"""
subgraph_orchestrator.orchestrator.placement

Index node placement.

Responsibilities:
- Choose the node a deployment is deployed to and assigned on.
- Honour an explicit node; otherwise pick uniformly from the configured pool.
"""

from __future__ import annotations

import random
from collections.abc import Sequence

from subgraph_orchestrator.observability.logging import get_logger
from subgraph_orchestrator.orchestrator.errors import ConfigurationError
from subgraph_orchestrator.orchestrator.types import NodeID

log = get_logger(__name__)


def select_node(
    explicit: NodeID | None,
    pool: Sequence[NodeID],
    *,
    rng: random.Random | None = None,
) -> NodeID:
    """
    Pick the index node a deployment should run on.

    An explicit node always wins, even outside the configured pool (migrations,
    decommissioning); that case is only logged.
    """

    if explicit:
        if explicit not in pool:
            log.warning(
                "target_node_outside_pool",
                target_node=explicit,
                pool=list(pool),
            )
        return explicit

    if not pool:
        raise ConfigurationError("no index node ids configured and no target node given")
    return (rng or random).choice(list(pool))
