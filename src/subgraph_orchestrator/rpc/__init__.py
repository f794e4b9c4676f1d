"""
subgraph_orchestrator.rpc

Index node admin client package.

Responsibilities:
- JSON-RPC client boundary for the index node management endpoint.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The orchestrator depends on this boundary, never on httpx directly.
