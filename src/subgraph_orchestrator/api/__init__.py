"""
subgraph_orchestrator.api

Management API package (FastAPI).
"""

# Package marker.
