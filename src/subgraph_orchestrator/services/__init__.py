"""
subgraph_orchestrator.services

Service-layer package.

Responsibilities:
- Own transaction boundaries around orchestrator calls.
"""

# Package marker.
