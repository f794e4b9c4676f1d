"""
subgraph_orchestrator.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide the indexing rule ORM model, engine/session setup and repositories.
"""

# Package marker.
