"""
subgraph_orchestrator.orchestrator

Deployment orchestration package.

Responsibilities:
- Deployment identity types, error taxonomy and remote error classification.
- Node selection, graft base resolution and the create/deploy/reassign state machine.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Call sites outside the API layer should go through `services.deployment_service`.
