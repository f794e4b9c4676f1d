"""
subgraph_orchestrator.api.routers.deployments

Deployment management endpoints.

Responsibilities:
- Ensure a deployment (create name, deploy, assign to a node).
- Reassign and remove deployments.
- Map orchestrator outcomes onto HTTP status codes.
"""

from __future__ import annotations

from typing import Annotated

import httpx
from fastapi import APIRouter, Depends, HTTPException, Path, Response
from pydantic import BaseModel, StringConstraints
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import (
    HTTP_202_ACCEPTED,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_502_BAD_GATEWAY,
)

from subgraph_orchestrator.api.deps import admin_http, db_session, settings_dep
from subgraph_orchestrator.orchestrator.errors import (
    ConfigurationError,
    EnsureFailed,
    RemoteError,
    ReassignFailed,
)
from subgraph_orchestrator.orchestrator.types import IPFS_HASH_PATTERN, DeploymentID
from subgraph_orchestrator.services.deployment_service import DeploymentService, EnsureStatus
from subgraph_orchestrator.settings import Settings

router = APIRouter(prefix="/v1/deployments", tags=["deployments"])

SubgraphName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
DeploymentHash = Annotated[str, StringConstraints(strip_whitespace=True, pattern=IPFS_HASH_PATTERN)]
DeploymentPath = Annotated[str, Path(pattern=IPFS_HASH_PATTERN)]


class EnsureRequest(BaseModel):
    name: SubgraphName
    deployment: DeploymentHash
    node: str | None = None


class EnsureResponse(BaseModel):
    status: EnsureStatus
    deployment: str
    dependency: str | None = None


class ReassignRequest(BaseModel):
    node: str | None = None


@router.post("", response_model=EnsureResponse)
async def ensure_deployment(
    body: EnsureRequest,
    response: Response,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
    http: httpx.AsyncClient = Depends(admin_http),
) -> EnsureResponse:
    deployment = DeploymentID(body.deployment)
    svc = DeploymentService(session=session, settings=settings, http=http)
    try:
        status, dependency = await svc.ensure(
            name=body.name, deployment=deployment, node=body.node
        )
    except ConfigurationError as e:
        raise HTTPException(status_code=HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)) from e
    except EnsureFailed as e:
        code = HTTP_409_CONFLICT if e.benign else HTTP_502_BAD_GATEWAY
        raise HTTPException(status_code=code, detail=str(e)) from e

    if status is EnsureStatus.graft_retry_required:
        response.status_code = HTTP_202_ACCEPTED
    return EnsureResponse(
        status=status,
        deployment=str(deployment),
        dependency=str(dependency) if dependency else None,
    )


@router.post("/{deployment}/reassign")
async def reassign_deployment(
    deployment: DeploymentPath,
    body: ReassignRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
    http: httpx.AsyncClient = Depends(admin_http),
) -> dict[str, str]:
    target = DeploymentID(deployment)
    svc = DeploymentService(session=session, settings=settings, http=http)
    try:
        await svc.reassign(deployment=target, node=body.node)
    except ConfigurationError as e:
        raise HTTPException(status_code=HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)) from e
    except RemoteError as e:
        # Only "unchanged" escapes as a bare RemoteError.
        raise HTTPException(status_code=HTTP_409_CONFLICT, detail=e.message) from e
    except ReassignFailed as e:
        raise HTTPException(status_code=HTTP_502_BAD_GATEWAY, detail=str(e)) from e
    return {"status": "REASSIGNED", "deployment": str(target)}


@router.delete("/{deployment}")
async def remove_deployment(
    deployment: DeploymentPath,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
    http: httpx.AsyncClient = Depends(admin_http),
) -> dict[str, object]:
    target = DeploymentID(deployment)
    svc = DeploymentService(session=session, settings=settings, http=http)
    removed = await svc.remove(deployment=target)
    return {"deployment": str(target), "removed": removed}
