"""
subgraph_orchestrator.rpc.admin_client

JSON-RPC client for the index node admin endpoint.

Responsibilities:
- Issue `subgraph_create`, `subgraph_deploy` and `subgraph_reassign` calls.
- Return remote error payloads as values (`RemoteOutcome`) rather than raising.
- Raise `TransportError` for network failures and timeouts.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any

import httpx

from subgraph_orchestrator.orchestrator.errors import RemoteError, TransportError
from subgraph_orchestrator.orchestrator.types import DeploymentID, NodeID
from subgraph_orchestrator.settings import Settings

# Assigning a deployment to this node id unassigns it.
UNASSIGN_NODE = "removed"


@dataclass(frozen=True, slots=True)
class RemoteOutcome:
    result: Any = None
    error: RemoteError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.result


class IndexNodeAdminClient:
    def __init__(self, *, settings: Settings, http: httpx.AsyncClient) -> None:
        self._settings = settings
        self._http = http

    async def create_subgraph(self, *, name: str) -> RemoteOutcome:
        return await self._call("subgraph_create", {"name": name})

    async def deploy_subgraph(
        self, *, name: str, deployment: DeploymentID, node: NodeID
    ) -> RemoteOutcome:
        return await self._call(
            "subgraph_deploy",
            {"name": name, "ipfs_hash": deployment.ipfs_hash, "node_id": node},
            timeout=self._settings.deploy_timeout_seconds,
        )

    async def reassign_subgraph(self, *, node: NodeID, deployment: DeploymentID) -> RemoteOutcome:
        return await self._call(
            "subgraph_reassign",
            {"node_id": node, "ipfs_hash": deployment.ipfs_hash},
        )

    async def _call(
        self,
        method: str,
        params: dict[str, Any],
        *,
        timeout: float | None = None,
    ) -> RemoteOutcome:
        payload = {"jsonrpc": "2.0", "id": str(uuid.uuid4()), "method": method, "params": params}
        request_kwargs: dict[str, Any] = {"json": payload}
        if timeout is not None:
            request_kwargs["timeout"] = timeout

        try:
            r = await self._http.post("", **request_kwargs)
        except httpx.TimeoutException as e:
            raise TransportError(
                f"{method} timed out", method=method, timed_out=True
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"{method} failed: {e}", method=method) from e

        try:
            body = r.json()
        except ValueError as e:
            raise TransportError(
                f"{method} returned a non-JSON response (HTTP {r.status_code})", method=method
            ) from e

        error = body.get("error") if isinstance(body, dict) else None
        if error is not None:
            return RemoteOutcome(error=_remote_error(error))

        if r.is_error:
            raise TransportError(f"{method} failed with HTTP {r.status_code}", method=method)
        if not isinstance(body, dict) or "result" not in body:
            raise TransportError(f"{method} returned a malformed JSON-RPC response", method=method)
        return RemoteOutcome(result=body["result"])


def _remote_error(error: Any) -> RemoteError:
    if isinstance(error, dict):
        return RemoteError(
            str(error.get("message", "")),
            code=error.get("code"),
            data=error.get("data"),
        )
    return RemoteError(str(error))


# --- Module Notes -----------------------------------------------------------
# Only deploy carries an explicit timeout; create/reassign inherit whatever the
# shared httpx client was built with (see `api.app`).
