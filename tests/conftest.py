"""
tests.conftest

Shared fixtures: a scripted fake index node admin endpoint and a temp-file
indexing rule store.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator, Callable
from typing import Any

import httpx
import pytest
import pytest_asyncio
import structlog
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from subgraph_orchestrator.db.repositories.indexing_rules import IndexingRuleRepo
from subgraph_orchestrator.db.session import create_engine, create_sessionmaker, init_db
from subgraph_orchestrator.orchestrator.engine import DeploymentOrchestrator
from subgraph_orchestrator.orchestrator.rule_sync import RuleSynchronizer
from subgraph_orchestrator.orchestrator.types import DeploymentID
from subgraph_orchestrator.rpc.admin_client import IndexNodeAdminClient
from subgraph_orchestrator.settings import Settings

DEPLOYMENT_A = DeploymentID("QmWmyoMoctfbAaiEs2G46gpeUmhqFRDW6KWo64y5r581Vz")
DEPLOYMENT_B = DeploymentID("QmTXzATwNfgGVukV1fX2T6xw9f6LAYRVWpsdXyRWzUR2H9")
DEPLOYMENT_C = DeploymentID("QmSWxvd8SaQK6qZKJ7xtfxCCGoRzGnoi2WNzmJYYJW9BXY")

ADMIN_ENDPOINT = "http://index-node-0:8020"


def graft_base_missing(base: DeploymentID) -> str:
    return (
        "subgraph validation error: [the graft base is invalid: "
        f"deployment not found: {base.ipfs_hash}]"
    )


class FakeIndexNode:
    """
    In-memory JSON-RPC admin endpoint.

    Names and reassignments are tracked so "already exists" and "unchanged"
    errors come out the way a real index node reports them.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.names: set[str] = set()
        self.assignments: dict[str, str] = {}
        # ipfs hash -> queued deploy error messages, consumed one per deploy call
        self.deploy_errors: dict[str, list[str]] = {}
        # method -> error message returned on every call
        self.failing: dict[str, str] = {}
        # method -> exception raised by the transport
        self.transport_failures: dict[str, Exception] = {}

    def calls_to(self, method: str) -> list[dict[str, Any]]:
        return [params for m, params in self.calls if m == method]

    def deployed_hashes(self) -> list[str]:
        return [p["ipfs_hash"] for p in self.calls_to("subgraph_deploy")]

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        method, params = body["method"], body["params"]
        self.calls.append((method, params))

        if method in self.transport_failures:
            raise self.transport_failures[method]
        if method in self.failing:
            return _error(body, self.failing[method])

        if method == "subgraph_create":
            if params["name"] in self.names:
                return _error(body, f"subgraph name `{params['name']}` already exists")
            self.names.add(params["name"])
            return _result(body, {"id": "0x" + "ab" * 32})

        if method == "subgraph_deploy":
            queued = self.deploy_errors.get(params["ipfs_hash"])
            if queued:
                return _error(body, queued.pop(0))
            return _result(
                body,
                {
                    "graphql": f"/subgraphs/id/{params['ipfs_hash']}",
                    "playground": f"/subgraphs/id/{params['ipfs_hash']}/graphql",
                },
            )

        if method == "subgraph_reassign":
            if self.assignments.get(params["ipfs_hash"]) == params["node_id"]:
                return _error(body, "assignment unchanged")
            self.assignments[params["ipfs_hash"]] = params["node_id"]
            return _result(body, None)

        return _error(body, f"method not found: {method}", code=-32601)


def _result(body: dict[str, Any], result: Any) -> httpx.Response:
    return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})


def _error(body: dict[str, Any], message: str, *, code: int = -32603) -> httpx.Response:
    return httpx.Response(
        200,
        json={"jsonrpc": "2.0", "id": body["id"], "error": {"code": code, "message": message}},
    )


@pytest.fixture(autouse=True)
def _reset_structlog() -> Any:
    # `create_app` configures structlog globally; undo it so later tests see defaults.
    yield
    structlog.reset_defaults()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'rules.db'}",
        admin_endpoint=ADMIN_ENDPOINT,
        index_node_ids=["node_a", "node_b"],
        auto_graft_resolver_depth=0,
    )


@pytest.fixture
def index_node() -> FakeIndexNode:
    return FakeIndexNode()


@pytest_asyncio.fixture
async def admin_http(index_node: FakeIndexNode) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(
        base_url=ADMIN_ENDPOINT, transport=httpx.MockTransport(index_node.handler)
    ) as http:
        yield http


@pytest_asyncio.fixture
async def engine(settings: Settings) -> AsyncIterator[AsyncEngine]:
    engine = create_engine(settings)
    await init_db(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    async with create_sessionmaker(engine)() as session:
        yield session


@pytest.fixture
def rules(session: AsyncSession) -> IndexingRuleRepo:
    return IndexingRuleRepo(session)


@pytest.fixture
def make_orchestrator(
    settings: Settings, admin_http: httpx.AsyncClient, rules: IndexingRuleRepo
) -> Callable[..., DeploymentOrchestrator]:
    def _make(**overrides: Any) -> DeploymentOrchestrator:
        kwargs: dict[str, Any] = {
            "client": IndexNodeAdminClient(settings=settings, http=admin_http),
            "rules": RuleSynchronizer(rules),
            "index_node_ids": settings.index_node_ids,
            "auto_graft_resolver_depth": settings.auto_graft_resolver_depth,
        }
        kwargs.update(overrides)
        return DeploymentOrchestrator(**kwargs)

    return _make
