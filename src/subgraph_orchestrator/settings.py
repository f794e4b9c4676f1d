"""
subgraph_orchestrator.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide env-driven settings for the admin endpoint, node pool and graft resolution.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SGO_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "subgraph-orchestrator"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8090

    # Indexing rules store
    database_url: str = "sqlite+aiosqlite:///./indexing_rules.db"

    # Index node admin (JSON-RPC) endpoint
    admin_endpoint: str = "http://localhost:8020"
    # Pool of index node ids; set as a JSON list, e.g. SGO_INDEX_NODE_IDS='["node_0"]'
    index_node_ids: list[str] = Field(default_factory=lambda: ["default"])

    # 0 disables automatic graft base resolution.
    auto_graft_resolver_depth: int = Field(default=0, ge=0)

    deploy_timeout_seconds: float = Field(default=120.0, gt=0)
    # Transport-level timeout for create/reassign; None blocks until the server answers.
    rpc_timeout_seconds: float | None = 30.0


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# --- Module Notes -----------------------------------------------------------
# The deploy timeout is applied per request; every other admin call inherits the
# client-level timeout configured when the httpx client is built.
