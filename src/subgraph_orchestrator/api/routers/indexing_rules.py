"""
subgraph_orchestrator.api.routers.indexing_rules

Read-only indexing rule endpoints.

Responsibilities:
- List stored indexing rules, optionally filtered by identifier type.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession

from subgraph_orchestrator.api.deps import db_session
from subgraph_orchestrator.db.models import DecisionBasis, IdentifierType
from subgraph_orchestrator.db.repositories.indexing_rules import IndexingRuleRepo

router = APIRouter(prefix="/v1/indexing-rules", tags=["indexing-rules"])


class IndexingRuleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    identifier: str
    identifier_type: IdentifierType
    decision_basis: DecisionBasis


@router.get("", response_model=list[IndexingRuleResponse])
async def list_indexing_rules(
    identifier_type: IdentifierType | None = None,
    session: AsyncSession = Depends(db_session),
) -> list[IndexingRuleResponse]:
    rules = await IndexingRuleRepo(session).list_all(identifier_type=identifier_type)
    return [IndexingRuleResponse.model_validate(r) for r in rules]
