"""Query router: keyword retrieval + answer generation, and the query log."""
import logging
from typing import List

from fastapi import APIRouter, Depends, Query as QueryParam

from tenantrag.access import TenantAccessContext, optional_tenant_context
from tenantrag.errors import NotFound, TenantContextRequired
from tenantrag.models.user import User
from tenantrag.repository import Repository, get_repository
from tenantrag.security import get_current_user
from tenantrag.schemas.document import DocumentRead
from tenantrag.schemas.query import ProcessedQuery, QueryCreate, QueryRead
from tenantrag.services.generation import AnswerGenerator, get_answer_generator
from tenantrag.services.retrieval import RetrievalService, build_system_prompt

router = APIRouter(prefix="/queries", tags=["queries"])
logger = logging.getLogger(__name__)


def _default_tenant_id(repo: Repository, user: User) -> int | None:
    """The tenant of the user's earliest membership."""
    memberships = repo.list_memberships_for_user(user.id)
    return memberships[0].tenant_id if memberships else None


@router.get("", response_model=List[QueryRead])
async def list_queries(
    tenant_id: int | None = QueryParam(None, alias="tenantId"),
    current_user: User = Depends(get_current_user),
    repo: Repository = Depends(get_repository),
):
    """The caller's query history, newest first."""
    return repo.list_queries(tenant_id=tenant_id, user_id=current_user.id)


@router.post("", response_model=ProcessedQuery)
async def create_query(
    query_in: QueryCreate,
    ctx: TenantAccessContext | None = Depends(optional_tenant_context),
    current_user: User = Depends(get_current_user),
    repo: Repository = Depends(get_repository),
    generator: AnswerGenerator = Depends(get_answer_generator),
):
    """
    Answer a question from the tenant's documents.

    Selects up to three documents whose title or content contains the query,
    sends them as context to the language model and logs the exchange.
    """
    tenant_id = ctx.tenant_id if ctx is not None else _default_tenant_id(repo, current_user)
    if tenant_id is None:
        raise TenantContextRequired("No tenant found for user")
    if repo.get_tenant(tenant_id) is None:
        raise NotFound("Tenant not found")

    retrieval = RetrievalService(repo, tenant_id).retrieve(query_in.query)
    system_prompt = build_system_prompt(retrieval.context)
    answer = await generator.generate(system_prompt, query_in.query)

    row = repo.create_query(
        tenant_id=tenant_id,
        user_id=current_user.id,
        query=query_in.query,
        response=answer,
        context=retrieval.context,
        relevant_docs=retrieval.titles,
    )
    logger.info(
        f"Query {row.id} answered for tenant {tenant_id} with {len(retrieval.documents)} source(s)"
    )

    return ProcessedQuery(
        **QueryRead.model_validate(row).model_dump(),
        sources=[DocumentRead.model_validate(doc) for doc in retrieval.documents],
    )
