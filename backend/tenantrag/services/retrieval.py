"""Keyword retrieval and prompt assembly for tenant question answering.

Retrieval is a case-insensitive substring match over document titles and
bodies, taken in storage order (newest first). It is a placeholder contract:
there is no scoring, ranking or embedding index behind it.
"""
import logging
from dataclasses import dataclass
from typing import List, Sequence

from tenantrag.models.document import Document
from tenantrag.repository import Repository

logger = logging.getLogger(__name__)

MAX_CONTEXT_DOCUMENTS = 3

NO_CONTEXT_PLACEHOLDER = "No relevant documents found."

SYSTEM_INSTRUCTIONS = """You are a helpful AI assistant for a multi-tenant RAG system.
Answer the user's question based on the provided context. If the context doesn't contain
relevant information, say so clearly."""


@dataclass
class RetrievalResult:
    """Documents selected for a query and the context rendered from them."""
    documents: List[Document]
    context: str

    @property
    def titles(self) -> List[str]:
        return [doc.title for doc in self.documents]


def matches_query(doc: Document, query: str) -> bool:
    """True if the lower-cased query occurs in the document's title or content."""
    needle = query.lower()
    return needle in (doc.title or "").lower() or needle in (doc.content or "").lower()


def select_relevant_documents(
    documents: Sequence[Document],
    query: str,
    limit: int = MAX_CONTEXT_DOCUMENTS,
) -> List[Document]:
    """First ``limit`` matching documents, in the order given."""
    return [doc for doc in documents if matches_query(doc, query)][:limit]


def format_document(doc: Document) -> str:
    return f"Document: {doc.title}\n{doc.content}"


def build_context(documents: Sequence[Document]) -> str:
    return "\n\n".join(format_document(doc) for doc in documents)


def build_system_prompt(context: str) -> str:
    return f"""{SYSTEM_INSTRUCTIONS}

Context:
{context or NO_CONTEXT_PLACEHOLDER}"""


class RetrievalService:
    """Selects context documents for one tenant."""

    def __init__(self, repo: Repository, tenant_id: int):
        self.repo = repo
        self.tenant_id = tenant_id

    def retrieve(self, query: str) -> RetrievalResult:
        candidates = self.repo.list_documents(tenant_id=self.tenant_id)
        selected = select_relevant_documents(candidates, query)
        logger.debug(
            f"Tenant {self.tenant_id}: {len(selected)} of {len(candidates)} documents match query"
        )
        return RetrievalResult(documents=selected, context=build_context(selected))
