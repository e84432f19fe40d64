"""Knowledge-base retrieval: query embedding, vector search and context assembly."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from app.adapters.base import BaseEmbeddingProvider, BaseVectorIndex, VectorMatch
from app.constants.knowledge_base_prompt import KnowledgeBasePrompt
from app.infra.logging_config import get_logger

logger = get_logger("retriever")

DEFAULT_TOP_K = 5
MAX_CONTEXT_CHARS = 16000
TRUNCATION_MARKER = "..."


@dataclass
class RetrievedSource:
    filename: str
    chunk_index: int
    score: float


@dataclass
class RetrievalResult:
    has_knowledge_base: bool
    context: str = ""
    sources: List[RetrievedSource] = field(default_factory=list)


def assemble_context(
    matches: Sequence[VectorMatch], max_chars: int = MAX_CONTEXT_CHARS
) -> str:
    """
    Highest score first, identical chunk texts kept once, each block tagged with
    its source file. Output longer than max_chars is cut and marked.
    """
    seen: set[str] = set()
    blocks: List[str] = []
    for match in sorted(matches, key=lambda m: m.score, reverse=True):
        text = str(match.metadata.get("text", ""))
        if text in seen:
            continue
        seen.add(text)
        blocks.append(f"[Source: {match.metadata.get('filename', '')}]\n{text}")

    context = "\n\n".join(blocks)
    if len(context) > max_chars:
        return context[:max_chars] + TRUNCATION_MARKER
    return context


def build_context_prompt(context: str) -> str:
    return KnowledgeBasePrompt.TEMPLATE.format(context=context)


class KnowledgeBaseRetriever:
    def __init__(
        self,
        embeddings: BaseEmbeddingProvider,
        index: BaseVectorIndex,
        top_k: int = DEFAULT_TOP_K,
        max_context_chars: int = MAX_CONTEXT_CHARS,
    ) -> None:
        self.embeddings = embeddings
        self.index = index
        self.top_k = top_k
        self.max_context_chars = max_context_chars

    async def retrieve(self, query: str) -> RetrievalResult:
        """
        Never raises. has_knowledge_base is False when the index is empty or
        unreachable; True with empty context when nothing relevant matched.
        """
        try:
            if not await self.index.has_vectors():
                return RetrievalResult(has_knowledge_base=False)

            [query_vector] = await self.embeddings.embed([query], mode="query")
            matches = await self.index.query(query_vector, self.top_k)
            if not matches:
                return RetrievalResult(has_knowledge_base=True)

            context = assemble_context(matches, self.max_context_chars)
            sources = [
                RetrievedSource(
                    filename=str(m.metadata.get("filename", "")),
                    chunk_index=int(m.metadata.get("chunk_index", 0)),
                    score=m.score,
                )
                for m in matches
            ]
            return RetrievalResult(
                has_knowledge_base=True, context=context, sources=sources
            )
        except Exception as e:
            logger.error("Knowledge base retrieval failed: %s", e)
            return RetrievalResult(has_knowledge_base=False)
