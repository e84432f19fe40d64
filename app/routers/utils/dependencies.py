"""FastAPI dependencies wiring collaborators into the routers."""

from functools import lru_cache
from typing import Optional

from fastapi import Depends

from app.adapters.base import BaseBlobStorage, BaseEmbeddingProvider, BaseVectorIndex
from app.adapters.blob_storage import build_blob_storage_from_env
from app.adapters.embedding_client import build_embedding_client_from_env
from app.adapters.vector_index import build_vector_index_from_env
from app.config import get_settings
from app.services.chunk_indexer import ChunkIndexer
from app.services.reply_generator import ReplyGenerator
from app.services.retriever import KnowledgeBaseRetriever
from app.workers.llm import build_llm_runner_from_env


@lru_cache(maxsize=1)
def get_embedding_provider() -> BaseEmbeddingProvider:
    return build_embedding_client_from_env()


@lru_cache(maxsize=1)
def get_vector_index() -> BaseVectorIndex:
    return build_vector_index_from_env()


@lru_cache(maxsize=1)
def get_blob_storage() -> Optional[BaseBlobStorage]:
    return build_blob_storage_from_env()


@lru_cache(maxsize=1)
def get_reply_generator() -> ReplyGenerator:
    return ReplyGenerator(build_llm_runner_from_env())


def get_retriever(
    embeddings: BaseEmbeddingProvider = Depends(get_embedding_provider),
    index: BaseVectorIndex = Depends(get_vector_index),
) -> KnowledgeBaseRetriever:
    settings = get_settings()
    return KnowledgeBaseRetriever(
        embeddings,
        index,
        top_k=settings.retrieval_top_k,
        max_context_chars=settings.retrieval_max_context_chars,
    )


def get_chunk_indexer(
    embeddings: BaseEmbeddingProvider = Depends(get_embedding_provider),
    index: BaseVectorIndex = Depends(get_vector_index),
) -> ChunkIndexer:
    return ChunkIndexer(embeddings, index)
