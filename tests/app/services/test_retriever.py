"""Tests for knowledge-base retrieval and context assembly."""

from app.adapters.base import VectorMatch, VectorRecord
from app.constants.knowledge_base_prompt import KnowledgeBasePrompt
from app.services.retriever import (
    KnowledgeBaseRetriever,
    assemble_context,
    build_context_prompt,
)


def _match(text, score, filename="policy.txt", chunk_index=0):
    return VectorMatch(
        id=f"{filename}-{chunk_index}-{score}",
        score=score,
        metadata={"text": text, "filename": filename, "chunk_index": chunk_index},
    )


def test_assemble_context_orders_by_score_and_tags_sources():
    context = assemble_context(
        [
            _match("Returns take 30 days", 0.4, "returns.txt"),
            _match("Shipping is free over $50", 0.9, "shipping.txt"),
        ]
    )
    assert context == (
        "[Source: shipping.txt]\nShipping is free over $50\n\n"
        "[Source: returns.txt]\nReturns take 30 days"
    )


def test_assemble_context_drops_duplicate_texts():
    context = assemble_context(
        [
            _match("Same text", 0.9, "a.txt"),
            _match("Same text", 0.8, "b.txt"),
        ]
    )
    assert context.count("Same text") == 1
    assert "[Source: a.txt]" in context
    assert "[Source: b.txt]" not in context


def test_assemble_context_truncates_with_marker():
    context = assemble_context([_match("y" * 200, 0.9)], max_chars=50)
    assert len(context) == 53
    assert context.endswith("...")


def test_build_context_prompt_embeds_context():
    prompt = build_context_prompt("[Source: a.txt]\nhello")
    assert "[Source: a.txt]\nhello" in prompt
    assert prompt.startswith(KnowledgeBasePrompt.TEMPLATE.split("{context}")[0])


async def test_empty_index_means_no_knowledge_base(fake_embeddings, fake_vector_index):
    retriever = KnowledgeBaseRetriever(fake_embeddings, fake_vector_index)
    result = await retriever.retrieve("refund?")
    assert result.has_knowledge_base is False
    assert result.context == ""
    assert result.sources == []
    assert fake_embeddings.calls == []


async def test_no_matches_means_empty_context(fake_embeddings, fake_vector_index):
    await fake_vector_index.upsert([VectorRecord(id="1", values=[1.0], metadata={})])
    fake_vector_index.preset_matches = []
    retriever = KnowledgeBaseRetriever(fake_embeddings, fake_vector_index)
    result = await retriever.retrieve("refund?")
    assert result.has_knowledge_base is True
    assert result.context == ""


async def test_retrieve_embeds_query_in_query_mode(fake_embeddings, fake_vector_index):
    fake_vector_index.preset_matches = [
        _match("Refunds are issued within 5 days", 0.8, "refunds.md", 3),
        _match("Refunds are issued within 5 days", 0.7, "refunds.md", 4),
    ]
    retriever = KnowledgeBaseRetriever(fake_embeddings, fake_vector_index)
    result = await retriever.retrieve("when do I get my refund?")

    assert fake_embeddings.calls == [(["when do I get my refund?"], "query")]
    assert result.has_knowledge_base is True
    assert result.context == "[Source: refunds.md]\nRefunds are issued within 5 days"
    assert [(s.filename, s.chunk_index) for s in result.sources] == [
        ("refunds.md", 3),
        ("refunds.md", 4),
    ]


async def test_retrieve_requests_top_k(fake_embeddings, fake_vector_index):
    fake_vector_index.preset_matches = [_match(f"text {i}", 1 - i / 10) for i in range(8)]
    retriever = KnowledgeBaseRetriever(fake_embeddings, fake_vector_index, top_k=5)
    result = await retriever.retrieve("anything")
    assert len(result.sources) == 5


async def test_retrieve_swallows_index_failures(fake_embeddings, fake_vector_index):
    await fake_vector_index.upsert([VectorRecord(id="1", values=[1.0], metadata={})])
    fake_vector_index.fail_query = True
    retriever = KnowledgeBaseRetriever(fake_embeddings, fake_vector_index)
    result = await retriever.retrieve("anything")
    assert result.has_knowledge_base is False
    assert result.context == ""
