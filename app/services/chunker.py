"""Split extracted document text into overlapping, size-bounded chunks."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

TARGET_CHUNK_SIZE = 512
OVERLAP_WORDS = 50

_SENTENCE_END = re.compile(r"[.!?]+")


@dataclass(frozen=True)
class TextChunk:
    content: str
    index: int


def _split_sentences(text: str) -> List[str]:
    return [s.strip() for s in _SENTENCE_END.split(text or "") if s.strip()]


def chunk_text(
    text: str,
    target_size: int = TARGET_CHUNK_SIZE,
    overlap_words: int = OVERLAP_WORDS,
) -> List[TextChunk]:
    """
    Greedily pack sentences into chunks of roughly target_size characters.

    The size check only closes the previous buffer; a sentence longer than
    target_size is never split. Each new chunk starts with the last
    overlap_words words of the chunk before it. Sentence terminators are
    dropped by the split. Returns an empty list for blank input.
    """
    chunks: List[TextChunk] = []
    current = ""

    for sentence in _split_sentences(text):
        candidate = f"{current} {sentence}" if current else sentence
        if len(candidate) > target_size and current:
            chunks.append(TextChunk(content=current.strip(), index=len(chunks)))
            overlap = current.split(" ")[-overlap_words:]
            current = " ".join(overlap) + " " + sentence
        else:
            current = candidate

    if current.strip():
        chunks.append(TextChunk(content=current.strip(), index=len(chunks)))

    return chunks
