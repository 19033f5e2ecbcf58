"""Tests for retrieval-augmented chat and summarisation."""

from __future__ import annotations

from datetime import date
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from llama_index.core.llms import MessageRole

from second_brain.config import Settings
from second_brain.core.exceptions import ConfigurationError, NotFoundException
from second_brain.core.models import ChunkHit
from second_brain.repositories.chunk_repository import ChunkRepository
from second_brain.schemas.chat import ChatTurn
from second_brain.services.chat_service import (
    ChatService,
    build_context,
    build_system_prompt,
    extract_date_filters,
    parse_date_filters,
)
from second_brain.services.document_service import DocumentService
from second_brain.services.search_service import SearchService

pytestmark = pytest.mark.asyncio


def _fake_llm(*, completion: str = "{}", deltas: tuple[str, ...] = (), summary: str = "") -> MagicMock:
    async def stream():
        for delta in deltas:
            yield SimpleNamespace(delta=delta)

    llm = MagicMock()
    llm.acomplete = AsyncMock(return_value=SimpleNamespace(text=completion))
    llm.astream_chat = AsyncMock(side_effect=lambda messages: stream())
    llm.achat = AsyncMock(
        return_value=SimpleNamespace(message=SimpleNamespace(content=summary))
    )
    return llm


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ('{"dateFrom": "2025-01-01", "dateTo": "2025-01-31"}', {"dateFrom": "2025-01-01", "dateTo": "2025-01-31"}),
        ('Sure! {"dateFrom": "2025-06-01"} hope that helps', {"dateFrom": "2025-06-01"}),
        ("{}", {}),
        ("no json here", {}),
        ("{not json}", {}),
        ('{"dateFrom": 2025}', {}),
    ],
)
def test_parse_date_filters(text: str, expected: dict) -> None:
    assert parse_date_filters(text) == expected


async def test_extract_date_filters_includes_today() -> None:
    llm = _fake_llm(completion='{"dateFrom": "2025-06-09", "dateTo": "2025-06-16"}')

    filters = await extract_date_filters(llm, "what did I upload last week?", date(2025, 6, 16))

    assert filters == {"dateFrom": "2025-06-09", "dateTo": "2025-06-16"}
    prompt = llm.acomplete.await_args.args[0]
    assert "2025-06-16" in prompt
    assert "what did I upload last week?" in prompt


async def test_extract_date_filters_swallows_llm_failure() -> None:
    llm = MagicMock()
    llm.acomplete = AsyncMock(side_effect=RuntimeError("rate limited"))
    assert await extract_date_filters(llm, "anything", date(2025, 1, 1)) == {}


def test_build_context_labels_sources() -> None:
    context = build_context(
        [
            ChunkHit(content="spoken words", score=0.9, filename="memo.mp3", file_type="audio"),
            ChunkHit(content="a cat", score=0.8, filename="cat.png", file_type="image"),
            ChunkHit(content="clause 4", score=0.7, filename="lease.pdf", file_type="pdf"),
            ChunkHit(content="plain", score=0.6, filename="notes.txt", file_type="text"),
        ]
    )

    assert context.split("\n\n---\n\n") == [
        "[Source: audio transcription - memo.mp3]\nspoken words",
        "[Source: image description - cat.png]\na cat",
        "[Source: PDF document - lease.pdf]\nclause 4",
        "[Source: document - notes.txt]\nplain",
    ]


def test_build_system_prompt_with_and_without_context() -> None:
    assert "Context from documents:\nCTX" in build_system_prompt("CTX")
    assert "Context from documents" not in build_system_prompt("")
    assert build_system_prompt("").startswith("You are Second Brain")


async def test_stream_answer_grounds_prompt_in_retrieved_chunks(
    test_settings: Settings,
    search_service: SearchService,
    document_service: DocumentService,
    chunk_repository: ChunkRepository,
) -> None:
    await chunk_repository.upsert_chunks(
        ["The tomato seeds were planted in March."],
        document_id="garden",
        filename="garden.txt",
    )
    llm = _fake_llm(deltas=("Tomatoes ", "in March."))
    service = ChatService(test_settings, search_service, document_service, llm=llm)

    stream = await service.stream_answer([ChatTurn(role="user", content="When did I plant tomatoes?")])
    answer = "".join([part async for part in stream])

    assert answer == "Tomatoes in March."
    messages = llm.astream_chat.await_args.args[0]
    assert messages[0].role == MessageRole.SYSTEM
    assert "[Source: document - garden.txt]" in messages[0].content
    assert messages[-1].role == MessageRole.USER
    assert messages[-1].content == "When did I plant tomatoes?"


async def test_stream_answer_without_context_when_search_fails(
    test_settings: Settings,
    search_service: SearchService,
    document_service: DocumentService,
) -> None:
    search_service.search = AsyncMock(side_effect=ValueError("bad date"))  # type: ignore[method-assign]
    llm = _fake_llm(deltas=("Hello",))
    service = ChatService(test_settings, search_service, document_service, llm=llm)

    stream = await service.stream_answer([ChatTurn(role="user", content="hi")])

    assert [part async for part in stream] == ["Hello"]
    system_prompt = llm.astream_chat.await_args.args[0][0].content
    assert "Context from documents" not in system_prompt


async def test_stream_errors_are_written_into_the_body(
    test_settings: Settings,
    search_service: SearchService,
    document_service: DocumentService,
) -> None:
    llm = _fake_llm()
    llm.astream_chat = AsyncMock(side_effect=RuntimeError("connection reset"))
    service = ChatService(test_settings, search_service, document_service, llm=llm)

    stream = await service.stream_answer([ChatTurn(role="user", content="hi")])

    assert [part async for part in stream] == ["Stream error: connection reset"]


async def test_missing_groq_key_fails_before_streaming(
    test_settings: Settings,
    search_service: SearchService,
    document_service: DocumentService,
) -> None:
    settings = test_settings.model_copy(update={"groq_api_key": None})
    search_service.search = AsyncMock()  # type: ignore[method-assign]
    service = ChatService(settings, search_service, document_service)

    with pytest.raises(ConfigurationError, match="Groq API key not configured"):
        await service.stream_answer([ChatTurn(role="user", content="hi")])
    search_service.search.assert_not_awaited()


async def test_summarize_uses_ordered_truncated_chunks(
    test_settings: Settings,
    search_service: SearchService,
    document_service: DocumentService,
    chunk_repository: ChunkRepository,
) -> None:
    await chunk_repository.upsert_chunks(
        ["alpha " * 10, "beta " * 10], document_id="doc1", filename="a.txt"
    )
    settings = test_settings.model_copy(update={"summary_max_chars": 70})
    llm = _fake_llm(summary="Alpha then beta.")
    service = ChatService(settings, search_service, document_service, llm=llm)

    response = await service.summarize("doc1")

    assert response.success
    assert response.chunks_count == 2
    assert response.summary == "Alpha then beta."
    user_message = llm.achat.await_args.args[0][1].content
    document_text = user_message.split("\n\n", 1)[1]
    assert len(document_text) == 70
    assert document_text.startswith("alpha")


async def test_summarize_unknown_document(
    test_settings: Settings,
    search_service: SearchService,
    document_service: DocumentService,
) -> None:
    service = ChatService(test_settings, search_service, document_service, llm=_fake_llm())
    with pytest.raises(NotFoundException):
        await service.summarize("missing")
