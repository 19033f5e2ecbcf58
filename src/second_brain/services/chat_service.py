"""Retrieval-augmented chat and document summarisation over a LlamaIndex LLM."""

from __future__ import annotations

import json
import re
from collections.abc import AsyncIterator, Sequence
from datetime import UTC, date, datetime

from llama_index.core.llms import LLM, ChatMessage, MessageRole
from llama_index.llms.groq import Groq  # type: ignore

from second_brain.config import Settings
from second_brain.core.constants import FILE_TYPE_AUDIO, FILE_TYPE_IMAGE, FILE_TYPE_PDF
from second_brain.core.exceptions import (
    AppException,
    ConfigurationError,
    NotFoundException,
    ProviderError,
    ValidationException,
)
from second_brain.core.logging import get_logger
from second_brain.core.models import ChunkHit
from second_brain.schemas.chat import ChatTurn, SummarizeResponse
from second_brain.services.document_service import DocumentService
from second_brain.services.search_service import SearchService

logger = get_logger(__name__)

_JSON_OBJECT = re.compile(r"\{[^}]*\}")

CONTEXT_SEPARATOR = "\n\n---\n\n"
CHAT_CONTEXT_LIMIT = 5

_SOURCE_LABELS = {
    FILE_TYPE_AUDIO: "audio transcription",
    FILE_TYPE_IMAGE: "image description",
    FILE_TYPE_PDF: "PDF document",
}

DATE_EXTRACTION_PROMPT = """Extract any date or time references from this query. Today's date is {today}.

Query: "{question}"

If the query mentions temporal constraints (e.g., "last week", "uploaded yesterday", "from January", "documents from 2024", "this month"), respond with JSON containing:
- dateFrom: ISO date string (YYYY-MM-DD) for the start date
- dateTo: ISO date string (YYYY-MM-DD) for the end date

If no temporal constraint is mentioned, respond with: {{}}

Examples:
"documents uploaded last week" -> {{"dateFrom": "2024-11-24", "dateTo": "2024-12-01"}}
"files from yesterday" -> {{"dateFrom": "2024-11-30", "dateTo": "2024-12-01"}}
"uploaded in January 2024" -> {{"dateFrom": "2024-01-01", "dateTo": "2024-01-31"}}
"what did I upload?" -> {{}}

Respond with ONLY the JSON object, nothing else."""

SYSTEM_PROMPT = """You are Second Brain, an advanced AI assistant designed to retrieve, reason over, and connect information across the user's entire knowledge base.

Your capabilities:
- Retrieve and use context from the user's documents, including temporal information (timestamps, chronology, historical sequences, dated notes).
- Link insights across multiple documents, even when they are related indirectly.
- Synthesize information into clear, structured, actionable responses.
- Ground all answers in the retrieved context whenever relevant.
- If the retrieved context does NOT contain relevant information, fall back to general knowledge, but explicitly state that the stored context was not useful.
- Avoid hallucinations at all costs; do not invent facts not supported by context or general knowledge.
- If the user's question is ambiguous or missing detail, request clarification.

Answer format:
- Be precise, logical, and concise.
- When using context, reference or restate the relevant parts clearly.
- Preserve chronology when answering temporal questions.
- Provide deeper insights when multiple documents relate to the query.
- If delivering a complex answer, use headings, bullet points, or numbered steps for clarity."""

SYSTEM_PROMPT_WITH_CONTEXT = """You are Second Brain, an advanced AI assistant designed to retrieve, reason over, and connect information across the user's personal knowledge base.

Use the following context extracted from the user's documents to answer the question as accurately and insightfully as possible.
If the context contains relevant information, you MUST ground your answer in it.
If the context is irrelevant or insufficient, say so clearly and then rely on your general knowledge.

Context from documents:
{context}

Instructions for reasoning:
- Identify temporal signals (dates, timestamps, sequence markers) and use them when relevant.
- Link related concepts across different documents.
- Avoid hallucinations; do not fabricate information not found in context or your general world knowledge.
- Produce a structured, helpful answer with clear reasoning.
- If multiple interpretations are possible, present them and explain the differences.
- If the question is unclear, ask the user to clarify.

Now answer the user's question using the above context and reasoning guidelines."""

SUMMARY_SYSTEM_PROMPT = (
    "You are a helpful assistant that creates concise, informative summaries of documents. "
    "Provide key points, main ideas, and important details."
)


def build_llm(settings: Settings) -> LLM:
    """Construct the Groq chat model.

    Raises:
        ConfigurationError: If ``GROQ_API_KEY`` is not set.
    """
    if not settings.groq_api_key:
        raise ConfigurationError("Groq API key not configured")
    return Groq(
        model=settings.llm_model,
        api_key=settings.groq_api_key,
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
    )


def parse_date_filters(text: str) -> dict[str, str]:
    """Pull ``dateFrom``/``dateTo`` out of the first JSON object in ``text``."""
    match = _JSON_OBJECT.search(text or "")
    if not match:
        return {}

    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError:
        return {}
    if not isinstance(parsed, dict):
        return {}

    return {
        key: parsed[key]
        for key in ("dateFrom", "dateTo")
        if isinstance(parsed.get(key), str) and parsed[key]
    }


async def extract_date_filters(llm: LLM, question: str, today: date) -> dict[str, str]:
    """Ask the LLM for a temporal constraint in ``question``; ``{}`` when none or on failure."""
    prompt = DATE_EXTRACTION_PROMPT.format(today=today.isoformat(), question=question)
    try:
        response = await llm.acomplete(prompt, temperature=0.1, max_tokens=150)
    except Exception as exc:
        logger.warning("Failed to extract temporal filters: %s", exc)
        return {}

    filters = parse_date_filters(response.text.strip())
    if filters:
        logger.info("Extracted temporal filters: %s", filters)
    return filters


def source_label(file_type: str | None) -> str:
    return _SOURCE_LABELS.get(file_type or "", "document")


def build_context(hits: Sequence[ChunkHit]) -> str:
    """Render retrieved chunks as labelled sources for the system prompt."""
    return CONTEXT_SEPARATOR.join(
        f"[Source: {source_label(hit.file_type)} - {hit.filename}]\n{hit.content}"
        for hit in hits
    )


def build_system_prompt(context: str) -> str:
    if context:
        return SYSTEM_PROMPT_WITH_CONTEXT.format(context=context)
    return SYSTEM_PROMPT


class ChatService:
    """Answers questions over the user's documents and summarises single documents."""

    def __init__(
        self,
        settings: Settings,
        search_service: SearchService,
        document_service: DocumentService,
        llm: LLM | None = None,
    ):
        self.settings = settings
        self._search = search_service
        self._documents = document_service
        self._llm = llm

    @property
    def llm(self) -> LLM:
        if self._llm is None:
            self._llm = build_llm(self.settings)
            logger.info("LLM initialized: %s", self.settings.llm_model)
        return self._llm

    async def retrieve_context(self, question: str) -> str:
        """Search with any temporal filters the question implies; ``""`` on failure."""
        filters = await extract_date_filters(self.llm, question, datetime.now(UTC).date())
        try:
            hits = await self._search.search(
                question,
                CHAT_CONTEXT_LIMIT,
                date_from=filters.get("dateFrom"),
                date_to=filters.get("dateTo"),
                include_metadata=True,
            )
        except (AppException, ValueError) as exc:
            logger.warning("Vector search failed, continuing without context: %s", exc)
            return ""

        if hits:
            logger.info(
                "Found %d relevant chunks for query%s",
                len(hits),
                " (with temporal filters)" if filters else "",
            )
        return build_context(hits)

    async def build_messages(self, messages: Sequence[ChatTurn]) -> list[ChatMessage]:
        """System prompt (with retrieved context when any) followed by the conversation."""
        context = await self.retrieve_context(messages[-1].content)
        return [
            ChatMessage(role=MessageRole.SYSTEM, content=build_system_prompt(context)),
            *(ChatMessage(role=MessageRole(turn.role), content=turn.content) for turn in messages),
        ]

    async def stream_answer(self, messages: Sequence[ChatTurn]) -> AsyncIterator[str]:
        """Prepare the prompt, then return an iterator over the answer's text deltas.

        Raises:
            ValidationException: No messages.
            ConfigurationError: No Groq credential configured.
        """
        if not messages:
            raise ValidationException("No messages provided")

        llm = self.llm
        chat_messages = await self.build_messages(messages)
        return self._stream(llm, chat_messages)

    async def _stream(self, llm: LLM, chat_messages: list[ChatMessage]) -> AsyncIterator[str]:
        # Once streaming started the status code is sent; errors go into the body.
        try:
            response = await llm.astream_chat(chat_messages)
            async for part in response:
                if part.delta:
                    yield part.delta
        except Exception as exc:
            logger.error("Stream error: %s", exc, exc_info=True)
            yield f"Stream error: {exc}"

    async def summarize(self, document_id: str) -> SummarizeResponse:
        """Summarise one document from its ordered chunks.

        Raises:
            ConfigurationError: No Groq credential configured.
            NotFoundException: The document has no chunks.
            ProviderError: The LLM call failed.
        """
        llm = self.llm
        chunks = await self._documents.get_document_chunks(document_id)
        contents = [chunk.content for chunk in chunks if chunk.content]
        if not contents:
            raise NotFoundException("Document not found")

        full_text = "\n\n".join(contents)[: self.settings.summary_max_chars]
        try:
            response = await llm.achat(
                [
                    ChatMessage(role=MessageRole.SYSTEM, content=SUMMARY_SYSTEM_PROMPT),
                    ChatMessage(
                        role=MessageRole.USER,
                        content=(
                            "Please provide a comprehensive summary of the following "
                            f"document:\n\n{full_text}"
                        ),
                    ),
                ],
                max_tokens=800,
            )
        except Exception as exc:
            logger.error("Error summarizing %s: %s", document_id, exc)
            raise ProviderError(f"Failed to generate summary: {exc}") from exc

        summary = (response.message.content or "").strip() or "Unable to generate summary"
        logger.info("Summarized %s from %d chunks", document_id, len(contents))
        return SummarizeResponse(
            success=True,
            document_id=document_id,
            chunks_count=len(contents),
            summary=summary,
        )
