"""Chat and summarisation endpoints."""

from fastapi import APIRouter
from fastapi.responses import StreamingResponse

from second_brain.core.logging import get_logger
from second_brain.dependencies import ChatServiceDep
from second_brain.schemas.chat import ChatRequest, SummarizeRequest, SummarizeResponse

logger = get_logger(__name__)

router = APIRouter(tags=["chat"])


@router.post(
    "/chat",
    summary="Chat",
    description="Streams an answer grounded in the most relevant stored chunks as plain text",
    response_class=StreamingResponse,
)
async def chat(request: ChatRequest, chat_service: ChatServiceDep) -> StreamingResponse:
    """Answer the last message of the conversation.

    Configuration errors are raised before the stream starts; errors during
    generation are written into the streamed body.
    """
    stream = await chat_service.stream_answer(request.messages)
    return StreamingResponse(stream, media_type="text/plain; charset=utf-8")


@router.post(
    "/summarize",
    response_model=SummarizeResponse,
    summary="Summarize Document",
    description="Summarises one stored document from its chunks",
)
async def summarize(
    request: SummarizeRequest,
    chat_service: ChatServiceDep,
) -> SummarizeResponse:
    logger.info("Summarize request: %s", request.document_id)
    return await chat_service.summarize(request.document_id)
