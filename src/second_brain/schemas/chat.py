"""Chat and summarisation schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ChatTurn(BaseModel):
    """One message of the conversation so far."""

    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    """Conversation to answer; the last message is the question."""

    messages: list[ChatTurn] = Field(..., min_length=1, description="Conversation history")


class SummarizeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    document_id: str = Field(..., alias="documentId", min_length=1)


class SummarizeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    document_id: str = Field(..., alias="documentId")
    chunks_count: int = Field(0, alias="chunksCount")
    summary: str
