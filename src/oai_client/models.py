"""Data models and schemas for the OpenAI-compatible API."""

from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class WireModel(BaseModel):
    """Base for response payloads. Unknown fields are ignored."""
    model_config = ConfigDict(extra="ignore")


class Message(BaseModel):
    """Chat message model."""
    role: str
    content: str


class CompletionRequest(BaseModel):
    """Request model for chat completions."""
    model: str
    messages: List[Message] = Field(..., min_length=1)
    max_tokens: Optional[int] = Field(None, ge=1)
    temperature: Optional[float] = Field(None, ge=0, le=2)

    def to_json(self) -> str:
        """Serialize to the outbound body, leaving out unset optional fields."""
        return self.model_dump_json(exclude_none=True)


class ChoiceMessage(WireModel):
    """Assistant message inside a choice."""
    role: str
    content: Optional[str] = None
    refusal: Optional[str] = None


class Choice(WireModel):
    """Choice model for chat completions."""
    index: int
    message: ChoiceMessage
    finish_reason: Optional[str] = None
    logprobs: Optional[Any] = None


class Usage(WireModel):
    prompt_tokens: int
    completion_tokens: Optional[int] = None
    total_tokens: int


class Completion(WireModel):
    """Response model for chat completions."""
    id: str
    object: str = "chat.completion"
    created: int
    model: str
    choices: List[Choice] = Field(..., min_length=1)
    usage: Optional[Usage] = None
    system_fingerprint: Optional[str] = None

    def first_content(self) -> Optional[str]:
        return self.choices[0].message.content


class Model(WireModel):
    """One entry in the model catalog."""
    id: str
    object: str = "model"
    created: int
    owned_by: str


class ModelListResponse(WireModel):
    object: str = "list"
    data: List[Model]
