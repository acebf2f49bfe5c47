# /buddy/models/api.py

from pydantic import Field, field_validator
from typing import List, Literal, Optional

from buddy.models.flow import Action, CamelModel, QuickAction, TaskContext

# This file contains Pydantic models for the non-flow endpoints: the
# autonomous tool-calling chat and the check-in message helpers.


class ChatMessage(CamelModel):
    role: Literal["user", "assistant"]
    content: str = ""


class AdvancedChatRequest(CamelModel):
    messages: List[ChatMessage]
    language: Optional[str] = None
    task_context: TaskContext
    voice_mode: Literal["chat", "tasks", "notes"] = "chat"
    is_voice: bool = False
    current_time: Optional[str] = None
    current_date: Optional[str] = None

    @field_validator("voice_mode", mode="before")
    @classmethod
    def default_voice_mode(cls, v):
        return v or "chat"


class AdvancedChatResponse(CamelModel):
    type: Literal["actions", "message"]
    message: str
    actions: List[Action] = Field(default_factory=list)


class TaskRef(CamelModel):
    title: str
    start_time: Optional[str] = None


class TaskMessageRequest(CamelModel):
    task: TaskRef
    language: Optional[str] = None


class ProactiveCheckinRequest(CamelModel):
    type: str = "morning"
    language: Optional[str] = None
    task_context: TaskContext


class RandomMotivationRequest(CamelModel):
    language: Optional[str] = None
    task_context: TaskContext


class MessageResponse(CamelModel):
    message: str
    quick_actions: List[QuickAction] = Field(default_factory=list)
