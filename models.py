# models.py
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision, e.g. 2024-05-01T12:00:00.123Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    sender: str
    text: str
    timestamp: str = Field(default_factory=utc_timestamp, description="Server receipt time")

# Request fields are optional so that missing values reach the store's own checks.
class StartChatRequest(BaseModel):
    user1: Optional[str] = Field(None, description="First participant name")
    user2: Optional[str] = Field(None, description="Second participant name")

class StartChatResponse(BaseModel):
    chatId: str

class SendMessageRequest(BaseModel):
    sender: Optional[str] = Field(None, description="Name of the participant sending the message")
    text: Optional[str] = Field(None, description="Message body")

class SendMessageResponse(BaseModel):
    success: bool = True
    message: Message

class MessagesResponse(BaseModel):
    messages: List[Message]
