# errors.py
from typing import Optional


class ChatError(Exception):
    """Base error for chat operations. `status_code` is the HTTP status it maps to."""

    status_code: int = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(ChatError):
    """A required field is missing or empty."""

    status_code = 400


class NotFoundError(ChatError):
    """No chat exists for the given id."""

    status_code = 404


class ChatClientError(Exception):
    """Raised by ChatClient when the server rejects a request."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class NoActiveChatError(ChatClientError):
    """send_message or get_messages was called before a chat was started or joined."""

    def __init__(self):
        super().__init__("No active chat session")
