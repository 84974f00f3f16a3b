# store.py
import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from errors import NotFoundError, ValidationError
from models import Message

logger = logging.getLogger("chat_api.store")


def pair_key(user1: str, user2: str) -> Tuple[str, str]:
    """Order-insensitive key for a pair of participants, so (A, B) and (B, A) match."""
    return (user1, user2) if user1 <= user2 else (user2, user1)


@dataclass
class Chat:
    id: str
    users: Tuple[str, str]
    messages: List[Message] = field(default_factory=list)


class ChatStore:
    """In-memory registry of chats and their message logs.

    One instance per process; chats live until the process exits. Handlers
    run on a threadpool, so every mutation happens under `_lock`.
    """

    def __init__(self) -> None:
        self._chats: Dict[str, Chat] = {}
        self._by_pair: Dict[Tuple[str, str], str] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._chats)

    def __contains__(self, chat_id: object) -> bool:
        return chat_id in self._chats

    def start(self, user1: str, user2: str) -> str:
        """Return the chat id for this pair, creating the chat on first use."""
        if not user1 or not user2:
            raise ValidationError("Both user1 and user2 are required.")

        key = pair_key(user1, user2)
        with self._lock:
            chat_id = self._by_pair.get(key)
            if chat_id is not None:
                logger.info("Reusing chat %s for %s/%s", chat_id, user1, user2)
                return chat_id

            chat_id = str(uuid.uuid4())
            self._chats[chat_id] = Chat(id=chat_id, users=(user1, user2))
            self._by_pair[key] = chat_id
        logger.info("Created chat %s for %s/%s", chat_id, user1, user2)
        return chat_id

    def get(self, chat_id: str) -> Chat:
        chat = self._chats.get(chat_id)
        if chat is None:
            raise NotFoundError("Chat not found.")
        return chat

    def append(self, chat_id: str, sender: str, text: str) -> Message:
        chat = self.get(chat_id)
        if not sender or not text:
            raise ValidationError("Sender and text are required.")

        with self._lock:
            message = Message(sender=sender, text=text)
            chat.messages.append(message)
            count = len(chat.messages)
        logger.info("Appended message #%d to chat %s from %s", count, chat_id, sender)
        return message

    def list_messages(self, chat_id: str) -> List[Message]:
        chat = self.get(chat_id)
        with self._lock:
            return list(chat.messages)
