# chat_client.py
import logging
import time
from typing import Any, Dict, Iterator, List, Optional

import httpx

from errors import ChatClientError, NoActiveChatError
from models import Message
from settings import Settings

logger = logging.getLogger("chat_api.client")


class ChatClient:
    """HTTP client for one chat server.

    Remembers the chat id returned by `start_chat` and scopes
    `send_message` / `get_messages` to it. Pass an existing `httpx.Client`
    (for example FastAPI's TestClient) as `http` to reuse its transport.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        http: Optional[httpx.Client] = None,
        timeout: float = 10.0,
        settings: Optional[Settings] = None,
    ):
        self._settings = settings or Settings()
        self._owns_http = http is None
        self._http = http or httpx.Client(
            base_url=base_url or self._settings.API_BASE_URL,
            timeout=timeout,
        )
        self._current_chat_id: Optional[str] = None

    @property
    def current_chat_id(self) -> Optional[str]:
        return self._current_chat_id

    @current_chat_id.setter
    def current_chat_id(self, chat_id: Optional[str]) -> None:
        self._current_chat_id = chat_id

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "ChatClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, action: str, **kwargs) -> Dict[str, Any]:
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.RequestError as e:
            logger.error("Error %s: %s", action, e)
            raise

        if response.is_error:
            try:
                data = response.json()
            except ValueError:
                data = None
            detail = data.get("error") if isinstance(data, dict) else None
            raise ChatClientError(
                detail or f"Failed {action} (HTTP {response.status_code})",
                status_code=response.status_code,
            )
        return response.json()

    def _require_chat(self) -> str:
        if not self._current_chat_id:
            raise NoActiveChatError()
        return self._current_chat_id

    def start_chat(self, user1: str, user2: str) -> str:
        data = self._request("POST", "/chat/start", "starting chat", json={"user1": user1, "user2": user2})
        self._current_chat_id = data["chatId"]
        return self._current_chat_id

    def send_message(self, sender: str, text: str) -> Message:
        chat_id = self._require_chat()
        data = self._request(
            "POST",
            f"/chat/{chat_id}/message",
            "sending message",
            json={"sender": sender, "text": text},
        )
        return Message.model_validate(data["message"])

    def get_messages(self) -> List[Message]:
        chat_id = self._require_chat()
        data = self._request("GET", f"/chat/{chat_id}/messages", "getting messages")
        return [Message.model_validate(m) for m in data["messages"]]

    def poll_messages(
        self,
        interval: Optional[float] = None,
        iterations: Optional[int] = None,
    ) -> Iterator[List[Message]]:
        """Yield the full message list every `interval` seconds.

        Each snapshot replaces the previous one; runs forever unless
        `iterations` is given.
        """
        if interval is None:
            interval = self._settings.POLL_INTERVAL
        count = 0
        while iterations is None or count < iterations:
            yield self.get_messages()
            count += 1
            if iterations is None or count < iterations:
                time.sleep(interval)
