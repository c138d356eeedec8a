"""
Assistant Update Channel

Relays chat messages to the assistant webhook and threads any data update in
the reply back into the data source controller.

Outbound request (POST, JSON):
    {"message": str, "timestamp": ISO-8601 str, "type": "chat_message"}

Inbound response (JSON object):
    - "message" or "response": text to display ("Response received" if neither)
    - "data" or "update": optional update payload for the record set

Exchange states: composed -> sent -> answered | failed. A transport error,
timeout, non-2xx status or body that is not a JSON object is a failed exchange:
the log gets a fixed connection-failure message, nothing is retried and the
record set is left alone.

Ordering: the user message is appended immediately. Sends are not serialized;
each one takes a sequence number and replies are buffered until every earlier
reply is in, then appended in send order with reply_to pointing at the user
message. An update payload is applied as soon as its reply arrives, so the
record set reflects it by the time send() returns, even while an earlier
reply is still outstanding.
"""

import logging
from collections import deque
from datetime import datetime, timezone
from typing import Any, Callable, Deque, Dict, List, Optional, Set, Tuple
from uuid import uuid4

import httpx

from client_dashboard.core.exceptions import ValidationError
from client_dashboard.models import (
    ChatMessage,
    ExchangeState,
    MessageSender,
    Notification,
    NotificationKind,
)
from client_dashboard.services.data_source import DataSourceController

# Configure module logger
logger = logging.getLogger(__name__)

FALLBACK_REPLY = "Response received"
CONNECTION_FAILURE_MESSAGE = (
    "Sorry, I couldn't connect to the assistant webhook. "
    "Please check that the service is running and try again."
)
MAX_NOTIFICATIONS = 50

NotificationListener = Callable[[Notification], None]


def _now() -> datetime:
    return datetime.now(timezone.utc)


class UpdateChannel:
    """
    Chat session with the assistant webhook.

    Args:
        client: Shared HTTP client
        webhook_url: Assistant endpoint receiving chat messages
        data_source: Controller receiving update payloads
        greeting: Optional assistant message seeded into the log
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        webhook_url: str,
        data_source: DataSourceController,
        greeting: Optional[str] = None,
    ) -> None:
        self._client = client
        self._webhook_url = webhook_url
        self._data_source = data_source
        self._log: List[ChatMessage] = []
        self._notifications: Deque[Notification] = deque(maxlen=MAX_NOTIFICATIONS)
        self._listeners: List[NotificationListener] = []
        self._exchanges: Dict[str, ExchangeState] = {}
        self._updated: Set[str] = set()
        self._next_seq = 0
        self._flush_seq = 0
        self._pending: Dict[int, ChatMessage] = {}

        if greeting:
            self._log.append(self._message(greeting, MessageSender.ASSISTANT))

    # =========================================================================
    # Read API
    # =========================================================================

    def get_chat_log(self) -> Tuple[ChatMessage, ...]:
        return tuple(self._log)

    def get_notifications(self) -> Tuple[Notification, ...]:
        return tuple(self._notifications)

    def exchange_state(self, message_id: str) -> Optional[ExchangeState]:
        """State of the exchange started by the user message `message_id`."""
        return self._exchanges.get(message_id)

    def data_updated(self, message_id: str) -> bool:
        """Whether the reply to `message_id` replaced the record set."""
        return message_id in self._updated

    def subscribe(self, listener: NotificationListener) -> Callable[[], None]:
        """Register a notification callback; returns the unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # =========================================================================
    # Send
    # =========================================================================

    async def send(self, text: str) -> ChatMessage:
        """
        Send one user message and return the assistant's reply.

        The user message is in the log before the request goes out. The reply
        is returned as soon as it arrives, after any update payload it carries
        has been applied; it joins the log once every earlier exchange has
        resolved.

        Raises:
            ValueError: If text is empty or whitespace-only
        """
        if not text or not text.strip():
            raise ValueError("Message text is empty")

        seq = self._next_seq
        self._next_seq += 1

        user_message = self._message(text, MessageSender.USER)
        self._exchanges[user_message.id] = ExchangeState.COMPOSED
        self._log.append(user_message)

        try:
            reply, payload = await self._exchange(user_message)
        except BaseException:
            # Cancellation or an unexpected error: resolve the slot so later
            # replies are not held back
            self._exchanges[user_message.id] = ExchangeState.FAILED
            self._resolve(seq, self._failure_reply(user_message))
            raise

        try:
            if payload is not None:
                self._apply_update(reply, payload)
        finally:
            self._resolve(seq, reply)
        return reply

    async def _exchange(self, user_message: ChatMessage) -> Tuple[ChatMessage, Any]:
        body = {
            "message": user_message.content,
            "timestamp": user_message.timestamp.isoformat(),
            "type": "chat_message",
        }

        self._exchanges[user_message.id] = ExchangeState.SENT
        try:
            response = await self._client.post(self._webhook_url, json=body)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            return self._failed(user_message, f"{e!r}"), None

        if not isinstance(data, dict):
            return self._failed(user_message, f"expected a JSON object, got {type(data).__name__}"), None

        content = data.get("message") or data.get("response") or FALLBACK_REPLY
        if not isinstance(content, str):
            content = str(content)

        self._exchanges[user_message.id] = ExchangeState.ANSWERED
        reply = self._message(content, MessageSender.ASSISTANT, reply_to=user_message.id)
        return reply, self._update_payload(data)

    def _failed(self, user_message: ChatMessage, reason: str) -> ChatMessage:
        logger.warning(f"Webhook error: {reason}")
        self._exchanges[user_message.id] = ExchangeState.FAILED
        self._notify(
            NotificationKind.CONNECTION_ERROR,
            "Connection Error",
            "Failed to connect to webhook service",
            reply_to=user_message.id,
        )
        return self._failure_reply(user_message)

    # =========================================================================
    # Ordered Delivery
    # =========================================================================

    def _resolve(self, seq: int, reply: ChatMessage) -> None:
        self._pending[seq] = reply
        while self._flush_seq in self._pending:
            self._log.append(self._pending.pop(self._flush_seq))
            self._flush_seq += 1

    def _apply_update(self, reply: ChatMessage, payload: Any) -> None:
        try:
            snapshot = self._data_source.apply_external_update(payload)
        except ValidationError as e:
            logger.warning(f"Rejected assistant update: {e.message}")
            self._notify(
                NotificationKind.UPDATE_REJECTED,
                "Update Rejected",
                e.message,
                reply_to=reply.reply_to,
            )
            return

        if reply.reply_to is not None:
            self._updated.add(reply.reply_to)
        self._notify(
            NotificationKind.DATA_UPDATED,
            "Dashboard Updated",
            f"Data has been refreshed based on chatbot response ({len(snapshot.records)} records)",
            reply_to=reply.reply_to,
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _update_payload(data: Dict[str, Any]) -> Any:
        for key in ("data", "update"):
            value = data.get(key)
            if isinstance(value, (dict, list)) or value:
                return value
        return None

    @staticmethod
    def _message(
        content: str,
        sender: MessageSender,
        reply_to: Optional[str] = None,
    ) -> ChatMessage:
        return ChatMessage(
            id=uuid4().hex,
            content=content,
            sender=sender,
            timestamp=_now(),
            reply_to=reply_to,
        )

    def _failure_reply(self, user_message: ChatMessage) -> ChatMessage:
        return self._message(
            CONNECTION_FAILURE_MESSAGE,
            MessageSender.ASSISTANT,
            reply_to=user_message.id,
        )

    def _notify(
        self,
        kind: NotificationKind,
        title: str,
        description: str,
        reply_to: Optional[str] = None,
    ) -> None:
        notification = Notification(
            kind=kind,
            title=title,
            description=description,
            timestamp=_now(),
            reply_to=reply_to,
        )
        self._notifications.append(notification)
        for listener in list(self._listeners):
            try:
                listener(notification)
            except Exception:
                logger.exception("Notification listener failed")
