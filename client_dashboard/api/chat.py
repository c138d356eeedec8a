"""
FastAPI router module for the assistant chat.

- GET  /chat/messages       ordered chat log
- POST /chat/messages       send a message, wait for the assistant reply
- GET  /chat/notifications  recent side-channel notices (data updated, errors)

A failed webhook call is not an HTTP error here: the reply is the fixed
connection-failure message and the exchange state is "failed".
"""

import logging

from fastapi import APIRouter, HTTPException

from client_dashboard.core.dependencies import UpdateChannelDep
from client_dashboard.models import (
    ChatLogResponse,
    ExchangeState,
    NotificationsResponse,
    SendMessageRequest,
    SendMessageResponse,
)

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat")


@router.get("/messages", response_model=ChatLogResponse)
async def get_messages(channel: UpdateChannelDep) -> ChatLogResponse:
    return ChatLogResponse(messages=list(channel.get_chat_log()))


@router.post("/messages", response_model=SendMessageResponse)
async def send_message(
    request: SendMessageRequest,
    channel: UpdateChannelDep,
) -> SendMessageResponse:
    """
    Send one chat message.

    Raises:
        HTTPException(422): If the message is empty
    """
    try:
        reply = await channel.send(request.message)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    user_message_id = reply.reply_to or ""
    state = channel.exchange_state(user_message_id) or ExchangeState.FAILED

    return SendMessageResponse(
        reply=reply,
        state=state,
        data_updated=channel.data_updated(user_message_id),
    )


@router.get("/notifications", response_model=NotificationsResponse)
async def get_notifications(channel: UpdateChannelDep) -> NotificationsResponse:
    return NotificationsResponse(notifications=list(channel.get_notifications()))
