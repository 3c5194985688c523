"""Routers for the Conversation feature: /messages and /conversations."""
import logging
from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from api.features.conversation.controller import ConversationController
from api.features.conversation.dtos import (
    AcceptConversationRequest,
    MessageDTO,
    SendMessageRequest,
)
from api.shared.auth import Caller, get_current_caller
from api.shared.db import get_db_session
from api.shared.dtos import SuccessResponse
from api.shared.exceptions import StorageUnavailableError
from di.container import ApplicationContainer as DependencyContainer

messages_router = APIRouter()
conversations_router = APIRouter()
logger = logging.getLogger("hostel.conversation.router")


@messages_router.get("", response_model=None)
@inject
async def get_messages(
    search: Optional[str] = Query(None, description="Find users to message"),
    target_id: Optional[str] = Query(None, alias="targetId", description="Other participant"),
    folder: Optional[str] = Query(None, alias="type", description="primary or requests"),
    caller: Caller = Depends(get_current_caller),
    controller: ConversationController = Depends(
        Provide[DependencyContainer.controllers.conversation_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    """User search, one thread's messages, or the caller's thread list.

    Parameters are checked in that order: ``search``, ``targetId``, ``type``.
    """
    try:
        if search is not None:
            return await controller.search_users(caller, search, db_session=db_session)
        if target_id:
            return await controller.get_thread(caller, target_id, db_session=db_session)
        return await controller.list_threads(caller, folder, db_session=db_session)
    except SQLAlchemyError as e:
        logger.exception("Error fetching messages")
        raise StorageUnavailableError("Failed to fetch messages") from e


@messages_router.post("", response_model=MessageDTO)
@inject
async def send_message(
    request: SendMessageRequest,
    caller: Caller = Depends(get_current_caller),
    controller: ConversationController = Depends(
        Provide[DependencyContainer.controllers.conversation_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    try:
        return await controller.send_message(caller, request, db_session=db_session)
    except SQLAlchemyError as e:
        logger.exception("Error sending message")
        raise StorageUnavailableError("Failed to send message") from e


@conversations_router.post("/accept", response_model=SuccessResponse)
@inject
async def accept_conversation(
    request: AcceptConversationRequest,
    caller: Caller = Depends(get_current_caller),
    controller: ConversationController = Depends(
        Provide[DependencyContainer.controllers.conversation_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    try:
        await controller.accept(caller, request, db_session=db_session)
        return SuccessResponse()
    except SQLAlchemyError as e:
        logger.exception("Accept conversation error")
        raise StorageUnavailableError("Failed to accept conversation") from e
