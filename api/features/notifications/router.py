"""Router for the Notifications feature."""
import logging
from typing import List

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from api.features.notifications.controller import NotificationController
from api.features.notifications.dtos import MarkReadRequest, NotificationDTO
from api.shared.auth import Caller, get_current_caller
from api.shared.db import get_db_session
from api.shared.dtos import SuccessResponse
from api.shared.exceptions import StorageUnavailableError
from di.container import ApplicationContainer as DependencyContainer

router = APIRouter()
logger = logging.getLogger("hostel.notifications.router")


@router.get("", response_model=List[NotificationDTO])
@inject
async def list_notifications(
    caller: Caller = Depends(get_current_caller),
    controller: NotificationController = Depends(
        Provide[DependencyContainer.controllers.notification_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    """Unread notifications for the badge, newest first."""
    try:
        return await controller.list_unread(caller, db_session=db_session)
    except SQLAlchemyError as e:
        logger.exception("Failed to fetch notifications")
        raise StorageUnavailableError("Failed to fetch notifications") from e


@router.patch("", response_model=SuccessResponse)
@inject
async def mark_notification_read(
    request: MarkReadRequest,
    caller: Caller = Depends(get_current_caller),
    controller: NotificationController = Depends(
        Provide[DependencyContainer.controllers.notification_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    try:
        await controller.mark_read(caller, request, db_session=db_session)
        return SuccessResponse()
    except SQLAlchemyError as e:
        logger.exception("Failed to update notification")
        raise StorageUnavailableError("Failed to update notification") from e
