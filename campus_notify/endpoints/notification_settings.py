from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from campus_notify.schemas.response import APIResponse
from campus_notify.schemas.notification import (
    NotificationChannelsUpdate,
    NotificationSettingsBulkUpdate,
    NotificationSettingsRead,
)
from campus_notify.schemas.user import Actor
from campus_notify.services.notification_settings import notification_settings_service
from campus_notify.utils import deps

router = APIRouter()

@router.get("/", response_model=APIResponse[List[NotificationSettingsRead]])
async def get_notification_settings(
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    """List channel settings, creating defaults for every known type on first access."""
    data = notification_settings_service.list_for_user(db, actor=actor)
    return APIResponse(message="Notification settings fetched successfully", data=data)

@router.put("/", response_model=APIResponse[List[NotificationSettingsRead]])
async def update_notification_settings(
    settings_in: NotificationSettingsBulkUpdate,
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    data = notification_settings_service.update_many(db, actor=actor, items=settings_in.settings)
    return APIResponse(message="Notification settings updated successfully", data=data)

@router.post("/reset", response_model=APIResponse[List[NotificationSettingsRead]])
async def reset_notification_settings(
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    data = notification_settings_service.reset(db, actor=actor)
    return APIResponse(message="Notification settings reset to defaults", data=data)

@router.put("/{notification_type}", response_model=APIResponse[NotificationSettingsRead])
async def update_notification_setting(
    notification_type: str,
    channels: NotificationChannelsUpdate,
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    data = notification_settings_service.update_one(
        db, actor=actor, notification_type=notification_type, channels=channels
    )
    return APIResponse(message="Notification setting updated successfully", data=data)

@router.post("/{notification_type}/enable-all", response_model=APIResponse[NotificationSettingsRead])
async def enable_all_channels(
    notification_type: str,
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    data = notification_settings_service.enable_all(db, actor=actor, notification_type=notification_type)
    return APIResponse(message="All channels enabled", data=data)

@router.post("/{notification_type}/disable-all", response_model=APIResponse[NotificationSettingsRead])
async def disable_all_channels(
    notification_type: str,
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    data = notification_settings_service.disable_all(db, actor=actor, notification_type=notification_type)
    return APIResponse(message="All channels disabled", data=data)
