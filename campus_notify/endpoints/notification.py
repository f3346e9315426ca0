from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from campus_notify.core.config import settings
from campus_notify.core.constants import PriorityEnum
from campus_notify.crud.base import PaginatedResponse
from campus_notify.schemas.response import APIResponse, CountResult
from campus_notify.schemas.notification import MarkAllReadResult, Notification, NotificationStats
from campus_notify.schemas.user import Actor
from campus_notify.services.notification import notification_service
from campus_notify.utils import deps

router = APIRouter()

@router.get("/", response_model=APIResponse[PaginatedResponse[Notification]])
async def get_my_notifications(
    db: Session = Depends(deps.get_db),
    actor: Actor = Depends(deps.get_current_actor),
    page: int = Query(1, ge=1),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    is_read: Optional[bool] = None,
    type: Optional[str] = None,
    priority: Optional[PriorityEnum] = None,
    high_priority: bool = False,
    recent: bool = False,
):
    """Retrieve notifications for the current user, newest first."""
    data = notification_service.list_notifications(
        db,
        actor=actor,
        page=page,
        size=size,
        is_read=is_read,
        notification_type=type,
        priority=priority.value if priority else None,
        high_priority=high_priority,
        recent=recent,
    )
    return APIResponse(message="Notifications fetched successfully", data=data)

@router.get("/unread", response_model=APIResponse[PaginatedResponse[Notification]])
async def get_unread_notifications(
    db: Session = Depends(deps.get_db),
    actor: Actor = Depends(deps.get_current_actor),
    page: int = Query(1, ge=1),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
):
    data = notification_service.get_unread(db, actor=actor, page=page, size=size)
    return APIResponse(message="Unread notifications fetched successfully", data=data)

@router.get("/recent", response_model=APIResponse[List[Notification]])
async def get_recent_notifications(
    db: Session = Depends(deps.get_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    data = notification_service.get_recent(db, actor=actor)
    return APIResponse(message="Recent notifications fetched successfully", data=data)

@router.get("/unread-count", response_model=APIResponse[CountResult])
async def get_unread_notifications_count(
    db: Session = Depends(deps.get_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    """Get the count of unread, unexpired notifications for the current user."""
    count = notification_service.get_unread_count(db, actor=actor)
    return APIResponse(message="Unread notifications count fetched successfully", data=CountResult(count=count))

@router.get("/stats", response_model=APIResponse[NotificationStats])
async def get_notification_stats(
    db: Session = Depends(deps.get_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    data = notification_service.get_stats(db, actor=actor)
    return APIResponse(message="Notification statistics fetched successfully", data=data)

@router.post("/mark-all-read", response_model=APIResponse[MarkAllReadResult])
async def mark_all_notifications_as_read(
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    """Mark all unread notifications for the current user as read."""
    count = notification_service.mark_all_as_read(db, actor=actor)
    return APIResponse(message="All notifications marked as read", data=MarkAllReadResult(count=count))

@router.get("/{notification_id}", response_model=APIResponse[Notification])
async def get_notification(
    notification_id: int,
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    """Fetch one notification; it is marked read on view."""
    notification = notification_service.get_notification(db, notification_id=notification_id, actor=actor)
    return APIResponse(message="Notification fetched successfully", data=notification)

@router.post("/{notification_id}/read", response_model=APIResponse[Notification])
async def mark_notification_as_read(
    notification_id: int,
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    """Mark a specific notification as read."""
    notification = notification_service.mark_as_read(db, notification_id=notification_id, actor=actor)
    return APIResponse(message="Notification marked as read", data=notification)

@router.post("/{notification_id}/unread", response_model=APIResponse[Notification])
async def mark_notification_as_unread(
    notification_id: int,
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    notification = notification_service.mark_as_unread(db, notification_id=notification_id, actor=actor)
    return APIResponse(message="Notification marked as unread", data=notification)
