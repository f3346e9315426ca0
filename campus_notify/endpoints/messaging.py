from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from campus_notify.core.config import settings
from campus_notify.core.constants import MessageTypeEnum, PriorityEnum
from campus_notify.crud.base import PaginatedResponse
from campus_notify.schemas.response import APIResponse
from campus_notify.schemas.message import (
    InboxMessage,
    Message,
    MessageCreate,
    MessageDetail,
    MessageRecipient,
    MessageUnreadCount,
)
from campus_notify.schemas.user import Actor
from campus_notify.services.messaging import messaging_service
from campus_notify.utils import deps

router = APIRouter()

@router.get("/inbox", response_model=APIResponse[PaginatedResponse[InboxMessage]])
async def get_inbox(
    db: Session = Depends(deps.get_db),
    actor: Actor = Depends(deps.get_current_actor),
    page: int = Query(1, ge=1),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    is_read: Optional[bool] = None,
    message_type: Optional[MessageTypeEnum] = None,
    priority: Optional[PriorityEnum] = None,
    has_attachments: Optional[bool] = None,
    is_archived: Optional[bool] = None,
    is_starred: Optional[bool] = None,
    search: Optional[str] = Query(None, min_length=1, max_length=200),
):
    """Messages received by the current user, with the user's own read state."""
    data = messaging_service.get_inbox(
        db,
        actor=actor,
        page=page,
        size=size,
        is_read=is_read,
        message_type=message_type.value if message_type else None,
        priority=priority.value if priority else None,
        has_attachments=has_attachments,
        is_archived=is_archived,
        is_starred=is_starred,
        search=search,
    )
    return APIResponse(message="Inbox fetched successfully", data=data)

@router.get("/sent", response_model=APIResponse[PaginatedResponse[Message]])
async def get_sent(
    db: Session = Depends(deps.get_db),
    actor: Actor = Depends(deps.get_current_actor),
    page: int = Query(1, ge=1),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
):
    data = messaging_service.get_sent(db, actor=actor, page=page, size=size)
    return APIResponse(message="Sent messages fetched successfully", data=data)

@router.get("/unread-count", response_model=APIResponse[MessageUnreadCount])
async def get_unread_count(
    db: Session = Depends(deps.get_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    data = messaging_service.get_unread_count(db, actor=actor)
    return APIResponse(message="Unread message count fetched successfully", data=data)

@router.post("/", response_model=APIResponse[MessageDetail], status_code=status.HTTP_201_CREATED)
async def send_message(
    message_in: MessageCreate,
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    """Send a message and notify every recipient."""
    message = messaging_service.send_message(db, message_in=message_in, sender=actor)
    return APIResponse(message="Message sent successfully", data=message)

@router.get("/{message_id}", response_model=APIResponse[MessageDetail])
async def get_message(
    message_id: int,
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    message = messaging_service.get_message(db, message_id=message_id, actor=actor)
    return APIResponse(message="Message fetched successfully", data=message)

@router.post("/{message_id}/read", response_model=APIResponse[None])
async def mark_message_as_read(
    message_id: int,
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    messaging_service.mark_as_read(db, message_id=message_id, actor=actor)
    return APIResponse(message="Message marked as read")

@router.post("/{message_id}/unread", response_model=APIResponse[None])
async def mark_message_as_unread(
    message_id: int,
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    messaging_service.mark_as_unread(db, message_id=message_id, actor=actor)
    return APIResponse(message="Message marked as unread")

@router.post("/{message_id}/archive", response_model=APIResponse[MessageRecipient])
async def archive_message(
    message_id: int,
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    data = messaging_service.archive(db, message_id=message_id, actor=actor)
    return APIResponse(message="Message archived", data=data)

@router.post("/{message_id}/unarchive", response_model=APIResponse[MessageRecipient])
async def unarchive_message(
    message_id: int,
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    data = messaging_service.unarchive(db, message_id=message_id, actor=actor)
    return APIResponse(message="Message unarchived", data=data)

@router.post("/{message_id}/star", response_model=APIResponse[MessageRecipient])
async def star_message(
    message_id: int,
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    data = messaging_service.star(db, message_id=message_id, actor=actor)
    return APIResponse(message="Message starred", data=data)

@router.post("/{message_id}/unstar", response_model=APIResponse[MessageRecipient])
async def unstar_message(
    message_id: int,
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    data = messaging_service.unstar(db, message_id=message_id, actor=actor)
    return APIResponse(message="Message unstarred", data=data)

@router.post("/{message_id}/toggle-star", response_model=APIResponse[MessageRecipient])
async def toggle_star_message(
    message_id: int,
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    data = messaging_service.toggle_star(db, message_id=message_id, actor=actor)
    return APIResponse(message="Message star toggled", data=data)

@router.delete("/{message_id}", response_model=APIResponse[None])
async def delete_message(
    message_id: int,
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    """Soft-delete a message; only its sender may do this."""
    messaging_service.delete_message(db, message_id=message_id, actor=actor)
    return APIResponse(message="Message deleted")
