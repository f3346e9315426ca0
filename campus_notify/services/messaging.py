import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from campus_notify.core.config import settings
from campus_notify.core.constants import MessageTypeEnum
from campus_notify.crud import user as crud_user
from campus_notify.crud.base import paginate
from campus_notify.crud.message import message as crud_message
from campus_notify.crud.message import message_recipient as crud_recipient
from campus_notify.models.message import Message, MessageRecipient
from campus_notify.schemas.message import MessageCreate
from campus_notify.schemas.user import Actor
from campus_notify.services.notification import notification_service

logger = logging.getLogger(__name__)

class MessagingService:

    def _get_accessible(self, db: Session, *, message_id: int, actor: Actor) -> Message:
        """Return the message if the actor sent or received it; otherwise 404."""
        message = crud_message.get_with_relations(db, message_id)
        if not message or not self._is_participant(db, message=message, actor=actor):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Message not found.")
        return message

    def _is_participant(self, db: Session, *, message: Message, actor: Actor) -> bool:
        if message.is_sent_by(actor.user_id, actor.user_type):
            return True
        if message.is_directly_received_by(actor.user_id, actor.user_type):
            return True
        return message.uses_recipient_rows and self._recipient_row(db, message=message, actor=actor) is not None

    def _recipient_row(self, db: Session, *, message: Message, actor: Actor) -> Optional[MessageRecipient]:
        return crud_recipient.get_for_recipient(
            db, message_id=message.id, user_id=actor.user_id, user_type=actor.user_type
        )

    def _require_received(self, db: Session, *, message_id: int, actor: Actor):
        """Resolve the message and, for list-based messages, the actor's recipient row."""
        message = self._get_accessible(db, message_id=message_id, actor=actor)
        recipient = None
        if message.is_direct:
            received = message.is_directly_received_by(actor.user_id, actor.user_type)
        else:
            recipient = self._recipient_row(db, message=message, actor=actor)
            received = recipient is not None
        if not received:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only a recipient can change the state of a message.",
            )
        return message, recipient

    def _ensure_receiver_exists(self, db: Session, *, user_id: int, user_type: str):
        if crud_user.get_account(db, user_id=user_id, user_type=user_type) is None:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Recipient {user_type} {user_id} does not exist.",
            )

    def send_message(self, db: Session, *, message_in: MessageCreate, sender: Actor) -> Message:
        if message_in.parent_message_id is not None:
            parent = crud_message.get(db, id=message_in.parent_message_id)
            if not parent or not self._is_participant(db, message=parent, actor=sender):
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail="Parent message does not exist.",
                )

        is_direct = message_in.message_type == MessageTypeEnum.DIRECT.value
        recipients = []
        if is_direct:
            self._ensure_receiver_exists(db, user_id=message_in.receiver_id, user_type=message_in.receiver_type)
        else:
            seen = set()
            for ref in message_in.recipients:
                key = (ref.id, ref.type)
                if key in seen:
                    continue
                seen.add(key)
                self._ensure_receiver_exists(db, user_id=ref.id, user_type=ref.type)
                recipients.append({"id": ref.id, "type": ref.type})

        message = crud_message.create(
            db,
            obj_in={
                "sender_id": sender.user_id,
                "sender_type": sender.user_type,
                "receiver_id": message_in.receiver_id if is_direct else None,
                "receiver_type": message_in.receiver_type if is_direct else None,
                "subject": message_in.subject,
                "body": message_in.body,
                "message_type": message_in.message_type,
                "priority": message_in.priority,
                "parent_message_id": message_in.parent_message_id,
                "has_attachments": message_in.has_attachments,
            },
        )
        if recipients:
            crud_recipient.create_many(db, message_id=message.id, recipients=recipients)
            db.refresh(message)

        notification_service.notify_new_message(db, message=message)
        logger.info(f"{sender.user_type} {sender.user_id} sent {message.message_type} message {message.id}")
        return message

    def get_inbox(
        self,
        db: Session,
        *,
        actor: Actor,
        page: int = 1,
        size: int = settings.DEFAULT_PAGE_SIZE,
        **filters,
    ) -> Dict[str, Any]:
        query = crud_message.inbox_query(db, user_id=actor.user_id, user_type=actor.user_type, **filters)
        result = paginate(query, page=page, size=size)
        result["items"] = [self._inbox_item(message, recipient) for message, recipient in result["items"]]
        return result

    def _inbox_item(self, message: Message, recipient: Optional[MessageRecipient]) -> Dict[str, Any]:
        """Message columns with read-state taken from whichever row holds it for this viewer."""
        item = {column.name: getattr(message, column.name) for column in Message.__table__.columns}
        if recipient is not None:
            item.update(
                is_read=recipient.is_read,
                read_at=recipient.read_at,
                is_archived=recipient.is_archived,
                is_starred=recipient.is_starred,
            )
        else:
            item.update(is_archived=False, is_starred=False)
        return item

    def get_sent(self, db: Session, *, actor: Actor, page: int = 1, size: int = settings.DEFAULT_PAGE_SIZE) -> Dict[str, Any]:
        return paginate(crud_message.sent_query(db, user_id=actor.user_id, user_type=actor.user_type), page=page, size=size)

    def get_message(self, db: Session, *, message_id: int, actor: Actor) -> Message:
        """Show a message to a participant; receivers auto-mark it read."""
        message = self._get_accessible(db, message_id=message_id, actor=actor)
        if message.is_directly_received_by(actor.user_id, actor.user_type):
            if not message.is_read:
                crud_message.mark_as_read(db, message=message)
        elif message.uses_recipient_rows:
            recipient = self._recipient_row(db, message=message, actor=actor)
            if recipient is not None and not recipient.is_read:
                crud_recipient.set_flags(db, recipient=recipient, is_read=True)
        return message

    def mark_as_read(self, db: Session, *, message_id: int, actor: Actor) -> None:
        message, recipient = self._require_received(db, message_id=message_id, actor=actor)
        if recipient is None:
            crud_message.mark_as_read(db, message=message)
        else:
            crud_recipient.set_flags(db, recipient=recipient, is_read=True)

    def mark_as_unread(self, db: Session, *, message_id: int, actor: Actor) -> None:
        message, recipient = self._require_received(db, message_id=message_id, actor=actor)
        if recipient is None:
            crud_message.mark_as_unread(db, message=message)
        else:
            crud_recipient.set_flags(db, recipient=recipient, is_read=False)

    def _set_recipient_flag(self, db: Session, *, message_id: int, actor: Actor, **flags) -> MessageRecipient:
        message, recipient = self._require_received(db, message_id=message_id, actor=actor)
        if recipient is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Direct messages cannot be archived or starred.",
            )
        return crud_recipient.set_flags(db, recipient=recipient, **flags)

    def archive(self, db: Session, *, message_id: int, actor: Actor) -> MessageRecipient:
        return self._set_recipient_flag(db, message_id=message_id, actor=actor, is_archived=True)

    def unarchive(self, db: Session, *, message_id: int, actor: Actor) -> MessageRecipient:
        return self._set_recipient_flag(db, message_id=message_id, actor=actor, is_archived=False)

    def star(self, db: Session, *, message_id: int, actor: Actor) -> MessageRecipient:
        return self._set_recipient_flag(db, message_id=message_id, actor=actor, is_starred=True)

    def unstar(self, db: Session, *, message_id: int, actor: Actor) -> MessageRecipient:
        return self._set_recipient_flag(db, message_id=message_id, actor=actor, is_starred=False)

    def toggle_star(self, db: Session, *, message_id: int, actor: Actor) -> MessageRecipient:
        _, recipient = self._require_received(db, message_id=message_id, actor=actor)
        if recipient is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Direct messages cannot be archived or starred.",
            )
        return crud_recipient.set_flags(db, recipient=recipient, is_starred=not recipient.is_starred)

    def delete_message(self, db: Session, *, message_id: int, actor: Actor) -> None:
        message = self._get_accessible(db, message_id=message_id, actor=actor)
        if not message.is_sent_by(actor.user_id, actor.user_type):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the sender can delete a message.")
        crud_message.delete(db, id=message.id)
        logger.info(f"Message {message.id} deleted by its sender")

    def get_unread_count(self, db: Session, *, actor: Actor) -> Dict[str, int]:
        direct = crud_message.count_unread_direct(db, user_id=actor.user_id, user_type=actor.user_type)
        broadcast = crud_recipient.count_unread(db, user_id=actor.user_id, user_type=actor.user_type)
        return {"direct": direct, "broadcast": broadcast, "total": direct + broadcast}

messaging_service = MessagingService()
