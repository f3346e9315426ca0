from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Query, Session, selectinload

from campus_notify.crud.base import CRUDBase
from campus_notify.core.constants import MessageTypeEnum
from campus_notify.models.message import Message, MessageRecipient
from campus_notify.schemas.message import MessageCreate

class CRUDMessage(CRUDBase[Message, MessageCreate, MessageCreate]):

    def get_with_relations(self, db: Session, id: int) -> Optional[Message]:
        # populate_existing reloads collections already held in the identity map
        query = db.query(self.model).options(
            selectinload(self.model.recipients),
            selectinload(self.model.replies),
        ).filter(self.model.id == id).populate_existing()
        return self._live(query).first()

    def _received_condition(self, user_id: int, user_type: str):
        return or_(
            and_(
                self.model.message_type == MessageTypeEnum.DIRECT.value,
                self.model.receiver_id == user_id,
                self.model.receiver_type == user_type,
            ),
            MessageRecipient.id.isnot(None),
        )

    def inbox_query(
        self,
        db: Session,
        *,
        user_id: int,
        user_type: str,
        is_read: Optional[bool] = None,
        message_type: Optional[str] = None,
        priority: Optional[str] = None,
        has_attachments: Optional[bool] = None,
        is_archived: Optional[bool] = None,
        is_starred: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> Query:
        """Messages received by the user, paired with the user's recipient row (None for direct messages)."""
        query = (
            db.query(self.model, MessageRecipient)
            .outerjoin(
                MessageRecipient,
                and_(
                    MessageRecipient.message_id == self.model.id,
                    MessageRecipient.recipient_id == user_id,
                    MessageRecipient.recipient_type == user_type,
                ),
            )
            .filter(self._received_condition(user_id, user_type))
        )
        query = self._live(query)

        if is_read is not None:
            query = query.filter(
                or_(
                    and_(MessageRecipient.id.is_(None), self.model.is_read == is_read),
                    and_(MessageRecipient.id.isnot(None), MessageRecipient.is_read == is_read),
                )
            )
        if message_type:
            query = query.filter(self.model.message_type == message_type)
        if priority:
            query = query.filter(self.model.priority == priority)
        if has_attachments is not None:
            query = query.filter(self.model.has_attachments == has_attachments)
        if is_archived is not None:
            if is_archived:
                query = query.filter(MessageRecipient.is_archived == True)
            else:
                query = query.filter(or_(MessageRecipient.id.is_(None), MessageRecipient.is_archived == False))
        if is_starred is not None:
            if is_starred:
                query = query.filter(MessageRecipient.is_starred == True)
            else:
                query = query.filter(or_(MessageRecipient.id.is_(None), MessageRecipient.is_starred == False))
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(self.model.subject.ilike(pattern), self.model.body.ilike(pattern)))

        return query.order_by(self.model.created_at.desc(), self.model.id.desc())

    def sent_query(self, db: Session, *, user_id: int, user_type: str) -> Query:
        query = db.query(self.model).filter(self.model.sender_id == user_id, self.model.sender_type == user_type)
        return self._live(query).order_by(self.model.created_at.desc(), self.model.id.desc())

    def count_unread_direct(self, db: Session, *, user_id: int, user_type: str) -> int:
        query = db.query(self.model).filter(
            self.model.message_type == MessageTypeEnum.DIRECT.value,
            self.model.receiver_id == user_id,
            self.model.receiver_type == user_type,
            self.model.is_read == False,
        )
        return self._live(query).count()

    def mark_as_read(self, db: Session, *, message: Message) -> Message:
        if message.is_read:
            return message
        message.is_read = True
        message.read_at = datetime.utcnow()
        db.add(message)
        db.flush()
        return message

    def mark_as_unread(self, db: Session, *, message: Message) -> Message:
        message.is_read = False
        message.read_at = None
        db.add(message)
        db.flush()
        return message

class CRUDMessageRecipient(CRUDBase[MessageRecipient, MessageCreate, MessageCreate]):

    def get_for_recipient(self, db: Session, *, message_id: int, user_id: int, user_type: str) -> Optional[MessageRecipient]:
        return db.query(self.model).filter(
            self.model.message_id == message_id,
            self.model.recipient_id == user_id,
            self.model.recipient_type == user_type,
        ).first()

    def create_many(self, db: Session, *, message_id: int, recipients: List[Dict]) -> List[MessageRecipient]:
        rows = [
            self.model(message_id=message_id, recipient_id=r["id"], recipient_type=r["type"])
            for r in recipients
        ]
        db.add_all(rows)
        db.flush()
        return rows

    def count_unread(self, db: Session, *, user_id: int, user_type: str) -> int:
        return (
            db.query(self.model)
            .join(Message, Message.id == self.model.message_id)
            .filter(
                self.model.recipient_id == user_id,
                self.model.recipient_type == user_type,
                self.model.is_read == False,
                Message.deleted_at.is_(None),
            )
            .count()
        )

    def set_flags(self, db: Session, *, recipient: MessageRecipient, **flags) -> MessageRecipient:
        # read_at keeps the first read time
        if "is_read" in flags and flags["is_read"] != recipient.is_read:
            recipient.read_at = datetime.utcnow() if flags["is_read"] else None
        for field, value in flags.items():
            setattr(recipient, field, value)
        db.add(recipient)
        db.flush()
        return recipient

message = CRUDMessage(Message)
message_recipient = CRUDMessageRecipient(MessageRecipient)
