from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from campus_notify.core.database import Base
from campus_notify.core.constants import MessageTypeEnum, PriorityEnum, RECIPIENT_LIST_MESSAGE_TYPES

class Message(Base):
    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_sender", "sender_id", "sender_type"),
        Index("ix_messages_receiver", "receiver_id", "receiver_type"),
    )

    id = Column(Integer, primary_key=True, index=True)
    sender_id = Column(Integer, nullable=False)
    sender_type = Column(String(50), nullable=False)
    receiver_id = Column(Integer, nullable=True)  # direct messages only
    receiver_type = Column(String(50), nullable=True)
    subject = Column(String(500), nullable=False)
    body = Column(Text, nullable=False)
    message_type = Column(String(50), nullable=False, default=MessageTypeEnum.DIRECT.value, index=True)
    priority = Column(String(20), nullable=False, default=PriorityEnum.NORMAL.value)
    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime, nullable=True)
    has_attachments = Column(Boolean, nullable=False, default=False)
    parent_message_id = Column(Integer, ForeignKey("messages.id", ondelete="CASCADE"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    deleted_at = Column(DateTime, nullable=True)

    recipients = relationship("MessageRecipient", back_populates="message", cascade="all, delete-orphan")
    parent = relationship("Message", remote_side=[id], back_populates="replies")
    replies = relationship("Message", back_populates="parent")

    @property
    def is_direct(self) -> bool:
        return self.message_type == MessageTypeEnum.DIRECT.value

    @property
    def uses_recipient_rows(self) -> bool:
        return self.message_type in RECIPIENT_LIST_MESSAGE_TYPES

    def is_sent_by(self, user_id: int, user_type: str) -> bool:
        return self.sender_id == user_id and self.sender_type == user_type

    def is_directly_received_by(self, user_id: int, user_type: str) -> bool:
        return self.is_direct and self.receiver_id == user_id and self.receiver_type == user_type

class MessageRecipient(Base):
    __tablename__ = "message_recipients"
    __table_args__ = (
        UniqueConstraint("message_id", "recipient_id", "recipient_type", name="uq_message_recipient"),
        Index("ix_message_recipients_recipient", "recipient_id", "recipient_type"),
    )

    id = Column(Integer, primary_key=True, index=True)
    message_id = Column(Integer, ForeignKey("messages.id", ondelete="CASCADE"), nullable=False, index=True)
    recipient_id = Column(Integer, nullable=False)
    recipient_type = Column(String(50), nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime, nullable=True)
    is_archived = Column(Boolean, nullable=False, default=False)
    is_starred = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    message = relationship("Message", back_populates="recipients")
