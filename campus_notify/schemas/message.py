from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from datetime import datetime
from typing import List, Optional

from campus_notify.core.constants import MessageTypeEnum, PriorityEnum, UserTypeEnum

class RecipientRef(BaseModel):
    id: int
    type: UserTypeEnum

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

class MessageCreate(BaseModel):
    """Payload for sending a direct, broadcast or announcement message."""
    message_type: MessageTypeEnum = MessageTypeEnum.DIRECT
    receiver_id: Optional[int] = None
    receiver_type: Optional[UserTypeEnum] = None
    recipients: Optional[List[RecipientRef]] = None
    subject: str = Field(..., min_length=1, max_length=500)
    body: str = Field(..., min_length=1)
    priority: PriorityEnum = PriorityEnum.NORMAL
    parent_message_id: Optional[int] = None
    has_attachments: bool = False

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    @model_validator(mode="after")
    def check_audience(self):
        if self.message_type == MessageTypeEnum.DIRECT.value:
            if self.receiver_id is None or self.receiver_type is None:
                raise ValueError("receiver_id and receiver_type are required for direct messages")
        elif not self.recipients:
            raise ValueError("recipients are required for broadcast and announcement messages")
        return self

class MessageRecipient(BaseModel):
    recipient_id: int
    recipient_type: str
    is_read: bool
    read_at: Optional[datetime] = None
    is_archived: bool
    is_starred: bool

    model_config = ConfigDict(from_attributes=True)

class Message(BaseModel):
    id: int
    sender_id: int
    sender_type: str
    receiver_id: Optional[int] = None
    receiver_type: Optional[str] = None
    subject: str
    body: str
    message_type: str
    priority: str
    is_read: bool
    read_at: Optional[datetime] = None
    has_attachments: bool
    parent_message_id: Optional[int] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class InboxMessage(Message):
    """A received message with the viewer's own read/archive/star state."""
    is_archived: bool = False
    is_starred: bool = False

class MessageDetail(Message):
    recipients: List[MessageRecipient] = []
    replies: List[Message] = []

    @field_validator('replies', mode='before')
    @classmethod
    def drop_deleted_replies(cls, v):
        return [reply for reply in v if getattr(reply, "deleted_at", None) is None]

class MessageUnreadCount(BaseModel):
    direct: int
    broadcast: int
    total: int
