from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Any, Dict, List, Optional

from campus_notify.core.constants import PriorityEnum, UserTypeEnum

class NotificationBase(BaseModel):
    """Base schema for a notification."""
    type: str
    title: str
    message: str
    payload: Optional[Dict[str, Any]] = None
    entity_type: Optional[str] = None
    entity_id: Optional[int] = None
    action_url: Optional[str] = None
    priority: PriorityEnum = PriorityEnum.NORMAL
    expires_at: Optional[datetime] = None

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

class NotificationCreate(NotificationBase):
    """Schema for creating a notification."""
    user_id: int
    user_type: UserTypeEnum

class NotificationUpdate(BaseModel):
    """Schema for updating a notification (read-state only)."""
    is_read: bool

class Notification(NotificationBase):
    """Schema for reading a notification, includes ID and status."""
    id: int
    user_id: int
    user_type: str
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime
    is_expired: bool = False
    is_high_priority: bool = False

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

class MarkAllReadResult(BaseModel):
    count: int

class NotificationStats(BaseModel):
    total: int
    unread: int
    read: int
    today: int
    recent: int
    urgent: int
    by_type: Dict[str, int]

# Settings

class NotificationSettingsRead(BaseModel):
    notification_type: str
    email_enabled: bool
    push_enabled: bool
    sms_enabled: bool
    in_app_enabled: bool
    enabled_channels: List[str]

    model_config = ConfigDict(from_attributes=True)

class NotificationChannelsUpdate(BaseModel):
    email_enabled: Optional[bool] = None
    push_enabled: Optional[bool] = None
    sms_enabled: Optional[bool] = None
    in_app_enabled: Optional[bool] = None

class NotificationSettingItem(NotificationChannelsUpdate):
    notification_type: str

class NotificationSettingsBulkUpdate(BaseModel):
    settings: List[NotificationSettingItem]
