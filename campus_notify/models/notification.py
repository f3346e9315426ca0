from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, JSON, Index, UniqueConstraint
from campus_notify.core.database import Base
from campus_notify.core.constants import PriorityEnum, HIGH_PRIORITIES

class Notification(Base):
    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_owner", "user_id", "user_type"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False)
    user_type = Column(String(50), nullable=False)
    type = Column(String(100), nullable=False, index=True)  # e.g. 'new_assignment', 'assignment_graded'
    title = Column(String(500), nullable=False)
    message = Column(Text, nullable=False)
    payload = Column(JSON, nullable=True)
    entity_type = Column(String(50), nullable=True)
    entity_id = Column(Integer, nullable=True)
    action_url = Column(String(1000), nullable=True)
    priority = Column(String(20), nullable=False, default=PriorityEnum.NORMAL.value, index=True)
    is_read = Column(Boolean, nullable=False, default=False, index=True)
    read_at = Column(DateTime, nullable=True)
    expires_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)

    @property
    def is_expired(self) -> bool:
        return self.expires_at is not None and self.expires_at <= datetime.utcnow()

    @property
    def is_high_priority(self) -> bool:
        return self.priority in HIGH_PRIORITIES

class NotificationSettings(Base):
    __tablename__ = "notification_settings"
    __table_args__ = (
        UniqueConstraint("user_id", "user_type", "notification_type", name="uq_user_notification_setting"),
        Index("ix_notification_settings_owner", "user_id", "user_type"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False)
    user_type = Column(String(50), nullable=False)
    notification_type = Column(String(100), nullable=False)
    email_enabled = Column(Boolean, nullable=False, default=True)
    push_enabled = Column(Boolean, nullable=False, default=True)
    sms_enabled = Column(Boolean, nullable=False, default=True)
    in_app_enabled = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def enabled_channels(self):
        channels = []
        if self.email_enabled:
            channels.append("email")
        if self.push_enabled:
            channels.append("push")
        if self.sms_enabled:
            channels.append("sms")
        if self.in_app_enabled:
            channels.append("in_app")
        return channels
