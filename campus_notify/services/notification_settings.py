import logging
from typing import Dict, List

from sqlalchemy.orm import Session

from campus_notify.core.constants import (
    ChannelEnum,
    DEFAULT_NOTIFICATION_TYPES,
    EMAIL_ENABLED_TYPES,
    PUSH_DISABLED_TYPES,
)
from campus_notify.crud.notification_settings import notification_settings as crud_settings
from campus_notify.models.notification import NotificationSettings
from campus_notify.schemas.notification import NotificationChannelsUpdate, NotificationSettingItem
from campus_notify.schemas.user import Actor

logger = logging.getLogger(__name__)

_CHANNEL_FIELDS = {
    ChannelEnum.EMAIL.value: "email_enabled",
    ChannelEnum.PUSH.value: "push_enabled",
    ChannelEnum.SMS.value: "sms_enabled",
    ChannelEnum.IN_APP.value: "in_app_enabled",
}

def default_channels(notification_type: str) -> Dict[str, bool]:
    """Channel flags a new settings row starts with."""
    return {
        "email_enabled": notification_type in EMAIL_ENABLED_TYPES,
        "push_enabled": notification_type not in PUSH_DISABLED_TYPES,
        "sms_enabled": False,
        "in_app_enabled": True,
    }

class NotificationSettingsService:
    """Per-user, per-type channel switches consulted before external delivery."""

    def _create_default(self, db: Session, *, actor: Actor, notification_type: str) -> NotificationSettings:
        return crud_settings.create(
            db,
            obj_in={
                "user_id": actor.user_id,
                "user_type": actor.user_type,
                "notification_type": notification_type,
                **default_channels(notification_type),
            },
        )

    def get_or_create(self, db: Session, *, actor: Actor, notification_type: str) -> NotificationSettings:
        setting = crud_settings.get_for_type(
            db, user_id=actor.user_id, user_type=actor.user_type, notification_type=notification_type
        )
        if setting is None:
            setting = self._create_default(db, actor=actor, notification_type=notification_type)
        return setting

    def list_for_user(self, db: Session, *, actor: Actor) -> List[NotificationSettings]:
        for notification_type in DEFAULT_NOTIFICATION_TYPES:
            self.get_or_create(db, actor=actor, notification_type=notification_type)
        return crud_settings.get_all_for_owner(db, user_id=actor.user_id, user_type=actor.user_type)

    def update_one(
        self, db: Session, *, actor: Actor, notification_type: str, channels: NotificationChannelsUpdate
    ) -> NotificationSettings:
        setting = self.get_or_create(db, actor=actor, notification_type=notification_type)
        return crud_settings.update(db, db_obj=setting, obj_in=channels.model_dump(exclude_none=True))

    def update_many(self, db: Session, *, actor: Actor, items: List[NotificationSettingItem]) -> List[NotificationSettings]:
        updated = []
        for item in items:
            channels = NotificationChannelsUpdate(**item.model_dump(exclude={"notification_type"}))
            updated.append(
                self.update_one(db, actor=actor, notification_type=item.notification_type, channels=channels)
            )
        return updated

    def _set_all(self, db: Session, *, actor: Actor, notification_type: str, enabled: bool) -> NotificationSettings:
        setting = self.get_or_create(db, actor=actor, notification_type=notification_type)
        return crud_settings.update(db, db_obj=setting, obj_in={field: enabled for field in _CHANNEL_FIELDS.values()})

    def enable_all(self, db: Session, *, actor: Actor, notification_type: str) -> NotificationSettings:
        return self._set_all(db, actor=actor, notification_type=notification_type, enabled=True)

    def disable_all(self, db: Session, *, actor: Actor, notification_type: str) -> NotificationSettings:
        return self._set_all(db, actor=actor, notification_type=notification_type, enabled=False)

    def reset(self, db: Session, *, actor: Actor) -> List[NotificationSettings]:
        deleted = crud_settings.delete_for_owner(db, user_id=actor.user_id, user_type=actor.user_type)
        logger.info(f"Reset {deleted} notification settings for {actor.user_type} {actor.user_id}")
        return [
            self._create_default(db, actor=actor, notification_type=notification_type)
            for notification_type in DEFAULT_NOTIFICATION_TYPES
        ]

    def is_channel_enabled(self, db: Session, *, actor: Actor, notification_type: str, channel: str) -> bool:
        setting = self.get_or_create(db, actor=actor, notification_type=notification_type)
        return bool(getattr(setting, _CHANNEL_FIELDS[channel]))

notification_settings_service = NotificationSettingsService()
