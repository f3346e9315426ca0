from sqlalchemy.orm import Session

from campus_notify.core.constants import NotificationType
from campus_notify.models.notification import NotificationSettings
from campus_notify.schemas.notification import NotificationChannelsUpdate
from campus_notify.schemas.user import Actor
from campus_notify.services.notification_settings import default_channels, notification_settings_service

def test_default_channels():
    assert default_channels(NotificationType.GRADE_POSTED) == {
        "email_enabled": True,
        "push_enabled": True,
        "sms_enabled": False,
        "in_app_enabled": True,
    }
    assert default_channels(NotificationType.COMMENT_POSTED)["push_enabled"] is False
    assert default_channels(NotificationType.COMMENT_POSTED)["email_enabled"] is False
    assert default_channels("something_custom")["in_app_enabled"] is True

def test_is_channel_enabled_creates_missing_row(db_session: Session):
    actor = Actor(user_id=1, user_type="student")
    assert notification_settings_service.is_channel_enabled(
        db_session, actor=actor, notification_type=NotificationType.ANNOUNCEMENT, channel="email"
    ) is True
    assert notification_settings_service.is_channel_enabled(
        db_session, actor=actor, notification_type=NotificationType.ANNOUNCEMENT, channel="sms"
    ) is False
    assert db_session.query(NotificationSettings).count() == 1

def test_update_disable_and_reset(db_session: Session):
    actor = Actor(user_id=4, user_type="teacher")
    notification_settings_service.update_one(
        db_session,
        actor=actor,
        notification_type=NotificationType.TEST_GRADED,
        channels=NotificationChannelsUpdate(email_enabled=False),
    )
    notification_settings_service.disable_all(db_session, actor=actor, notification_type=NotificationType.ATTENDANCE_WARNING)
    assert not notification_settings_service.is_channel_enabled(
        db_session, actor=actor, notification_type=NotificationType.TEST_GRADED, channel="email"
    )
    assert not notification_settings_service.is_channel_enabled(
        db_session, actor=actor, notification_type=NotificationType.ATTENDANCE_WARNING, channel="in_app"
    )

    rows = notification_settings_service.reset(db_session, actor=actor)
    assert {row.notification_type for row in rows} >= {NotificationType.TEST_GRADED, NotificationType.ATTENDANCE_WARNING}
    assert notification_settings_service.is_channel_enabled(
        db_session, actor=actor, notification_type=NotificationType.TEST_GRADED, channel="email"
    )
    assert notification_settings_service.is_channel_enabled(
        db_session, actor=actor, notification_type=NotificationType.ATTENDANCE_WARNING, channel="in_app"
    )
