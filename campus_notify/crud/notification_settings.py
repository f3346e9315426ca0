from typing import List, Optional

from sqlalchemy.orm import Query, Session

from campus_notify.crud.base import CRUDBase
from campus_notify.models.notification import NotificationSettings
from campus_notify.schemas.notification import NotificationChannelsUpdate, NotificationSettingItem

class CRUDNotificationSettings(CRUDBase[NotificationSettings, NotificationSettingItem, NotificationChannelsUpdate]):

    def query_for_owner(self, db: Session, *, user_id: int, user_type: str) -> Query:
        return db.query(self.model).filter(self.model.user_id == user_id, self.model.user_type == user_type)

    def get_for_type(self, db: Session, *, user_id: int, user_type: str, notification_type: str) -> Optional[NotificationSettings]:
        return (
            self.query_for_owner(db, user_id=user_id, user_type=user_type)
            .filter(self.model.notification_type == notification_type)
            .first()
        )

    def get_all_for_owner(self, db: Session, *, user_id: int, user_type: str) -> List[NotificationSettings]:
        return self.query_for_owner(db, user_id=user_id, user_type=user_type).order_by(self.model.id).all()

    def delete_for_owner(self, db: Session, *, user_id: int, user_type: str) -> int:
        deleted = self.query_for_owner(db, user_id=user_id, user_type=user_type).delete(synchronize_session="fetch")
        db.flush()
        return deleted

notification_settings = CRUDNotificationSettings(NotificationSettings)
