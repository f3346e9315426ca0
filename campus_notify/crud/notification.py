from datetime import datetime
from typing import Dict, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session

from campus_notify.crud.base import CRUDBase
from campus_notify.core.constants import HIGH_PRIORITIES, PriorityEnum
from campus_notify.models.notification import Notification
from campus_notify.schemas.notification import NotificationCreate, NotificationUpdate

class CRUDNotification(CRUDBase[Notification, NotificationCreate, NotificationUpdate]):
    """CRUD operations for Notifications.

    Every owner-facing query is scoped by (user_id, user_type); a row that
    belongs to someone else is indistinguishable from a missing one.
    """

    def query_for_owner(self, db: Session, *, user_id: int, user_type: str) -> Query:
        return db.query(self.model).filter(self.model.user_id == user_id, self.model.user_type == user_type)

    def not_expired(self, query: Query, *, now: Optional[datetime] = None) -> Query:
        now = now or datetime.utcnow()
        return query.filter(or_(self.model.expires_at.is_(None), self.model.expires_at > now))

    def get_for_owner(self, db: Session, *, id: int, user_id: int, user_type: str) -> Optional[Notification]:
        return self.query_for_owner(db, user_id=user_id, user_type=user_type).filter(self.model.id == id).first()

    def filtered_for_owner(
        self,
        db: Session,
        *,
        user_id: int,
        user_type: str,
        is_read: Optional[bool] = None,
        notification_type: Optional[str] = None,
        priority: Optional[str] = None,
        high_priority: bool = False,
        created_since: Optional[datetime] = None,
    ) -> Query:
        query = self.not_expired(self.query_for_owner(db, user_id=user_id, user_type=user_type))
        if is_read is not None:
            query = query.filter(self.model.is_read == is_read)
        if notification_type:
            query = query.filter(self.model.type == notification_type)
        if priority:
            query = query.filter(self.model.priority == priority)
        if high_priority:
            query = query.filter(self.model.priority.in_(HIGH_PRIORITIES))
        if created_since:
            query = query.filter(self.model.created_at >= created_since)
        return query.order_by(self.model.created_at.desc(), self.model.id.desc())

    def count_unread(self, db: Session, *, user_id: int, user_type: str) -> int:
        query = self.query_for_owner(db, user_id=user_id, user_type=user_type).filter(self.model.is_read == False)
        return self.not_expired(query).count()

    def mark_as_read(self, db: Session, *, notification: Notification) -> Notification:
        if notification.is_read:
            return notification
        notification.is_read = True
        notification.read_at = datetime.utcnow()
        db.add(notification)
        db.flush()
        return notification

    def mark_as_unread(self, db: Session, *, notification: Notification) -> Notification:
        notification.is_read = False
        notification.read_at = None
        db.add(notification)
        db.flush()
        return notification

    def mark_all_as_read(self, db: Session, *, user_id: int, user_type: str) -> int:
        return (
            self.query_for_owner(db, user_id=user_id, user_type=user_type)
            .filter(self.model.is_read == False)
            .update({"is_read": True, "read_at": datetime.utcnow()}, synchronize_session="fetch")
        )

    def get_stats(self, db: Session, *, user_id: int, user_type: str, today_start: datetime, recent_since: datetime) -> Dict:
        base = self.not_expired(self.query_for_owner(db, user_id=user_id, user_type=user_type))
        by_type_rows = (
            base.with_entities(self.model.type, func.count(self.model.id))
            .group_by(self.model.type)
            .all()
        )
        return {
            "total": base.count(),
            "unread": base.filter(self.model.is_read == False).count(),
            "read": base.filter(self.model.is_read == True).count(),
            "today": base.filter(self.model.created_at >= today_start).count(),
            "recent": base.filter(self.model.created_at >= recent_since).count(),
            "urgent": base.filter(self.model.priority == PriorityEnum.URGENT.value).count(),
            "by_type": {row[0]: row[1] for row in by_type_rows},
        }

    def delete_read_older_than(self, db: Session, *, cutoff: datetime) -> int:
        return (
            db.query(self.model)
            .filter(self.model.created_at < cutoff, self.model.is_read == True)
            .delete(synchronize_session=False)
        )

notification = CRUDNotification(Notification)
