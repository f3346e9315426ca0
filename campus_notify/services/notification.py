import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from campus_notify.core.config import settings
from campus_notify.core.constants import NotificationType, PriorityEnum
from campus_notify.crud.base import paginate
from campus_notify.crud.notification import notification as crud_notification
from campus_notify.models.assignment import Assignment, AssignmentSubmission
from campus_notify.models.exam import Exam, ExamAttempt
from campus_notify.models.forum import ForumPost, ForumTopic
from campus_notify.models.message import Message
from campus_notify.models.notification import Notification
from campus_notify.schemas.notification import NotificationCreate
from campus_notify.schemas.user import Actor
from campus_notify.services.recipient_resolver import recipient_resolver

logger = logging.getLogger(__name__)

class NotificationService:

    # Writer

    def create_notification(
        self,
        db: Session,
        *,
        recipient: Actor,
        notification_type: str,
        title: str,
        message: str,
        payload: Optional[Dict[str, Any]] = None,
        priority: str = PriorityEnum.NORMAL.value,
        entity_type: Optional[str] = None,
        entity_id: Optional[int] = None,
        action_url: Optional[str] = None,
        expires_at: Optional[datetime] = None,
    ) -> Notification:
        """Insert one unread notification for one recipient.

        Every call writes a new row; identical calls produce identical rows.
        """
        notification_in = NotificationCreate(
            user_id=recipient.user_id,
            user_type=recipient.user_type,
            type=notification_type,
            title=title,
            message=message,
            payload=payload,
            priority=priority,
            entity_type=entity_type,
            entity_id=entity_id,
            action_url=action_url,
            expires_at=expires_at,
        )
        return crud_notification.create(db, obj_in=notification_in)

    def fan_out(
        self,
        db: Session,
        *,
        recipients: List[Actor],
        notification_type: str,
        title: str,
        message: str,
        action_url: Optional[str] = None,
        **fields,
    ) -> List[Notification]:
        """Write one notification per recipient, in order.

        `action_url` may contain a `{user_type}` placeholder, filled per recipient.
        """
        created = []
        for recipient in recipients:
            created.append(
                self.create_notification(
                    db,
                    recipient=recipient,
                    notification_type=notification_type,
                    title=title,
                    message=message,
                    action_url=action_url.format(user_type=recipient.user_type) if action_url else None,
                    **fields,
                )
            )
        logger.info(f"Fan-out '{notification_type}' wrote {len(created)} notifications")
        return created

    # Domain events

    def notify_new_assignment(self, db: Session, *, assignment: Assignment) -> List[Notification]:
        recipients = recipient_resolver.for_group(db, group_id=assignment.group_id)
        return self.fan_out(
            db,
            recipients=recipients,
            notification_type=NotificationType.NEW_ASSIGNMENT,
            title="New assignment",
            message=f"Assignment \"{assignment.title}\" was posted. Deadline: {assignment.deadline:%d.%m.%Y}",
            action_url="/student/assignments",
            payload={
                "assignment_id": assignment.id,
                "group_id": assignment.group_id,
                "deadline": assignment.deadline.isoformat(),
            },
            entity_type="assignment",
            entity_id=assignment.id,
        )

    def notify_assignment_graded(self, db: Session, *, submission: AssignmentSubmission) -> List[Notification]:
        assignment = submission.assignment
        return self.fan_out(
            db,
            recipients=recipient_resolver.for_student(submission.student_id),
            notification_type=NotificationType.ASSIGNMENT_GRADED,
            title="Assignment graded",
            message=f"Your submission for \"{assignment.title}\" was graded. Score: {submission.score:g}",
            action_url="/student/assignments",
            payload={
                "assignment_id": assignment.id,
                "submission_id": submission.id,
                "score": submission.score,
            },
            entity_type="assignment_submission",
            entity_id=submission.id,
        )

    def notify_test_published(self, db: Session, *, exam: Exam) -> List[Notification]:
        recipients = recipient_resolver.for_group(db, group_id=exam.group_id)
        return self.fan_out(
            db,
            recipients=recipients,
            notification_type=NotificationType.NEW_TEST,
            title="New test",
            message=f"Test \"{exam.title}\" was created. Starts: {exam.start_time:%d.%m.%Y %H:%M}",
            action_url="/student/tests",
            payload={
                "test_id": exam.id,
                "group_id": exam.group_id,
                "start_time": exam.start_time.isoformat(),
                "end_time": exam.end_time.isoformat() if exam.end_time else None,
            },
            entity_type="test",
            entity_id=exam.id,
        )

    def notify_test_graded(self, db: Session, *, attempt: ExamAttempt) -> List[Notification]:
        exam = attempt.exam
        return self.fan_out(
            db,
            recipients=recipient_resolver.for_student(attempt.student_id),
            notification_type=NotificationType.TEST_GRADED,
            title="Test results",
            message=f"Your result for \"{exam.title}\" is ready. Score: {attempt.score:g}%",
            action_url="/student/tests",
            payload={
                "test_id": exam.id,
                "attempt_id": attempt.id,
                "score": attempt.score,
            },
            entity_type="test_attempt",
            entity_id=attempt.id,
        )

    def notify_new_message(self, db: Session, *, message: Message) -> List[Notification]:
        return self.fan_out(
            db,
            recipients=recipient_resolver.for_message(message),
            notification_type=NotificationType.NEW_MESSAGE,
            title="New message",
            message=f"You received a message: \"{message.subject}\"",
            action_url=f"/{{user_type}}/messages/{message.id}",
            payload={
                "message_id": message.id,
                "sender_id": message.sender_id,
                "sender_type": message.sender_type,
            },
            priority=message.priority,
            entity_type="message",
            entity_id=message.id,
        )

    def notify_forum_reply(self, db: Session, *, topic: ForumTopic, post: ForumPost) -> List[Notification]:
        return self.fan_out(
            db,
            recipients=recipient_resolver.for_forum_reply(db, topic=topic, post=post),
            notification_type=NotificationType.FORUM_REPLY,
            title="New reply",
            message=f"A new reply was posted in \"{topic.title}\"",
            action_url=f"/{{user_type}}/forum/topics/{topic.id}",
            payload={"topic_id": topic.id, "post_id": post.id},
            entity_type="forum_post",
            entity_id=post.id,
        )

    # Read side

    def _get_owned(self, db: Session, *, notification_id: int, actor: Actor) -> Notification:
        notification = crud_notification.get_for_owner(
            db, id=notification_id, user_id=actor.user_id, user_type=actor.user_type
        )
        if not notification:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found.")
        return notification

    def list_notifications(
        self,
        db: Session,
        *,
        actor: Actor,
        page: int = 1,
        size: int = settings.DEFAULT_PAGE_SIZE,
        is_read: Optional[bool] = None,
        notification_type: Optional[str] = None,
        priority: Optional[str] = None,
        high_priority: bool = False,
        recent: bool = False,
    ) -> Dict[str, Any]:
        created_since = datetime.utcnow() - timedelta(days=settings.RECENT_NOTIFICATION_DAYS) if recent else None
        query = crud_notification.filtered_for_owner(
            db,
            user_id=actor.user_id,
            user_type=actor.user_type,
            is_read=is_read,
            notification_type=notification_type,
            priority=priority,
            high_priority=high_priority,
            created_since=created_since,
        )
        return paginate(query, page=page, size=size)

    def get_unread(self, db: Session, *, actor: Actor, page: int = 1, size: int = settings.DEFAULT_PAGE_SIZE) -> Dict[str, Any]:
        return self.list_notifications(db, actor=actor, page=page, size=size, is_read=False)

    def get_recent(self, db: Session, *, actor: Actor) -> List[Notification]:
        created_since = datetime.utcnow() - timedelta(days=settings.RECENT_NOTIFICATION_DAYS)
        query = crud_notification.filtered_for_owner(
            db, user_id=actor.user_id, user_type=actor.user_type, created_since=created_since
        )
        return query.limit(settings.RECENT_NOTIFICATION_LIMIT).all()

    def get_notification(self, db: Session, *, notification_id: int, actor: Actor) -> Notification:
        """Fetch one notification; viewing it marks it read."""
        notification = self._get_owned(db, notification_id=notification_id, actor=actor)
        if not notification.is_read:
            crud_notification.mark_as_read(db, notification=notification)
        return notification

    def mark_as_read(self, db: Session, *, notification_id: int, actor: Actor) -> Notification:
        notification = self._get_owned(db, notification_id=notification_id, actor=actor)
        return crud_notification.mark_as_read(db, notification=notification)

    def mark_as_unread(self, db: Session, *, notification_id: int, actor: Actor) -> Notification:
        notification = self._get_owned(db, notification_id=notification_id, actor=actor)
        return crud_notification.mark_as_unread(db, notification=notification)

    def mark_all_as_read(self, db: Session, *, actor: Actor) -> int:
        count = crud_notification.mark_all_as_read(db, user_id=actor.user_id, user_type=actor.user_type)
        logger.info(f"Marked {count} notifications as read for {actor.user_type} {actor.user_id}")
        return count

    def get_unread_count(self, db: Session, *, actor: Actor) -> int:
        return crud_notification.count_unread(db, user_id=actor.user_id, user_type=actor.user_type)

    def get_stats(self, db: Session, *, actor: Actor) -> Dict[str, Any]:
        now = datetime.utcnow()
        today_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        return crud_notification.get_stats(
            db,
            user_id=actor.user_id,
            user_type=actor.user_type,
            today_start=today_start,
            recent_since=now - timedelta(days=settings.RECENT_NOTIFICATION_DAYS),
        )

    def purge_old(self, db: Session, *, days: int = settings.NOTIFICATION_RETENTION_DAYS) -> int:
        """Delete read notifications older than the retention window."""
        cutoff = datetime.utcnow() - timedelta(days=days)
        deleted = crud_notification.delete_read_older_than(db, cutoff=cutoff)
        logger.info(f"Purged {deleted} read notifications created before {cutoff.isoformat()}")
        return deleted

notification_service = NotificationService()
