import logging
from typing import List

from sqlalchemy.orm import Session

from campus_notify.core.constants import SubscribableTypeEnum, UserTypeEnum
from campus_notify.crud.forum import forum_subscription as crud_subscription
from campus_notify.crud.user import student as crud_student
from campus_notify.models.forum import ForumPost, ForumTopic
from campus_notify.models.message import Message
from campus_notify.schemas.user import Actor

logger = logging.getLogger(__name__)

class RecipientResolver:
    """Computes the audience of a domain event as (user_id, user_type) pairs.

    The order of the returned list is the order notifications are written in.
    Lookups are not retried; a failing query propagates to the caller.
    """

    def for_direct_message(self, message: Message) -> List[Actor]:
        if message.receiver_id is None or message.receiver_type is None:
            return []
        return [Actor(user_id=message.receiver_id, user_type=message.receiver_type)]

    def for_broadcast(self, message: Message) -> List[Actor]:
        rows = sorted(message.recipients, key=lambda r: r.id)
        return [Actor(user_id=r.recipient_id, user_type=r.recipient_type) for r in rows]

    def for_message(self, message: Message) -> List[Actor]:
        if message.is_direct:
            return self.for_direct_message(message)
        return self.for_broadcast(message)

    def for_group(self, db: Session, *, group_id: int) -> List[Actor]:
        students = crud_student.get_active_by_group(db, group_id=group_id)
        return [Actor(user_id=s.id, user_type=UserTypeEnum.STUDENT) for s in students]

    def for_student(self, student_id: int) -> List[Actor]:
        return [Actor(user_id=student_id, user_type=UserTypeEnum.STUDENT)]

    def for_forum_reply(self, db: Session, *, topic: ForumTopic, post: ForumPost) -> List[Actor]:
        """Topic author first (unless they wrote the reply), then every other subscriber.

        An author who also subscribes appears twice.
        """
        recipients = []
        if not topic.is_authored_by(post.author_id, post.author_type):
            recipients.append(Actor(user_id=topic.author_id, user_type=topic.author_type))

        subscriptions = crud_subscription.get_subscribers(
            db, subscribable_type=SubscribableTypeEnum.TOPIC.value, subscribable_id=topic.id
        )
        for subscription in subscriptions:
            if subscription.user_id == post.author_id and subscription.user_type == post.author_type:
                continue
            recipients.append(Actor(user_id=subscription.user_id, user_type=subscription.user_type))

        logger.debug(f"Forum reply {post.id} on topic {topic.id} resolved to {len(recipients)} recipients")
        return recipients

recipient_resolver = RecipientResolver()
