import logging
import re
import secrets
import string
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from campus_notify.core.config import settings
from campus_notify.core.constants import LikeableTypeEnum, SubscribableTypeEnum
from campus_notify.crud.base import paginate
from campus_notify.crud.forum import (
    forum_category as crud_category,
    forum_like as crud_like,
    forum_post as crud_post,
    forum_subscription as crud_subscription,
    forum_topic as crud_topic,
)
from campus_notify.models.forum import ForumCategory, ForumPost, ForumSubscription, ForumTopic
from campus_notify.schemas.forum import ForumPostCreate, ForumPostUpdate, ForumTopicCreate, ForumTopicUpdate
from campus_notify.schemas.user import Actor
from campus_notify.services.notification import notification_service

logger = logging.getLogger(__name__)

def make_slug(title: str) -> str:
    """Lowercase, hyphenated title plus a random 6-character suffix."""
    base = re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-") or "topic"
    suffix = "".join(secrets.choice(string.ascii_lowercase + string.digits) for _ in range(6))
    return f"{base[:480]}-{suffix}"

class ForumService:

    # Categories

    def get_categories(self, db: Session) -> List[ForumCategory]:
        return crud_category.get_active_roots(db)

    def get_category(self, db: Session, *, category_id: int) -> ForumCategory:
        category = crud_category.get(db, id=category_id)
        if not category:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found.")
        return category

    def get_topics(
        self,
        db: Session,
        *,
        category_id: int,
        page: int = 1,
        size: int = settings.DEFAULT_PAGE_SIZE,
        search: Optional[str] = None,
        sort: str = "recent",
    ) -> Dict[str, Any]:
        self.get_category(db, category_id=category_id)
        query = crud_topic.query_for_category(db, category_id=category_id, search=search, sort=sort)
        return paginate(query, page=page, size=size)

    # Topics

    def _get_topic(self, db: Session, topic_id: int) -> ForumTopic:
        topic = crud_topic.get(db, id=topic_id)
        if not topic:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Topic not found.")
        return topic

    def _require_topic_author(self, topic: ForumTopic, actor: Actor):
        if not topic.is_authored_by(actor.user_id, actor.user_type):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the author can modify this topic.")

    def get_topic(self, db: Session, *, topic_id: int) -> Tuple[ForumTopic, List[ForumPost]]:
        """Fetch a topic with its approved posts; each view bumps views_count."""
        topic = self._get_topic(db, topic_id)
        crud_topic.increment(db, obj=topic, field="views_count")
        return topic, crud_post.get_for_topic(db, topic_id=topic.id)

    def create_topic(self, db: Session, *, topic_in: ForumTopicCreate, actor: Actor) -> ForumTopic:
        category = self.get_category(db, category_id=topic_in.category_id)
        if not category.can_user_post(actor.user_type):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Cannot post in this category.")

        topic = crud_topic.create(
            db,
            obj_in={
                "category_id": category.id,
                "author_id": actor.user_id,
                "author_type": actor.user_type,
                "title": topic_in.title,
                "slug": make_slug(topic_in.title),
                "body": topic_in.body,
                "tags": topic_in.tags,
                "is_approved": not category.requires_approval,
            },
        )
        crud_category.increment(db, obj=category, field="topics_count")
        logger.info(f"Topic {topic.id} created in category {category.id} by {actor.user_type} {actor.user_id}")
        return topic

    def update_topic(self, db: Session, *, topic_id: int, topic_in: ForumTopicUpdate, actor: Actor) -> ForumTopic:
        topic = self._get_topic(db, topic_id)
        self._require_topic_author(topic, actor)
        return crud_topic.update(db, db_obj=topic, obj_in=topic_in)

    def delete_topic(self, db: Session, *, topic_id: int, actor: Actor) -> None:
        topic = self._get_topic(db, topic_id)
        self._require_topic_author(topic, actor)
        category = topic.category
        crud_topic.delete(db, id=topic.id)
        crud_category.increment(db, obj=category, field="topics_count", amount=-1)
        if topic.posts_count:
            crud_category.increment(db, obj=category, field="posts_count", amount=-topic.posts_count)

    # Posts

    def _get_post(self, db: Session, post_id: int) -> ForumPost:
        post = crud_post.get(db, id=post_id)
        if not post or post.topic.deleted_at is not None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found.")
        return post

    def _require_post_author(self, post: ForumPost, actor: Actor):
        if not post.is_authored_by(actor.user_id, actor.user_type):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the author can modify this post.")

    def create_post(self, db: Session, *, topic_id: int, post_in: ForumPostCreate, actor: Actor) -> ForumPost:
        """Reply to a topic: write the post, bump counters, then notify the author and subscribers.

        All of it happens in the caller's transaction.
        """
        topic = self._get_topic(db, topic_id)
        if not topic.can_reply():
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Cannot reply to this topic.")
        if post_in.parent_post_id is not None:
            parent = crud_post.get(db, id=post_in.parent_post_id)
            if not parent or parent.topic_id != topic.id:
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail="Parent post does not belong to this topic.",
                )

        post = crud_post.create(
            db,
            obj_in={
                "topic_id": topic.id,
                "author_id": actor.user_id,
                "author_type": actor.user_type,
                "body": post_in.body,
                "parent_post_id": post_in.parent_post_id,
            },
        )

        category = topic.category
        crud_topic.increment(db, obj=topic, field="posts_count")
        crud_topic.touch_last_post(db, topic=topic, post=post)
        crud_category.increment(db, obj=category, field="posts_count")
        crud_category.touch_last_post(db, category=category, post=post)

        notification_service.notify_forum_reply(db, topic=topic, post=post)
        crud_subscription.mark_notified(db, subscriptions=self._other_subscriptions(db, topic=topic, actor=actor))
        return post

    def _other_subscriptions(self, db: Session, *, topic: ForumTopic, actor: Actor) -> List[ForumSubscription]:
        subscriptions = crud_subscription.get_subscribers(
            db, subscribable_type=SubscribableTypeEnum.TOPIC.value, subscribable_id=topic.id
        )
        return [s for s in subscriptions if not (s.user_id == actor.user_id and s.user_type == actor.user_type)]

    def update_post(self, db: Session, *, post_id: int, post_in: ForumPostUpdate, actor: Actor) -> ForumPost:
        post = self._get_post(db, post_id)
        self._require_post_author(post, actor)
        return crud_post.update(
            db, db_obj=post, obj_in={"body": post_in.body, "is_edited": True, "edited_at": datetime.utcnow()}
        )

    def delete_post(self, db: Session, *, post_id: int, actor: Actor) -> None:
        post = self._get_post(db, post_id)
        self._require_post_author(post, actor)
        topic = post.topic
        crud_post.delete(db, id=post.id)
        crud_topic.increment(db, obj=topic, field="posts_count", amount=-1)
        crud_category.increment(db, obj=topic.category, field="posts_count", amount=-1)

    # Likes

    def toggle_like(self, db: Session, *, likeable_type: str, likeable_id: int, actor: Actor) -> Dict[str, Any]:
        """Add the actor's like, or remove it if present; the counter moves with the like row."""
        if likeable_type == LikeableTypeEnum.TOPIC.value:
            target, crud = self._get_topic(db, likeable_id), crud_topic
        else:
            target, crud = self._get_post(db, likeable_id), crud_post

        existing = crud_like.get_by_user(
            db, likeable_type=likeable_type, likeable_id=target.id, user_id=actor.user_id, user_type=actor.user_type
        )
        if existing:
            crud_like.remove(db, like=existing)
            crud.increment(db, obj=target, field="likes_count", amount=-1)
            liked = False
        else:
            crud_like.create(
                db,
                obj_in={
                    "likeable_type": likeable_type,
                    "likeable_id": target.id,
                    "user_id": actor.user_id,
                    "user_type": actor.user_type,
                },
            )
            crud.increment(db, obj=target, field="likes_count")
            liked = True
        return {"liked": liked, "likes_count": target.likes_count}

    # Subscriptions

    def subscribe(self, db: Session, *, topic_id: int, actor: Actor) -> ForumSubscription:
        topic = self._get_topic(db, topic_id)
        existing = crud_subscription.get_by_user(
            db,
            subscribable_type=SubscribableTypeEnum.TOPIC.value,
            subscribable_id=topic.id,
            user_id=actor.user_id,
            user_type=actor.user_type,
        )
        if existing:
            return existing
        return crud_subscription.create(
            db,
            obj_in={
                "subscribable_type": SubscribableTypeEnum.TOPIC.value,
                "subscribable_id": topic.id,
                "user_id": actor.user_id,
                "user_type": actor.user_type,
            },
        )

    def unsubscribe(self, db: Session, *, topic_id: int, actor: Actor) -> None:
        topic = self._get_topic(db, topic_id)
        existing = crud_subscription.get_by_user(
            db,
            subscribable_type=SubscribableTypeEnum.TOPIC.value,
            subscribable_id=topic.id,
            user_id=actor.user_id,
            user_type=actor.user_type,
        )
        if existing:
            crud_subscription.remove(db, subscription=existing)

forum_service = ForumService()
