from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel
from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session, selectinload

from campus_notify.crud.base import CRUDBase
from campus_notify.models.forum import ForumCategory, ForumLike, ForumPost, ForumSubscription, ForumTopic
from campus_notify.schemas.forum import ForumPostCreate, ForumPostUpdate, ForumTopicCreate, ForumTopicUpdate

class CounterMixin:
    """Atomic in-database counter updates for models with *_count columns."""

    def increment(self, db: Session, *, obj, field: str, amount: int = 1):
        column = getattr(self.model, field)
        db.query(self.model).filter(self.model.id == obj.id).update(
            {column: column + amount}, synchronize_session=False
        )
        db.refresh(obj)
        return obj

class CRUDForumCategory(CounterMixin, CRUDBase[ForumCategory, BaseModel, BaseModel]):

    def get_active_roots(self, db: Session) -> List[ForumCategory]:
        return (
            db.query(self.model)
            .options(selectinload(self.model.children))
            .filter(self.model.is_active == True, self.model.parent_id.is_(None))
            .order_by(self.model.order, self.model.id)
            .all()
        )

    def touch_last_post(self, db: Session, *, category: ForumCategory, post: ForumPost) -> ForumCategory:
        category.last_post_id = post.id
        category.last_post_at = post.created_at
        db.add(category)
        db.flush()
        return category

class CRUDForumTopic(CounterMixin, CRUDBase[ForumTopic, ForumTopicCreate, ForumTopicUpdate]):

    def query_for_category(
        self, db: Session, *, category_id: int, search: Optional[str] = None, sort: str = "recent"
    ) -> Query:
        query = db.query(self.model).filter(
            self.model.category_id == category_id,
            self.model.is_approved == True,
        )
        query = self._live(query)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(self.model.title.ilike(pattern), self.model.body.ilike(pattern)))

        if sort == "popular":
            ordering = (self.model.views_count.desc(), self.model.likes_count.desc())
        else:
            ordering = (func.coalesce(self.model.last_post_at, self.model.created_at).desc(),)
        return query.order_by(self.model.is_pinned.desc(), *ordering, self.model.id.desc())

    def touch_last_post(self, db: Session, *, topic: ForumTopic, post: ForumPost) -> ForumTopic:
        topic.last_post_id = post.id
        topic.last_post_author_id = post.author_id
        topic.last_post_author_type = post.author_type
        topic.last_post_at = post.created_at
        db.add(topic)
        db.flush()
        return topic

class CRUDForumPost(CounterMixin, CRUDBase[ForumPost, ForumPostCreate, ForumPostUpdate]):

    def get_for_topic(self, db: Session, *, topic_id: int) -> List[ForumPost]:
        query = db.query(self.model).filter(self.model.topic_id == topic_id, self.model.is_approved == True)
        return self._live(query).order_by(self.model.created_at, self.model.id).all()

class CRUDForumLike(CRUDBase[ForumLike, BaseModel, BaseModel]):

    def get_by_user(self, db: Session, *, likeable_type: str, likeable_id: int, user_id: int, user_type: str) -> Optional[ForumLike]:
        return db.query(self.model).filter(
            self.model.likeable_type == likeable_type,
            self.model.likeable_id == likeable_id,
            self.model.user_id == user_id,
            self.model.user_type == user_type,
        ).first()

    def count_for(self, db: Session, *, likeable_type: str, likeable_id: int) -> int:
        return db.query(self.model).filter(
            self.model.likeable_type == likeable_type,
            self.model.likeable_id == likeable_id,
        ).count()

    def remove(self, db: Session, *, like: ForumLike) -> None:
        db.delete(like)
        db.flush()

class CRUDForumSubscription(CRUDBase[ForumSubscription, BaseModel, BaseModel]):

    def get_by_user(self, db: Session, *, subscribable_type: str, subscribable_id: int, user_id: int, user_type: str) -> Optional[ForumSubscription]:
        return db.query(self.model).filter(
            self.model.subscribable_type == subscribable_type,
            self.model.subscribable_id == subscribable_id,
            self.model.user_id == user_id,
            self.model.user_type == user_type,
        ).first()

    def get_subscribers(self, db: Session, *, subscribable_type: str, subscribable_id: int) -> List[ForumSubscription]:
        return (
            db.query(self.model)
            .filter(
                self.model.subscribable_type == subscribable_type,
                self.model.subscribable_id == subscribable_id,
            )
            .order_by(self.model.id)
            .all()
        )

    def mark_notified(self, db: Session, *, subscriptions: List[ForumSubscription]) -> None:
        now = datetime.utcnow()
        for subscription in subscriptions:
            subscription.last_notified_at = now
            db.add(subscription)
        db.flush()

    def remove(self, db: Session, *, subscription: ForumSubscription) -> None:
        db.delete(subscription)
        db.flush()

forum_category = CRUDForumCategory(ForumCategory)
forum_topic = CRUDForumTopic(ForumTopic)
forum_post = CRUDForumPost(ForumPost)
forum_like = CRUDForumLike(ForumLike)
forum_subscription = CRUDForumSubscription(ForumSubscription)
