from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, ForeignKey, JSON, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from campus_notify.core.database import Base

class ForumCategory(Base):
    __tablename__ = "forum_categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    is_locked = Column(Boolean, nullable=False, default=False)
    requires_approval = Column(Boolean, nullable=False, default=False)
    allowed_user_types = Column(JSON, nullable=True)  # empty or null: everyone
    parent_id = Column(Integer, ForeignKey("forum_categories.id"), nullable=True)
    topics_count = Column(Integer, nullable=False, default=0)
    posts_count = Column(Integer, nullable=False, default=0)
    last_post_id = Column(Integer, nullable=True)
    last_post_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    parent = relationship("ForumCategory", remote_side=[id], back_populates="children")
    children = relationship("ForumCategory", back_populates="parent", order_by="ForumCategory.order")
    topics = relationship("ForumTopic", back_populates="category")

    def can_user_post(self, user_type: str) -> bool:
        if not self.is_active or self.is_locked:
            return False
        if not self.allowed_user_types:
            return True
        return user_type in self.allowed_user_types

class ForumTopic(Base):
    __tablename__ = "forum_topics"
    __table_args__ = (
        Index("ix_forum_topics_category_created", "category_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    category_id = Column(Integer, ForeignKey("forum_categories.id", ondelete="CASCADE"), nullable=False)
    author_id = Column(Integer, nullable=False, index=True)
    author_type = Column(String(50), nullable=False)
    title = Column(String(500), nullable=False)
    slug = Column(String(500), nullable=False, index=True)
    body = Column(Text, nullable=False)
    tags = Column(JSON, nullable=True)
    is_pinned = Column(Boolean, nullable=False, default=False)
    is_locked = Column(Boolean, nullable=False, default=False)
    is_approved = Column(Boolean, nullable=False, default=True)
    views_count = Column(Integer, nullable=False, default=0)
    posts_count = Column(Integer, nullable=False, default=0)
    likes_count = Column(Integer, nullable=False, default=0)
    last_post_id = Column(Integer, nullable=True)
    last_post_author_id = Column(Integer, nullable=True)
    last_post_author_type = Column(String(50), nullable=True)
    last_post_at = Column(DateTime, nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    deleted_at = Column(DateTime, nullable=True)

    category = relationship("ForumCategory", back_populates="topics")
    posts = relationship("ForumPost", back_populates="topic")

    def is_authored_by(self, user_id: int, user_type: str) -> bool:
        return self.author_id == user_id and self.author_type == user_type

    def can_reply(self) -> bool:
        return bool(self.is_approved) and not self.is_locked

class ForumPost(Base):
    __tablename__ = "forum_posts"
    __table_args__ = (
        Index("ix_forum_posts_topic_created", "topic_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    topic_id = Column(Integer, ForeignKey("forum_topics.id", ondelete="CASCADE"), nullable=False)
    author_id = Column(Integer, nullable=False, index=True)
    author_type = Column(String(50), nullable=False)
    body = Column(Text, nullable=False)
    parent_post_id = Column(Integer, ForeignKey("forum_posts.id", ondelete="CASCADE"), nullable=True)
    is_approved = Column(Boolean, nullable=False, default=True)
    is_edited = Column(Boolean, nullable=False, default=False)
    edited_at = Column(DateTime, nullable=True)
    likes_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    deleted_at = Column(DateTime, nullable=True)

    topic = relationship("ForumTopic", back_populates="posts")

    def is_authored_by(self, user_id: int, user_type: str) -> bool:
        return self.author_id == user_id and self.author_type == user_type

class ForumLike(Base):
    __tablename__ = "forum_likes"
    __table_args__ = (
        UniqueConstraint("likeable_type", "likeable_id", "user_id", "user_type", name="uq_forum_like"),
        Index("ix_forum_likes_likeable", "likeable_type", "likeable_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    likeable_type = Column(String(50), nullable=False)  # 'topic' or 'post'
    likeable_id = Column(Integer, nullable=False)
    user_id = Column(Integer, nullable=False)
    user_type = Column(String(50), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

class ForumSubscription(Base):
    __tablename__ = "forum_subscriptions"
    __table_args__ = (
        UniqueConstraint("subscribable_type", "subscribable_id", "user_id", "user_type", name="uq_forum_subscription"),
        Index("ix_forum_subscriptions_subscribable", "subscribable_type", "subscribable_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    subscribable_type = Column(String(50), nullable=False)  # 'topic' or 'category'
    subscribable_id = Column(Integer, nullable=False)
    user_id = Column(Integer, nullable=False)
    user_type = Column(String(50), nullable=False)
    notify_email = Column(Boolean, nullable=False, default=True)
    notify_push = Column(Boolean, nullable=False, default=True)
    last_notified_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
