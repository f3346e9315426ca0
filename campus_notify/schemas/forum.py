from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from typing import List, Optional

class ForumCategory(BaseModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    order: int
    is_active: bool
    is_locked: bool
    requires_approval: bool
    allowed_user_types: Optional[List[str]] = None
    parent_id: Optional[int] = None
    topics_count: int
    posts_count: int
    last_post_id: Optional[int] = None
    last_post_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class ForumCategoryDetail(ForumCategory):
    children: List[ForumCategory] = []

class ForumTopicCreate(BaseModel):
    category_id: int
    title: str = Field(..., min_length=1, max_length=500)
    body: str = Field(..., min_length=1)
    tags: Optional[List[str]] = None

class ForumTopicUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    body: Optional[str] = Field(None, min_length=1)
    tags: Optional[List[str]] = None

    @field_validator('title', 'body')
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v

class ForumTopic(BaseModel):
    id: int
    category_id: int
    author_id: int
    author_type: str
    title: str
    slug: str
    body: str
    tags: Optional[List[str]] = None
    is_pinned: bool
    is_locked: bool
    is_approved: bool
    views_count: int
    posts_count: int
    likes_count: int
    last_post_id: Optional[int] = None
    last_post_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class ForumPostCreate(BaseModel):
    body: str = Field(..., min_length=1)
    parent_post_id: Optional[int] = None

class ForumPostUpdate(BaseModel):
    body: str = Field(..., min_length=1)

class ForumPost(BaseModel):
    id: int
    topic_id: int
    author_id: int
    author_type: str
    body: str
    parent_post_id: Optional[int] = None
    is_approved: bool
    is_edited: bool
    edited_at: Optional[datetime] = None
    likes_count: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class ForumTopicDetail(ForumTopic):
    posts: List[ForumPost] = []

class LikeToggleResult(BaseModel):
    liked: bool
    likes_count: int
