from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Literal, Optional

from campus_notify.core.config import settings
from campus_notify.core.constants import LikeableTypeEnum
from campus_notify.crud.base import PaginatedResponse
from campus_notify.schemas.response import APIResponse
from campus_notify.schemas.forum import (
    ForumCategoryDetail,
    ForumPost,
    ForumPostCreate,
    ForumPostUpdate,
    ForumTopic,
    ForumTopicCreate,
    ForumTopicDetail,
    ForumTopicUpdate,
    LikeToggleResult,
)
from campus_notify.schemas.user import Actor
from campus_notify.services.forum import forum_service
from campus_notify.utils import deps

router = APIRouter()

# Categories

@router.get("/categories", response_model=APIResponse[List[ForumCategoryDetail]])
async def get_categories(
    db: Session = Depends(deps.get_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    data = forum_service.get_categories(db)
    return APIResponse(message="Categories fetched successfully", data=data)

@router.get("/categories/{category_id}", response_model=APIResponse[ForumCategoryDetail])
async def get_category(
    category_id: int,
    db: Session = Depends(deps.get_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    data = forum_service.get_category(db, category_id=category_id)
    return APIResponse(message="Category fetched successfully", data=data)

@router.get("/categories/{category_id}/topics", response_model=APIResponse[PaginatedResponse[ForumTopic]])
async def get_category_topics(
    category_id: int,
    db: Session = Depends(deps.get_db),
    actor: Actor = Depends(deps.get_current_actor),
    page: int = Query(1, ge=1),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    search: Optional[str] = Query(None, min_length=1, max_length=200),
    sort: Literal["recent", "popular"] = "recent",
):
    """Approved topics in a category, pinned first."""
    data = forum_service.get_topics(db, category_id=category_id, page=page, size=size, search=search, sort=sort)
    return APIResponse(message="Topics fetched successfully", data=data)

# Topics

@router.post("/topics", response_model=APIResponse[ForumTopic], status_code=status.HTTP_201_CREATED)
async def create_topic(
    topic_in: ForumTopicCreate,
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    data = forum_service.create_topic(db, topic_in=topic_in, actor=actor)
    return APIResponse(message="Topic created successfully", data=data)

@router.get("/topics/{topic_id}", response_model=APIResponse[ForumTopicDetail])
async def get_topic(
    topic_id: int,
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    topic, posts = forum_service.get_topic(db, topic_id=topic_id)
    data = ForumTopicDetail(
        **ForumTopic.model_validate(topic).model_dump(),
        posts=[ForumPost.model_validate(p) for p in posts],
    )
    return APIResponse(message="Topic fetched successfully", data=data)

@router.put("/topics/{topic_id}", response_model=APIResponse[ForumTopic])
async def update_topic(
    topic_id: int,
    topic_in: ForumTopicUpdate,
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    data = forum_service.update_topic(db, topic_id=topic_id, topic_in=topic_in, actor=actor)
    return APIResponse(message="Topic updated successfully", data=data)

@router.delete("/topics/{topic_id}", response_model=APIResponse[None])
async def delete_topic(
    topic_id: int,
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    forum_service.delete_topic(db, topic_id=topic_id, actor=actor)
    return APIResponse(message="Topic deleted successfully")

# Posts

@router.post("/topics/{topic_id}/posts", response_model=APIResponse[ForumPost], status_code=status.HTTP_201_CREATED)
async def create_post(
    topic_id: int,
    post_in: ForumPostCreate,
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    """Reply to a topic; the topic author and subscribers are notified."""
    data = forum_service.create_post(db, topic_id=topic_id, post_in=post_in, actor=actor)
    return APIResponse(message="Post created successfully", data=data)

@router.put("/posts/{post_id}", response_model=APIResponse[ForumPost])
async def update_post(
    post_id: int,
    post_in: ForumPostUpdate,
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    data = forum_service.update_post(db, post_id=post_id, post_in=post_in, actor=actor)
    return APIResponse(message="Post updated successfully", data=data)

@router.delete("/posts/{post_id}", response_model=APIResponse[None])
async def delete_post(
    post_id: int,
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    forum_service.delete_post(db, post_id=post_id, actor=actor)
    return APIResponse(message="Post deleted successfully")

# Likes

@router.post("/topics/{topic_id}/like", response_model=APIResponse[LikeToggleResult])
async def toggle_topic_like(
    topic_id: int,
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    data = forum_service.toggle_like(db, likeable_type=LikeableTypeEnum.TOPIC.value, likeable_id=topic_id, actor=actor)
    return APIResponse(message="Like toggled", data=data)

@router.post("/posts/{post_id}/like", response_model=APIResponse[LikeToggleResult])
async def toggle_post_like(
    post_id: int,
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    data = forum_service.toggle_like(db, likeable_type=LikeableTypeEnum.POST.value, likeable_id=post_id, actor=actor)
    return APIResponse(message="Like toggled", data=data)

# Subscriptions

@router.post("/topics/{topic_id}/subscribe", response_model=APIResponse[None])
async def subscribe_to_topic(
    topic_id: int,
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    forum_service.subscribe(db, topic_id=topic_id, actor=actor)
    return APIResponse(message="Subscribed successfully")

@router.delete("/topics/{topic_id}/subscribe", response_model=APIResponse[None])
async def unsubscribe_from_topic(
    topic_id: int,
    db: Session = Depends(deps.get_transactional_db),
    actor: Actor = Depends(deps.get_current_actor),
):
    forum_service.unsubscribe(db, topic_id=topic_id, actor=actor)
    return APIResponse(message="Unsubscribed successfully")
