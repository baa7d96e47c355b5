from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from xpense.auth.token import get_current_user
from xpense.database import get_db
from xpense.dependencies import get_community_service
from xpense.models.user import User
from xpense.schemas.community_schema import CommentCreate, PostCreate, PostCreatedOut, PostOut
from xpense.services.community import CommunityService

router = APIRouter(prefix="/api/community", tags=["Community"])


@router.post("/posts", response_model=PostCreatedOut, status_code=201)
def create_post(
    payload: PostCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    community: CommunityService = Depends(get_community_service),
):
    created = community.create_post(db, user, payload.content, payload.expense_id)
    return PostCreatedOut(
        message="Post created successfully",
        post=PostOut.model_validate(created.post),
        token_reward=created.token_reward,
    )


@router.get("/posts", response_model=List[PostOut])
def list_posts(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    community: CommunityService = Depends(get_community_service),
):
    return community.list_posts(db)


@router.post("/posts/{post_id}/like", response_model=PostOut)
def like_post(
    post_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    community: CommunityService = Depends(get_community_service),
):
    return community.like_post(db, post_id)


@router.post("/posts/{post_id}/comments", response_model=PostOut)
def add_comment(
    post_id: int,
    payload: CommentCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    community: CommunityService = Depends(get_community_service),
):
    return community.add_comment(db, user, post_id, payload.content)
