from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class PostCreate(BaseModel):
    content: str
    expense_id: Optional[int] = None


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1)


class CommentOut(BaseModel):
    id: int
    user_id: int
    user_name: str
    content: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class PostOut(BaseModel):
    id: int
    user_id: int
    user_name: str
    content: str
    expense_id: Optional[int] = None
    amount: Optional[float] = None
    category: Optional[str] = None
    likes: int
    created_at: Optional[datetime] = None
    comments: List[CommentOut] = []

    model_config = {"from_attributes": True}


class PostCreatedOut(BaseModel):
    message: str
    post: PostOut
    token_reward: float
