from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ChallengeTypeEnum(str, Enum):
    daily = "daily"
    weekly = "weekly"
    custom = "custom"


class ChallengeCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    type: ChallengeTypeEnum = ChallengeTypeEnum.custom
    start_date: datetime
    end_date: datetime
    target_amount: float = Field(..., gt=0)
    reward: Optional[int] = Field(None, gt=0)


class ChallengeOut(BaseModel):
    id: int
    title: str
    description: Optional[str]
    type: ChallengeTypeEnum
    start_date: datetime
    end_date: datetime
    target_amount: float
    reward: int
    completed: bool
    completed_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ChallengeCompleteOut(BaseModel):
    message: str
    challenge: ChallengeOut
    tokens_rewarded: float
    tx_hash: Optional[str] = None
