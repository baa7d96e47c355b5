from typing import List, Optional

from pydantic import BaseModel, Field


class QuizQuestionOut(BaseModel):
    """Question as sent to players: the correct answer never leaves the server."""

    id: int
    question: str
    category: str
    options: List[str]
    difficulty: str
    points: int

    model_config = {"from_attributes": True}


class QuizSubmitIn(BaseModel):
    quiz_id: int
    answer: str = Field(..., min_length=1)


class QuizSubmitOut(BaseModel):
    is_correct: bool
    correct_answer: str
    points_earned: int
    message: str
    daily_attempts_count: int
    daily_limit_reached: bool
    tx_hash: Optional[str] = None


class CategoryBreakdown(BaseModel):
    category: Optional[str]
    count: int
    correct: int
    accuracy: float


class QuizStatsOut(BaseModel):
    total_attempts: int
    correct_attempts: int
    accuracy: float
    total_points: int
    category_breakdown: List[CategoryBreakdown]


class LeaderboardEntry(BaseModel):
    user_id: int
    name: str
    total_points: int
    correct_answers: int
