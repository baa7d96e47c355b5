from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from xpense.auth.token import get_current_user
from xpense.database import get_db
from xpense.dependencies import get_quiz_service
from xpense.models.user import User
from xpense.schemas.quiz_schema import (
    LeaderboardEntry,
    QuizQuestionOut,
    QuizStatsOut,
    QuizSubmitIn,
    QuizSubmitOut,
)
from xpense.services.quiz import QuizService

router = APIRouter(prefix="/api/quiz", tags=["Quiz"])


@router.get("/random", response_model=List[QuizQuestionOut])
def random_questions(
    category: Optional[str] = None,
    count: int = Query(5, ge=1, le=50),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    quizzes: QuizService = Depends(get_quiz_service),
):
    return quizzes.random_questions(db, category, count)


@router.post("/submit", response_model=QuizSubmitOut)
def submit_answer(
    payload: QuizSubmitIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    quizzes: QuizService = Depends(get_quiz_service),
):
    result = quizzes.submit(db, user, payload.quiz_id, payload.answer)
    return QuizSubmitOut(
        is_correct=result.attempt.is_correct,
        correct_answer=result.correct_answer,
        points_earned=result.attempt.points_earned,
        message=result.message,
        daily_attempts_count=result.daily_attempts_count,
        daily_limit_reached=result.daily_limit_reached,
        tx_hash=result.transaction.tx_hash if result.transaction else None,
    )


@router.get("/stats", response_model=QuizStatsOut)
def quiz_stats(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    quizzes: QuizService = Depends(get_quiz_service),
):
    return quizzes.stats(db, user.id)


@router.get("/leaderboard", response_model=List[LeaderboardEntry])
def leaderboard(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    quizzes: QuizService = Depends(get_quiz_service),
):
    return quizzes.leaderboard(db)


@router.post("/seed", status_code=201)
def seed_questions(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    quizzes: QuizService = Depends(get_quiz_service),
):
    count = quizzes.seed(db)
    return {"message": "Quiz questions seeded successfully", "count": count}
