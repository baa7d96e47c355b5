import logging
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import case, desc, func
from sqlalchemy.orm import Session

from xpense.core.errors import AlreadyProcessed, NotFound, RewardError, WalletNotReady, WalletNotReadyReason
from xpense.models.quiz import Quiz, QuizAttempt
from xpense.models.transaction import Transaction
from xpense.models.user import User
from xpense.schemas.transaction_schema import QuizRef
from xpense.services.locks import UserLocks, user_locks
from xpense.services.rewards import RewardIssuer
from xpense.utils.seed_data import QUIZ_QUESTIONS

logger = logging.getLogger(__name__)

LEADERBOARD_SIZE = 10


def day_bounds(moment: datetime) -> tuple[datetime, datetime]:
    start = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


@dataclass
class QuizResult:
    attempt: QuizAttempt
    correct_answer: str
    daily_attempts_count: int
    daily_limit_reached: bool
    transaction: Optional[Transaction] = None

    @property
    def message(self) -> str:
        return "Correct answer!" if self.attempt.is_correct else "Incorrect answer"


class QuizService:
    def __init__(self, issuer: RewardIssuer, daily_cap: int = 10, locks: UserLocks = user_locks):
        self.issuer = issuer
        self.daily_cap = daily_cap
        self.locks = locks

    def random_questions(self, db: Session, category: Optional[str] = None, count: int = 5) -> list[Quiz]:
        query = db.query(Quiz)
        if category:
            query = query.filter(Quiz.category == category)
        questions = query.all()
        return random.sample(questions, min(max(count, 0), len(questions)))

    def correct_today(self, db: Session, user_id: int, now: datetime) -> int:
        start, end = day_bounds(now)
        return (
            db.query(func.count(QuizAttempt.id))
            .filter(
                QuizAttempt.user_id == user_id,
                QuizAttempt.is_correct.is_(True),
                QuizAttempt.date >= start,
                QuizAttempt.date < end,
            )
            .scalar()
        )

    def submit(self, db: Session, user: User, quiz_id: int, answer: str, now: Optional[datetime] = None) -> QuizResult:
        """Record an answer and pay its points when the user is under today's cap.

        The attempt is stored whether or not a reward follows. A correct answer
        that earns points needs a wallet; without one the call fails after the
        attempt has been saved with zero points.
        """
        now = now or datetime.utcnow()
        quiz = db.get(Quiz, quiz_id)
        if quiz is None:
            raise NotFound("Quiz not found")

        with self.locks.hold(user.id):
            is_correct = answer == quiz.correct_answer
            prior = self.correct_today(db, user.id, now)
            eligible = is_correct and prior < self.daily_cap and (quiz.points or 0) > 0

            attempt = QuizAttempt(
                user_id=user.id,
                quiz_id=quiz.id,
                is_correct=is_correct,
                points_earned=quiz.points if eligible else 0,
                category=quiz.category,
                date=now,
            )
            db.add(attempt)
            db.commit()
            db.refresh(attempt)

            transaction = None
            if eligible:
                try:
                    if not user.wallet_public_key:
                        raise WalletNotReady(WalletNotReadyReason.no_wallet)
                    transaction = self.issuer.issue(
                        db, user, quiz.points, "Quiz reward", activity=QuizRef(quiz_id=quiz.id)
                    ).unwrap()
                except RewardError:
                    self._void_points(db, attempt)
                    raise

        return QuizResult(
            attempt=attempt,
            correct_answer=quiz.correct_answer,
            daily_attempts_count=prior + (1 if is_correct else 0),
            daily_limit_reached=prior >= self.daily_cap,
            transaction=transaction,
        )

    def _void_points(self, db: Session, attempt: QuizAttempt) -> None:
        logger.warning("Quiz reward for attempt %s not paid; points cleared", attempt.id)
        attempt.points_earned = 0
        db.commit()

    def stats(self, db: Session, user_id: int) -> dict:
        total = db.query(func.count(QuizAttempt.id)).filter(QuizAttempt.user_id == user_id).scalar()
        correct = (
            db.query(func.count(QuizAttempt.id))
            .filter(QuizAttempt.user_id == user_id, QuizAttempt.is_correct.is_(True))
            .scalar()
        )
        points = (
            db.query(func.coalesce(func.sum(QuizAttempt.points_earned), 0))
            .filter(QuizAttempt.user_id == user_id)
            .scalar()
        )

        correct_col = func.sum(case((QuizAttempt.is_correct.is_(True), 1), else_=0))
        rows = (
            db.query(QuizAttempt.category, func.count(QuizAttempt.id), correct_col)
            .filter(QuizAttempt.user_id == user_id)
            .group_by(QuizAttempt.category)
            .all()
        )
        breakdown = [
            {
                "category": category,
                "count": count,
                "correct": int(hits or 0),
                "accuracy": (int(hits or 0) / count) if count else 0,
            }
            for category, count, hits in rows
        ]
        return {
            "total_attempts": total,
            "correct_attempts": correct,
            "accuracy": (correct / total * 100) if total else 0,
            "total_points": int(points),
            "category_breakdown": breakdown,
        }

    def leaderboard(self, db: Session, size: int = LEADERBOARD_SIZE) -> list[dict]:
        total_points = func.sum(QuizAttempt.points_earned).label("total_points")
        rows = (
            db.query(User.id, User.name, total_points, func.count(QuizAttempt.id))
            .join(QuizAttempt, QuizAttempt.user_id == User.id)
            .filter(QuizAttempt.is_correct.is_(True))
            .group_by(User.id, User.name)
            .order_by(desc(total_points))
            .limit(size)
            .all()
        )
        return [
            {"user_id": uid, "name": name, "total_points": int(points or 0), "correct_answers": answers}
            for uid, name, points, answers in rows
        ]

    def seed(self, db: Session) -> int:
        if db.query(Quiz.id).first() is not None:
            raise AlreadyProcessed("Quiz questions already exist in the database")
        db.add_all(Quiz(**question) for question in QUIZ_QUESTIONS)
        db.commit()
        logger.info("Seeded %d quiz questions", len(QUIZ_QUESTIONS))
        return len(QUIZ_QUESTIONS)
