from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text

from xpense.database import Base


class Quiz(Base):
    __tablename__ = "quizzes"

    id = Column(Integer, primary_key=True, index=True)
    question = Column(Text, nullable=False)
    category = Column(String, nullable=False, index=True)
    options = Column(JSON, nullable=False, default=list)
    correct_answer = Column(String, nullable=False)
    difficulty = Column(String, default="medium")     # easy, medium, hard
    points = Column(Integer, default=10)


class QuizAttempt(Base):
    __tablename__ = "quiz_attempts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    quiz_id = Column(Integer, ForeignKey("quizzes.id", ondelete="SET NULL"), nullable=True)
    is_correct = Column(Boolean, nullable=False)
    points_earned = Column(Integer, default=0, nullable=False)
    category = Column(String, nullable=True)
    date = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("idx_quiz_attempts_user_date", "user_id", "date"),
    )
