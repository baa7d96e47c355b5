from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta
from threading import Barrier

import pytest

from xpense.core.errors import AlreadyProcessed, LedgerErrorCode, LedgerRejected, NotFound, WalletNotReady
from xpense.models.quiz import Quiz, QuizAttempt
from xpense.models.user import User
from xpense.services.locks import UserLocks
from xpense.services.quiz import QuizService, day_bounds

NOW = datetime(2024, 5, 2, 15, 0)


@pytest.fixture
def quizzes(issuer):
    return QuizService(issuer, daily_cap=10)


@pytest.fixture
def question(db):
    return _apr_question(db)


def _apr_question(db):
    quiz = Quiz(
        question="What does APR stand for?",
        category="Finance Basics",
        options=["Annual Percentage Rate", "Asset Protection Reserve"],
        correct_answer="Annual Percentage Rate",
        difficulty="easy",
        points=5,
    )
    db.add(quiz)
    db.commit()
    return quiz


def _past_attempts(db, user, quiz, n, correct=True, when=NOW - timedelta(hours=1)):
    for _ in range(n):
        db.add(QuizAttempt(user_id=user.id, quiz_id=quiz.id, is_correct=correct,
                           points_earned=quiz.points if correct else 0, category=quiz.category, date=when))
    db.commit()


def test_day_bounds():
    start, end = day_bounds(NOW)
    assert start == datetime(2024, 5, 2)
    assert end == datetime(2024, 5, 3)


def test_correct_answer_earns_points(db, quizzes, question, ledger, make_user):
    user = make_user()

    result = quizzes.submit(db, user, question.id, "Annual Percentage Rate", now=NOW)

    assert result.attempt.is_correct
    assert result.attempt.points_earned == 5
    assert result.message == "Correct answer!"
    assert result.daily_attempts_count == 1
    assert not result.daily_limit_reached
    assert result.transaction.activity_type == "quiz"
    assert len(ledger.payments) == 1


def test_wrong_answer_is_recorded_without_reward(db, quizzes, question, ledger, make_user):
    user = make_user()

    result = quizzes.submit(db, user, question.id, "Asset Protection Reserve", now=NOW)

    assert not result.attempt.is_correct
    assert result.attempt.points_earned == 0
    assert result.correct_answer == "Annual Percentage Rate"
    assert result.daily_attempts_count == 0
    assert ledger.payments == []


def test_eleventh_correct_answer_is_capped(db, quizzes, question, ledger, make_user):
    user = make_user()
    _past_attempts(db, user, question, 10)

    result = quizzes.submit(db, user, question.id, "Annual Percentage Rate", now=NOW)

    assert result.attempt.is_correct
    assert result.attempt.points_earned == 0
    assert result.daily_limit_reached
    assert result.daily_attempts_count == 11
    assert ledger.payments == []
    assert db.query(QuizAttempt).count() == 11


def test_wrong_answers_do_not_count_towards_cap(db, quizzes, question, make_user):
    user = make_user()
    _past_attempts(db, user, question, 9)
    _past_attempts(db, user, question, 20, correct=False)

    result = quizzes.submit(db, user, question.id, "Annual Percentage Rate", now=NOW)

    assert result.attempt.points_earned == 5
    assert not result.daily_limit_reached


def test_cap_resets_at_midnight(db, quizzes, question, make_user):
    user = make_user()
    _past_attempts(db, user, question, 10, when=NOW - timedelta(days=1))

    result = quizzes.submit(db, user, question.id, "Annual Percentage Rate", now=NOW)

    assert result.attempt.points_earned == 5


def test_correct_answer_without_wallet_fails(db, quizzes, question, make_user):
    user = make_user(ready=False)

    with pytest.raises(WalletNotReady):
        quizzes.submit(db, user, question.id, "Annual Percentage Rate", now=NOW)

    attempt = db.query(QuizAttempt).one()
    assert attempt.is_correct
    assert attempt.points_earned == 0


def test_ledger_failure_clears_points(db, quizzes, question, ledger, make_user):
    user = make_user()
    ledger.payment_error = LedgerErrorCode.timeout

    with pytest.raises(LedgerRejected):
        quizzes.submit(db, user, question.id, "Annual Percentage Rate", now=NOW)

    assert db.query(QuizAttempt).one().points_earned == 0


def test_unknown_quiz(db, quizzes, make_user):
    with pytest.raises(NotFound):
        quizzes.submit(db, make_user(), 999, "x", now=NOW)


def test_stats_and_leaderboard(db, quizzes, question, make_user):
    alice = make_user(name="Alice")
    bob = make_user(name="Bob")
    quizzes.submit(db, alice, question.id, "Annual Percentage Rate", now=NOW)
    quizzes.submit(db, alice, question.id, "Annual Percentage Rate", now=NOW)
    quizzes.submit(db, alice, question.id, "nope", now=NOW)
    quizzes.submit(db, bob, question.id, "Annual Percentage Rate", now=NOW)

    stats = quizzes.stats(db, alice.id)
    assert stats["total_attempts"] == 3
    assert stats["correct_attempts"] == 2
    assert stats["total_points"] == 10
    assert stats["category_breakdown"] == [
        {"category": "Finance Basics", "count": 3, "correct": 2, "accuracy": pytest.approx(2 / 3)}
    ]

    board = quizzes.leaderboard(db)
    assert [(row["name"], row["total_points"], row["correct_answers"]) for row in board] == [
        ("Alice", 10, 2),
        ("Bob", 5, 1),
    ]


def test_seed_only_fills_empty_table(db, quizzes):
    assert quizzes.seed(db) == 15
    with pytest.raises(AlreadyProcessed):
        quizzes.seed(db)


def test_random_questions_filters_category(db, quizzes):
    quizzes.seed(db)

    picked = quizzes.random_questions(db, "Economics", 5)

    assert len(picked) == 2
    assert {q.category for q in picked} == {"Economics"}


def test_concurrent_answers_respect_cap(file_session_factory, issuer, ledger, make_user):
    setup = file_session_factory()
    user = make_user(session=setup)
    quiz = _apr_question(setup)
    _past_attempts(setup, user, quiz, 9)
    user_id, quiz_id = user.id, quiz.id
    setup.close()

    quizzes = QuizService(issuer, daily_cap=10, locks=UserLocks())
    start = Barrier(2)

    def answer():
        session = file_session_factory()
        try:
            player = session.get(User, user_id)
            start.wait()
            return quizzes.submit(session, player, quiz_id, "Annual Percentage Rate", now=NOW).attempt.points_earned
        finally:
            session.close()

    with ThreadPoolExecutor(max_workers=2) as pool:
        earned = [f.result() for f in [pool.submit(answer), pool.submit(answer)]]

    check = file_session_factory()
    assert sorted(earned) == [0, 5]
    assert len(ledger.payments) == 1
    assert check.query(QuizAttempt).filter(QuizAttempt.points_earned > 0).count() == 10
    check.close()
