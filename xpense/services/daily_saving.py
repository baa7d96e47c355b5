import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from sqlalchemy import desc
from sqlalchemy.orm import Session

from xpense.models.daily_saving import DailySaving
from xpense.models.transaction import Transaction
from xpense.models.user import User
from xpense.schemas.transaction_schema import DailySavingRef
from xpense.services.locks import UserLocks, user_locks
from xpense.services.rewards import RewardIssuer

logger = logging.getLogger(__name__)

HISTORY_DAYS = 30


def compute_streak(entries: Iterable[DailySaving], today: date) -> int:
    """Consecutive saved days counted back from today.

    The walk starts at yesterday while today has no entry yet. A missing
    day or a day marked not-saved ends it.
    """
    by_day = {entry.day: entry for entry in entries}
    expected = today if today in by_day else today - timedelta(days=1)

    streak = 0
    while expected in by_day and by_day[expected].did_save_today:
        streak += 1
        expected -= timedelta(days=1)
    return streak


@dataclass
class ToggleResult:
    entry: DailySaving
    streak: int
    transaction: Optional[Transaction] = None


class DailySavingService:
    def __init__(
        self,
        issuer: RewardIssuer,
        base_reward: int = 10,
        streak_bonus: int = 5,
        locks: UserLocks = user_locks,
    ):
        self.issuer = issuer
        self.base_reward = base_reward
        self.streak_bonus = streak_bonus
        self.locks = locks

    def entry_for(self, db: Session, user_id: int, day: date) -> Optional[DailySaving]:
        return db.query(DailySaving).filter_by(user_id=user_id, day=day).first()

    def reward_amount(self, db: Session, user_id: int, day: date) -> int:
        yesterday = self.entry_for(db, user_id, day - timedelta(days=1))
        if yesterday is not None and yesterday.did_save_today:
            return self.base_reward + self.streak_bonus
        return self.base_reward

    def toggle(
        self,
        db: Session,
        user: User,
        did_save_today: bool,
        note: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ToggleResult:
        today = (now or datetime.utcnow()).date()

        with self.locks.hold(user.id):
            entry = self.entry_for(db, user.id, today)
            if entry is None:
                entry = DailySaving(user_id=user.id, day=today, did_save_today=did_save_today, note=note)
                db.add(entry)
                db.flush()
            else:
                entry.did_save_today = did_save_today
                if note:
                    entry.note = note

            transaction = None
            if did_save_today and not entry.is_rewarded and user.wallet_ready:
                amount = self.reward_amount(db, user.id, today)
                outcome = self.issuer.issue(
                    db, user, amount, "Daily saving", activity=DailySavingRef(daily_saving_id=entry.id)
                )
                if outcome.ok:
                    entry.tokens_rewarded = amount
                    entry.is_rewarded = True
                    transaction = outcome.transaction
                else:
                    logger.warning("Daily saving reward for user %s skipped: %s", user.id, outcome.error.message)

            db.commit()
            db.refresh(entry)

        return ToggleResult(entry=entry, streak=self.streak(db, user.id, now=now), transaction=transaction)

    def streak(self, db: Session, user_id: int, now: Optional[datetime] = None) -> int:
        today = (now or datetime.utcnow()).date()
        entries = (
            db.query(DailySaving)
            .filter(DailySaving.user_id == user_id, DailySaving.day <= today)
            .order_by(desc(DailySaving.day))
            .all()
        )
        return compute_streak(entries, today)

    def history(self, db: Session, user_id: int, limit: int = HISTORY_DAYS) -> list[DailySaving]:
        return (
            db.query(DailySaving)
            .filter_by(user_id=user_id)
            .order_by(desc(DailySaving.day))
            .limit(limit)
            .all()
        )
