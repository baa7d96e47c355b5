import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from xpense.core.errors import AlreadyProcessed, InvalidRequest, NotFound
from xpense.models.challenge import Challenge
from xpense.models.transaction import Transaction
from xpense.models.user import User
from xpense.schemas.challenge_schema import ChallengeCreate
from xpense.schemas.transaction_schema import ChallengeRef
from xpense.services.locks import UserLocks, user_locks
from xpense.services.rewards import RewardIssuer

logger = logging.getLogger(__name__)


@dataclass
class ChallengeCompletion:
    challenge: Challenge
    transaction: Optional[Transaction] = None


class ChallengeService:
    def __init__(self, issuer: RewardIssuer, default_reward: int = 10, locks: UserLocks = user_locks):
        self.issuer = issuer
        self.default_reward = default_reward
        self.locks = locks

    def create(self, db: Session, user: User, payload: ChallengeCreate) -> Challenge:
        if not payload.title.strip():
            raise InvalidRequest("Title cannot be empty")
        if payload.end_date < payload.start_date:
            raise InvalidRequest("End date must be after start date")

        challenge = Challenge(
            user_id=user.id,
            title=payload.title.strip(),
            description=payload.description,
            type=payload.type.value,
            start_date=payload.start_date,
            end_date=payload.end_date,
            target_amount=payload.target_amount,
            reward=payload.reward or self.default_reward,
        )
        db.add(challenge)
        db.commit()
        db.refresh(challenge)
        return challenge

    def list_for_user(self, db: Session, user: User) -> list[Challenge]:
        return db.query(Challenge).filter(Challenge.user_id == user.id).order_by(Challenge.id).all()

    def get(self, db: Session, user: User, challenge_id: int) -> Challenge:
        challenge = db.query(Challenge).filter_by(id=challenge_id, user_id=user.id).first()
        if not challenge:
            raise NotFound("Challenge not found")
        return challenge

    def complete(self, db: Session, user: User, challenge_id: int, now: Optional[datetime] = None) -> ChallengeCompletion:
        """Mark a challenge complete and pay its reward.

        The completed flag is only written once the reward is confirmed, so a
        rejected payment leaves the challenge open for another attempt. Users
        without a ready wallet complete the challenge without a reward.
        """
        with self.locks.hold(user.id):
            challenge = self.get(db, user, challenge_id)
            if challenge.completed:
                raise AlreadyProcessed("Challenge already completed")

            transaction = None
            if user.wallet_ready:
                transaction = self.issuer.issue(
                    db,
                    user,
                    challenge.reward or self.default_reward,
                    f"Challenge completed: {challenge.title}",
                    activity=ChallengeRef(challenge_id=challenge.id),
                ).unwrap()
            else:
                logger.info("User %s has no ready wallet; challenge %s completes unrewarded", user.id, challenge.id)

            challenge.completed = True
            challenge.completed_at = now or datetime.utcnow()
            db.commit()
            db.refresh(challenge)
            return ChallengeCompletion(challenge=challenge, transaction=transaction)
