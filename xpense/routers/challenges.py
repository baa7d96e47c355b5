from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from xpense.auth.token import get_current_user
from xpense.database import get_db
from xpense.dependencies import get_challenge_service
from xpense.models.user import User
from xpense.schemas.challenge_schema import ChallengeCompleteOut, ChallengeCreate, ChallengeOut
from xpense.services.challenges import ChallengeService

router = APIRouter(prefix="/api/challenges", tags=["Challenges"])


@router.post("/", response_model=ChallengeOut, status_code=201)
def create_challenge(
    payload: ChallengeCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    challenges: ChallengeService = Depends(get_challenge_service),
):
    return challenges.create(db, user, payload)


@router.get("/", response_model=List[ChallengeOut])
def list_challenges(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    challenges: ChallengeService = Depends(get_challenge_service),
):
    return challenges.list_for_user(db, user)


@router.get("/{challenge_id}", response_model=ChallengeOut)
def get_challenge(
    challenge_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    challenges: ChallengeService = Depends(get_challenge_service),
):
    return challenges.get(db, user, challenge_id)


@router.post("/{challenge_id}/complete", response_model=ChallengeCompleteOut)
def complete_challenge(
    challenge_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    challenges: ChallengeService = Depends(get_challenge_service),
):
    result = challenges.complete(db, user, challenge_id)
    tx = result.transaction
    return ChallengeCompleteOut(
        message="Challenge completed",
        challenge=ChallengeOut.model_validate(result.challenge),
        tokens_rewarded=tx.amount if tx else 0,
        tx_hash=tx.tx_hash if tx else None,
    )
