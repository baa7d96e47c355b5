from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field


# === Originating activity (tagged union) ===

class ChallengeRef(BaseModel):
    kind: Literal["challenge"] = "challenge"
    challenge_id: int


class QuizRef(BaseModel):
    kind: Literal["quiz"] = "quiz"
    quiz_id: int


class DailySavingRef(BaseModel):
    kind: Literal["daily_saving"] = "daily_saving"
    daily_saving_id: int


class PurchaseRef(BaseModel):
    kind: Literal["purchase"] = "purchase"
    book_id: int


class CommunityPostRef(BaseModel):
    kind: Literal["community_post"] = "community_post"
    post_id: int


ActivityRef = Annotated[
    Union[ChallengeRef, QuizRef, DailySavingRef, PurchaseRef, CommunityPostRef],
    Field(discriminator="kind"),
]

_REF_TYPES = {
    "challenge": (ChallengeRef, "challenge_id"),
    "quiz": (QuizRef, "quiz_id"),
    "daily_saving": (DailySavingRef, "daily_saving_id"),
    "purchase": (PurchaseRef, "book_id"),
    "community_post": (CommunityPostRef, "post_id"),
}


def activity_to_columns(ref) -> tuple[Optional[str], Optional[int]]:
    if ref is None:
        return None, None
    _, field = _REF_TYPES[ref.kind]
    return ref.kind, getattr(ref, field)


def activity_from_columns(kind: Optional[str], activity_id: Optional[int]):
    if kind is None or activity_id is None:
        return None
    model, field = _REF_TYPES[kind]
    return model(**{field: activity_id})


# === Transaction history ===

class TransactionOut(BaseModel):
    id: int
    type: str
    amount: float
    description: str
    date: datetime
    tx_hash: str
    activity: Optional[ActivityRef] = None

    @classmethod
    def from_record(cls, record) -> "TransactionOut":
        return cls(
            id=record.id,
            type="Purchase" if record.amount < 0 else "Reward",
            amount=record.amount,
            description=record.reason or "Token transfer",
            date=record.date,
            tx_hash=record.tx_hash,
            activity=activity_from_columns(record.activity_type, record.activity_id),
        )


class RewardRequest(BaseModel):
    amount: Union[float, str, None] = None
    challenge_id: Optional[int] = None
    recipient_wallet: Optional[str] = None


class RewardResponse(BaseModel):
    message: str
    amount: float
    tx_hash: str
