from datetime import datetime
from typing import Optional

from sqlalchemy import desc
from sqlalchemy.orm import Session

from xpense.models.transaction import Transaction
from xpense.schemas.transaction_schema import activity_to_columns


class TransactionLedger:
    """Write-once log of confirmed transfers. There is no update or delete."""

    def __init__(self, page_size: int = 50):
        self.page_size = page_size

    def append(
        self,
        db: Session,
        user_id: int,
        amount: float,
        tx_hash: str,
        reason: str = "",
        activity=None,
        date: Optional[datetime] = None,
    ) -> Transaction:
        activity_type, activity_id = activity_to_columns(activity)
        record = Transaction(
            user_id=user_id,
            amount=amount,
            tx_hash=tx_hash,
            reason=reason,
            activity_type=activity_type,
            activity_id=activity_id,
            date=date or datetime.utcnow(),
        )
        db.add(record)
        return record

    def list_by_user(self, db: Session, user_id: int, limit: Optional[int] = None, offset: int = 0) -> list[Transaction]:
        limit = min(limit or self.page_size, self.page_size)
        return (
            db.query(Transaction)
            .filter(Transaction.user_id == user_id)
            .order_by(desc(Transaction.date), desc(Transaction.id))
            .offset(max(offset, 0))
            .limit(limit)
            .all()
        )
