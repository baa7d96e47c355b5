from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, Integer, String, event

from xpense.database import Base


class Transaction(Base):
    """Confirmed transfer of the reward asset. Rows are written once and never changed."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    amount = Column(Float, nullable=False)                  # negative for purchases
    tx_hash = Column(String, nullable=False, unique=True)   # ledger transaction reference
    reason = Column(String, nullable=False, default="")
    date = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Originating activity: challenge, quiz, daily_saving, purchase, community_post
    activity_type = Column(String(32), nullable=True)
    activity_id = Column(Integer, nullable=True)

    __table_args__ = (
        Index("idx_transactions_user_date", "user_id", "date"),
    )


@event.listens_for(Transaction, "before_update")
def _reject_update(mapper, connection, target):
    raise ValueError("Transaction records are append-only")
