from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, Float, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import validates

from xpense.database import Base


class DailySaving(Base):
    __tablename__ = "daily_savings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    day = Column(Date, nullable=False)
    did_save_today = Column(Boolean, default=False, nullable=False)
    note = Column(Text, nullable=True)
    tokens_rewarded = Column(Float, default=0, nullable=False)
    is_rewarded = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (UniqueConstraint("user_id", "day", name="_user_day_uc"),)

    @validates("is_rewarded")
    def _rewarded_once(self, key, value):
        if getattr(self, key) and not value:
            raise ValueError("is_rewarded cannot be reset once set")
        return value
