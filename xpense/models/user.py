# models/user.py
from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String
from sqlalchemy.orm import deferred, validates

from xpense.database import Base


class WalletState(str, Enum):
    NONE = "none"
    KEYS_GENERATED = "keys_generated"
    FUNDED = "funded"
    TRUSTLINE_READY = "trustline_ready"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Stellar wallet
    wallet_public_key = Column(String, unique=True, nullable=True)
    wallet_secret_key = deferred(Column(String, nullable=True))  # never selected unless asked for
    wallet_funded = Column(Boolean, default=False, nullable=False)
    wallet_has_trustline = Column(Boolean, default=False, nullable=False)
    tokens = Column(Float, default=0, nullable=False)  # cache of confirmed transfers

    @validates("wallet_secret_key", "wallet_public_key")
    def _keys_are_write_once(self, key, value):
        current = getattr(self, key)
        if current and value != current:
            raise ValueError(f"{key} is permanent once generated")
        return value

    @validates("wallet_funded", "wallet_has_trustline")
    def _flags_are_monotone(self, key, value):
        if getattr(self, key) and not value:
            raise ValueError(f"{key} cannot be reset once set")
        return value

    @property
    def wallet_state(self) -> WalletState:
        if not self.wallet_public_key:
            return WalletState.NONE
        if self.wallet_has_trustline:
            return WalletState.TRUSTLINE_READY
        if self.wallet_funded:
            return WalletState.FUNDED
        return WalletState.KEYS_GENERATED

    @property
    def wallet_ready(self) -> bool:
        return bool(self.wallet_public_key) and bool(self.wallet_has_trustline)
