# schemas/user_schema.py
from pydantic import BaseModel, Field
from typing import List, Optional


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)


class WalletStatusOut(BaseModel):
    wallet_public_key: Optional[str] = None
    wallet_state: str
    wallet_funded: bool
    wallet_has_trustline: bool
    warnings: List[str] = []

    @classmethod
    def from_status(cls, status) -> "WalletStatusOut":
        return cls(
            wallet_public_key=status.public_key,
            wallet_state=status.state.value,
            wallet_funded=status.funded,
            wallet_has_trustline=status.trustline_ready,
            warnings=status.warnings,
        )


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    tokens: float
    wallet_public_key: Optional[str] = None
    wallet_funded: bool
    wallet_has_trustline: bool

    class Config:
        from_attributes = True


class SessionResponse(BaseModel):
    message: str
    access_token: str
    user: UserResponse
    wallet: WalletStatusOut


class BalanceOut(BaseModel):
    wallet_public_key: Optional[str] = None
    asset_code: str
    ledger_balance: Optional[str] = None
    cached_tokens: float
