from datetime import date
from typing import List, Optional

from pydantic import BaseModel


class ToggleSavingIn(BaseModel):
    did_save_today: bool
    note: Optional[str] = None


class Quote(BaseModel):
    text: str
    author: str
    category: str


class DailySavingOut(BaseModel):
    id: Optional[int] = None
    day: Optional[date] = None
    did_save_today: bool = False
    note: Optional[str] = None
    tokens_rewarded: float = 0
    is_rewarded: bool = False

    model_config = {"from_attributes": True}


class DailySavingStatus(BaseModel):
    daily_saving: DailySavingOut
    streak: int
    quote: Quote
    tx_hash: Optional[str] = None


class SavingHistoryOut(BaseModel):
    streak: int
    entries: List[DailySavingOut]
