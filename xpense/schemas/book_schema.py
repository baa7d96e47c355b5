from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class BookOut(BaseModel):
    id: int
    title: str
    author: str
    description: str
    cover_image: Optional[str] = None
    price: float
    category: str
    is_active: bool

    model_config = {"from_attributes": True}


class UserBookOut(BaseModel):
    id: int
    book_id: int
    tokens_paid: float
    purchase_date: datetime
    book: Optional[BookOut] = None

    model_config = {"from_attributes": True}


class PurchaseOut(BaseModel):
    message: str
    book: UserBookOut
    tx_hash: str
