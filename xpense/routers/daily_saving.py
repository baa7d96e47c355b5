from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from xpense.auth.token import get_current_user
from xpense.database import get_db
from xpense.dependencies import get_daily_saving_service
from xpense.models.user import User
from xpense.schemas.daily_saving_schema import (
    DailySavingOut,
    DailySavingStatus,
    Quote,
    SavingHistoryOut,
    ToggleSavingIn,
)
from xpense.services.daily_saving import DailySavingService
from xpense.utils.quotes import FINANCIAL_QUOTES, random_quote

router = APIRouter(prefix="/api/daily-saving", tags=["Daily Saving"])


@router.post("/toggle", response_model=DailySavingStatus)
def toggle_saving(
    payload: ToggleSavingIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    savings: DailySavingService = Depends(get_daily_saving_service),
):
    result = savings.toggle(db, user, payload.did_save_today, payload.note)
    return DailySavingStatus(
        daily_saving=DailySavingOut.model_validate(result.entry),
        streak=result.streak,
        quote=Quote(**random_quote()),
        tx_hash=result.transaction.tx_hash if result.transaction else None,
    )


@router.get("/today", response_model=DailySavingStatus)
def get_today(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    savings: DailySavingService = Depends(get_daily_saving_service),
):
    today = datetime.utcnow().date()
    entry = savings.entry_for(db, user.id, today)
    return DailySavingStatus(
        daily_saving=DailySavingOut.model_validate(entry) if entry else DailySavingOut(day=today),
        streak=savings.streak(db, user.id),
        quote=Quote(**random_quote()),
    )


@router.get("/history", response_model=SavingHistoryOut)
def get_history(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    savings: DailySavingService = Depends(get_daily_saving_service),
):
    entries = savings.history(db, user.id)
    return SavingHistoryOut(
        streak=savings.streak(db, user.id),
        entries=[DailySavingOut.model_validate(entry) for entry in entries],
    )


@router.get("/quotes", response_model=List[Quote])
def list_quotes():
    return FINANCIAL_QUOTES


@router.get("/quotes/random", response_model=Quote)
def get_random_quote():
    return random_quote()
