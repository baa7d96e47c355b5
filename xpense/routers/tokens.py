from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from xpense.auth.token import get_current_user
from xpense.core.config import LedgerConfig
from xpense.core.errors import DependencyUnavailable
from xpense.database import get_db
from xpense.dependencies import (
    get_ledger_client,
    get_ledger_config,
    get_reward_issuer,
    get_transaction_ledger,
    get_wallet_manager,
)
from xpense.models.user import User
from xpense.schemas.transaction_schema import ChallengeRef, RewardRequest, RewardResponse, TransactionOut
from xpense.schemas.user_schema import BalanceOut, WalletStatusOut
from xpense.services.rewards import RewardIssuer
from xpense.services.stellar_client import AccountNotFound, LedgerError
from xpense.services.transactions import TransactionLedger
from xpense.services.wallet import WalletManager


router = APIRouter(prefix="/api/tokens", tags=["Tokens"])


@router.post("/setup-wallet", response_model=WalletStatusOut)
def setup_wallet(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    wallets: WalletManager = Depends(get_wallet_manager),
):
    return WalletStatusOut.from_status(wallets.ensure_wallet(db, user))


@router.get("/wallet", response_model=WalletStatusOut)
def get_wallet(user: User = Depends(get_current_user)):
    return WalletStatusOut.from_status(WalletManager.status(user))


@router.get("/balance", response_model=BalanceOut)
def get_balance(
    user: User = Depends(get_current_user),
    ledger=Depends(get_ledger_client),
    config: LedgerConfig = Depends(get_ledger_config),
):
    ledger_balance: Optional[str] = None
    if user.wallet_public_key:
        try:
            ledger_balance = ledger.load_account(user.wallet_public_key).balance_of(config.asset)
        except AccountNotFound:
            ledger_balance = None
        except LedgerError as exc:
            raise DependencyUnavailable("ledger", f"Could not load wallet balance: {exc}")

    return BalanceOut(
        wallet_public_key=user.wallet_public_key,
        asset_code=config.asset.code,
        ledger_balance=ledger_balance,
        cached_tokens=user.tokens or 0,
    )


@router.get("/transactions", response_model=List[TransactionOut])
def get_transactions(
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    transactions: TransactionLedger = Depends(get_transaction_ledger),
):
    records = transactions.list_by_user(db, user.id, limit=limit, offset=offset)
    return [TransactionOut.from_record(record) for record in records]


@router.post("/reward", response_model=RewardResponse)
def reward_tokens(
    payload: RewardRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    issuer: RewardIssuer = Depends(get_reward_issuer),
):
    activity = ChallengeRef(challenge_id=payload.challenge_id) if payload.challenge_id else None
    record = issuer.issue(
        db,
        user,
        payload.amount,
        "Token reward",
        activity=activity,
        recipient=payload.recipient_wallet,
    ).unwrap()
    return RewardResponse(message="Tokens rewarded successfully", amount=record.amount, tx_hash=record.tx_hash)
