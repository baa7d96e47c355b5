import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from stellar_sdk import Keypair

from xpense.core.config import LedgerConfig
from xpense.core.errors import (
    InvalidRewardRequest,
    LedgerErrorCode,
    LedgerRejected,
    RewardError,
    WalletNotReady,
    WalletNotReadyReason,
)
from xpense.models.transaction import Transaction
from xpense.models.user import User
from xpense.services.stellar_client import AccountNotFound, LedgerError
from xpense.services.transactions import TransactionLedger

logger = logging.getLogger(__name__)

STROOP = Decimal("0.0000001")  # smallest amount the ledger represents


@dataclass
class RewardOutcome:
    transaction: Optional[Transaction] = None
    error: Optional[RewardError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Transaction:
        if self.error is not None:
            raise self.error
        return self.transaction


def parse_amount(amount) -> Decimal:
    if amount is None or isinstance(amount, bool):
        raise InvalidRewardRequest("Invalid amount")
    try:
        value = Decimal(str(amount).strip())
        if not value.is_finite():
            raise InvalidRewardRequest("Invalid amount")
        value = value.quantize(STROOP)
    except (InvalidOperation, ValueError):
        raise InvalidRewardRequest("Invalid amount")
    if value <= 0:
        raise InvalidRewardRequest("Invalid amount")
    return value


def format_amount(value: Decimal) -> str:
    return format(value.normalize(), "f")


class RewardIssuer:
    """Every token reward and purchase debit goes through here.

    One ledger submission per call and no retries. A Transaction row is
    written only after the ledger accepts the payment.
    """

    def __init__(self, ledger, config: LedgerConfig, transactions: TransactionLedger):
        self.ledger = ledger
        self.config = config
        self.transactions = transactions

    def issue(
        self,
        db: Session,
        user: User,
        amount,
        reason: str,
        activity=None,
        recipient: Optional[str] = None,
    ) -> RewardOutcome:
        """Pay `amount` of the reward asset from the distributor to the user (or `recipient`)."""
        try:
            value = parse_amount(amount)
            destination = recipient or user.wallet_public_key
            if not destination:
                raise InvalidRewardRequest("No recipient wallet address provided")

            self._ensure_distributor_trustline()
            self._check_destination(destination)
            tx_hash = self._pay(self.config.distributor, destination, value)
        except RewardError as exc:
            logger.warning("Reward of %s for user %s not issued (%s): %s", amount, user.id, reason, exc.message)
            return RewardOutcome(error=exc)

        credit = value if destination == user.wallet_public_key else Decimal(0)
        record = self._record(db, user, value, credit, tx_hash, reason, activity)
        return RewardOutcome(transaction=record)

    def charge(self, db: Session, user: User, amount, reason: str, activity=None) -> RewardOutcome:
        """Move `amount` from the user's wallet to the distribution wallet; recorded as a negative amount."""
        try:
            value = parse_amount(amount)
            if not user.wallet_public_key:
                raise WalletNotReady(WalletNotReadyReason.no_wallet)
            if not user.wallet_has_trustline:
                raise WalletNotReady(
                    WalletNotReadyReason.no_trustline, "Please set up your wallet first"
                )

            destination = self.config.distribution_wallet
            if destination == self.config.distributor_public_key:
                self._ensure_distributor_trustline()
            elif destination != self.config.issuer_public_key:
                self._check_destination(destination)

            source = Keypair.from_secret(user.wallet_secret_key)
            tx_hash = self._pay(source, destination, value)
        except RewardError as exc:
            logger.warning("Charge of %s for user %s not processed (%s): %s", amount, user.id, reason, exc.message)
            return RewardOutcome(error=exc)

        record = self._record(db, user, -value, -value, tx_hash, reason, activity)
        return RewardOutcome(transaction=record)

    def _ensure_distributor_trustline(self) -> None:
        distributor = self.config.distributor
        try:
            state = self.ledger.load_account(distributor.public_key)
            if state.trusts(self.config.asset):
                return
            self.ledger.establish_trustline(distributor, self.config.asset, self.config.trustline_limit)
        except AccountNotFound:
            raise LedgerRejected(LedgerErrorCode.other, "Distributor account does not exist")
        except LedgerError as exc:
            raise LedgerRejected(exc.code, exc.detail)
        logger.info("Established %s trustline on distributor account", self.config.asset.code)

    def _check_destination(self, destination: str) -> None:
        try:
            state = self.ledger.load_account(destination)
        except AccountNotFound:
            raise WalletNotReady(WalletNotReadyReason.account_missing)
        except LedgerError as exc:
            raise LedgerRejected(exc.code, exc.detail)
        if not state.trusts(self.config.asset):
            raise WalletNotReady(WalletNotReadyReason.no_trustline)

    def _pay(self, source: Keypair, destination: str, value: Decimal) -> str:
        try:
            return self.ledger.submit_payment(source, destination, self.config.asset, format_amount(value))
        except LedgerError as exc:
            raise LedgerRejected(exc.code, exc.detail)

    def _record(
        self,
        db: Session,
        user: User,
        signed_amount: Decimal,
        balance_change: Decimal,
        tx_hash: str,
        reason: str,
        activity,
    ) -> Transaction:
        logger.info("Ledger accepted %s %s for user %s (%s): %s",
                    signed_amount, self.config.asset.code, user.id, reason, tx_hash)
        record = self.transactions.append(db, user.id, float(signed_amount), tx_hash, reason, activity)
        user.tokens = float(Decimal(str(user.tokens or 0)) + balance_change)
        try:
            db.commit()
        except SQLAlchemyError:
            # No compensation path: the payment exists on the ledger without a local record.
            logger.exception("Orphaned ledger payment %s for user %s: record write failed", tx_hash, user.id)
            db.rollback()
            raise
        db.refresh(record)
        return record
