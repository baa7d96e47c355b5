import logging
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.orm import Session
from stellar_sdk import Keypair

from xpense.core.config import LedgerConfig
from xpense.core.errors import DependencyUnavailable
from xpense.models.user import User, WalletState
from xpense.services.stellar_client import AccountNotFound, LedgerError

logger = logging.getLogger(__name__)


@dataclass
class WalletStatus:
    public_key: Optional[str]
    funded: bool
    trustline_ready: bool
    state: WalletState
    warnings: list[str] = field(default_factory=list)


def create_keypair() -> tuple[str, str]:
    keypair = Keypair.random()
    return keypair.public_key, keypair.secret


class WalletManager:
    """Moves a wallet NONE -> KEYS_GENERATED -> FUNDED -> TRUSTLINE_READY.

    Each call advances as far as the ledger currently allows and never goes
    back. Step failures become warnings on the returned status; the caller's
    own operation (signup, login) is not failed by them.
    """

    def __init__(self, ledger, config: LedgerConfig):
        self.ledger = ledger
        self.config = config

    def ensure_wallet(self, db: Session, user: User) -> WalletStatus:
        warnings: list[str] = []

        if not user.wallet_public_key:
            public_key, secret_key = create_keypair()
            user.wallet_public_key = public_key
            user.wallet_secret_key = secret_key
            db.commit()
            logger.info("Generated wallet keys for user %s", user.id)

        if not user.wallet_funded:
            warning = self._fund(user)
            if warning:
                warnings.append(warning)
            else:
                user.wallet_funded = True
                db.commit()

        if user.wallet_funded and not user.wallet_has_trustline:
            warning = self._trust(user)
            if warning:
                warnings.append(warning)
            else:
                user.wallet_has_trustline = True
                db.commit()

        return self.status(user, warnings)

    @staticmethod
    def status(user: User, warnings: Optional[list[str]] = None) -> WalletStatus:
        return WalletStatus(
            public_key=user.wallet_public_key,
            funded=bool(user.wallet_funded),
            trustline_ready=bool(user.wallet_has_trustline),
            state=user.wallet_state,
            warnings=warnings or [],
        )

    def _fund(self, user: User) -> Optional[str]:
        try:
            self.ledger.fund_account(user.wallet_public_key)
            return None
        except DependencyUnavailable as exc:
            # Friendbot refuses accounts that already exist; a resumed setup lands here.
            if self._account_exists(user.wallet_public_key):
                return None
            logger.warning("Wallet funding failed for user %s: %s", user.id, exc.message)
            return exc.message

    def _trust(self, user: User) -> Optional[str]:
        keypair = Keypair.from_secret(user.wallet_secret_key)
        try:
            submitted = self.ledger.establish_trustline(keypair, self.config.asset, self.config.trustline_limit)
        except LedgerError as exc:
            logger.warning("Trustline setup failed for user %s: %s", user.id, exc)
            return f"Failed to create trustline: {exc}"
        if submitted:
            logger.info("Trustline for %s established for user %s", self.config.asset.code, user.id)
        return None

    def _account_exists(self, public_key: str) -> bool:
        try:
            self.ledger.load_account(public_key)
        except (AccountNotFound, LedgerError):
            return False
        return True
