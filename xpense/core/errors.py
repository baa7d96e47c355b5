# core/errors.py
from enum import Enum


class XpenseError(Exception):
    status_code = 400
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def code(self) -> str | None:
        return None


class NotFound(XpenseError):
    status_code = 404
    kind = "not_found"


class InvalidRequest(XpenseError):
    kind = "invalid_request"


class AlreadyProcessed(XpenseError):
    kind = "already_processed"


class DependencyUnavailable(XpenseError):
    status_code = 503
    kind = "dependency_unavailable"

    def __init__(self, service: str, message: str):
        super().__init__(message)
        self.service = service

    @property
    def code(self) -> str | None:
        return self.service


# === Reward taxonomy ===

class RewardError(XpenseError):
    kind = "reward_error"


class WalletNotReadyReason(str, Enum):
    no_wallet = "no_wallet"
    account_missing = "account_missing"
    no_trustline = "no_trustline"


class WalletNotReady(RewardError):
    kind = "wallet_not_ready"

    def __init__(self, reason: WalletNotReadyReason, message: str | None = None):
        super().__init__(message or _WALLET_MESSAGES[reason])
        self.reason = reason

    @property
    def code(self) -> str | None:
        return self.reason.value


_WALLET_MESSAGES = {
    WalletNotReadyReason.no_wallet: "User wallet not configured. Please set up your wallet first.",
    WalletNotReadyReason.account_missing: "Destination account does not exist on the ledger yet. Fund the wallet first.",
    WalletNotReadyReason.no_trustline: "Destination wallet has no trustline for the reward token. Run wallet setup again.",
}


class LedgerErrorCode(str, Enum):
    underfunded = "underfunded"
    no_destination = "no_destination"
    source_no_trust = "source_no_trust"
    destination_no_trust = "destination_no_trust"
    malformed = "malformed"
    timeout = "timeout"
    unavailable = "unavailable"
    other = "other"


class LedgerRejected(RewardError):
    status_code = 502
    kind = "ledger_rejected"

    def __init__(self, code: LedgerErrorCode, detail: str = ""):
        super().__init__(f"Token transfer failed ({code.value}){': ' + detail if detail else ''}")
        self.ledger_code = code
        self.detail = detail

    @property
    def code(self) -> str | None:
        return self.ledger_code.value


class InvalidRewardRequest(RewardError):
    kind = "invalid_reward_request"
