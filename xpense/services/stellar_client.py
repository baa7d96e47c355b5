import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

import requests
from stellar_sdk import Asset, Keypair, Server, TransactionBuilder
from stellar_sdk.client.requests_client import RequestsClient
from stellar_sdk.exceptions import BaseHorizonError, ConnectionError as HorizonConnectionError, NotFoundError

from xpense.core.config import LedgerConfig
from xpense.core.errors import DependencyUnavailable, LedgerErrorCode

logger = logging.getLogger(__name__)


class AccountNotFound(Exception):
    def __init__(self, public_key: str):
        super().__init__(f"Account {public_key} does not exist on the ledger")
        self.public_key = public_key


class LedgerError(Exception):
    def __init__(self, code: LedgerErrorCode, detail: str = ""):
        super().__init__(f"{code.value}: {detail}" if detail else code.value)
        self.code = code
        self.detail = detail


@dataclass(frozen=True)
class AssetBalance:
    asset_type: str
    balance: str
    asset_code: Optional[str] = None
    asset_issuer: Optional[str] = None

    def is_asset(self, asset: Asset) -> bool:
        return (
            self.asset_type != "native"
            and self.asset_code == asset.code
            and self.asset_issuer == asset.issuer
        )


@dataclass
class AccountState:
    account_id: str
    balances: list[AssetBalance] = field(default_factory=list)

    def trusts(self, asset: Asset) -> bool:
        return any(b.is_asset(asset) for b in self.balances)

    def balance_of(self, asset: Asset) -> Optional[str]:
        for b in self.balances:
            if b.is_asset(asset):
                return b.balance
        return None


# Horizon result codes -> ledger error codes
_OPERATION_CODES = {
    "op_underfunded": LedgerErrorCode.underfunded,
    "op_low_reserve": LedgerErrorCode.underfunded,
    "op_no_destination": LedgerErrorCode.no_destination,
    "op_src_no_trust": LedgerErrorCode.source_no_trust,
    "op_src_not_authorized": LedgerErrorCode.source_no_trust,
    "op_no_trust": LedgerErrorCode.destination_no_trust,
    "op_not_authorized": LedgerErrorCode.destination_no_trust,
    "op_malformed": LedgerErrorCode.malformed,
}

_TRANSACTION_CODES = {
    "tx_too_late": LedgerErrorCode.timeout,
    "tx_insufficient_balance": LedgerErrorCode.underfunded,
    "tx_no_source_account": LedgerErrorCode.no_destination,
    "tx_malformed": LedgerErrorCode.malformed,
}


def ledger_code_from_result_codes(result_codes: Optional[dict]) -> LedgerErrorCode:
    if not result_codes:
        return LedgerErrorCode.other
    for op_code in result_codes.get("operations") or []:
        if op_code in _OPERATION_CODES:
            return _OPERATION_CODES[op_code]
    return _TRANSACTION_CODES.get(result_codes.get("transaction"), LedgerErrorCode.other)


def _parse_balances(raw: list[dict]) -> list[AssetBalance]:
    return [
        AssetBalance(
            asset_type=b.get("asset_type", ""),
            balance=b.get("balance", "0"),
            asset_code=b.get("asset_code"),
            asset_issuer=b.get("asset_issuer"),
        )
        for b in raw
    ]


class StellarLedgerClient:
    """Horizon-backed ledger client. Every call is one or more network round-trips."""

    def __init__(self, config: LedgerConfig, server: Optional[Server] = None):
        self.config = config
        self.server = server or Server(
            horizon_url=config.horizon_url,
            client=RequestsClient(request_timeout=config.http_timeout, post_timeout=config.http_timeout),
        )

    def load_account(self, public_key: str) -> AccountState:
        try:
            data = self.server.accounts().account_id(public_key).call()
        except NotFoundError:
            raise AccountNotFound(public_key)
        except BaseHorizonError as exc:
            raise LedgerError(LedgerErrorCode.unavailable, f"Horizon returned {exc.status}")
        except HorizonConnectionError as exc:
            raise LedgerError(LedgerErrorCode.unavailable, str(exc))
        return AccountState(account_id=public_key, balances=_parse_balances(data.get("balances", [])))

    def submit_payment(self, source: Keypair, destination: str, asset: Asset, amount: str) -> str:
        return self._submit(
            source,
            lambda builder: builder.append_payment_op(destination=destination, asset=asset, amount=amount),
        )

    def establish_trustline(self, account: Keypair, asset: Asset, limit: Optional[str] = None) -> bool:
        """Returns True when a change-trust operation was submitted, False if the trustline already existed."""
        try:
            state = self.load_account(account.public_key)
        except AccountNotFound as exc:
            raise LedgerError(LedgerErrorCode.no_destination, str(exc))
        if state.trusts(asset):
            return False

        self._submit(
            account,
            lambda builder: builder.append_change_trust_op(asset=asset, limit=limit or self.config.trustline_limit),
        )
        return True

    def fund_account(self, public_key: str) -> None:
        try:
            response = requests.get(
                self.config.friendbot_url,
                params={"addr": public_key},
                timeout=self.config.http_timeout,
            )
        except requests.RequestException as exc:
            raise DependencyUnavailable("friendbot", f"Failed to fund wallet: {exc}")

        if response.status_code != 200:
            raise DependencyUnavailable(
                "friendbot", f"Failed to fund wallet: {response.status_code} - {response.text[:200]}"
            )

    def _submit(self, signer: Keypair, add_operation: Callable[[TransactionBuilder], TransactionBuilder]) -> str:
        try:
            source_account = self.server.load_account(signer.public_key)
            builder = TransactionBuilder(
                source_account=source_account,
                network_passphrase=self.config.network_passphrase,
                base_fee=self.server.fetch_base_fee(),
            )
            add_operation(builder)
            transaction = builder.set_timeout(self.config.tx_timeout).build()
            transaction.sign(signer)
            response = self.server.submit_transaction(transaction)
        except NotFoundError:
            raise LedgerError(LedgerErrorCode.other, f"Source account {signer.public_key} not found")
        except BaseHorizonError as exc:
            if exc.status == 504:
                raise LedgerError(LedgerErrorCode.timeout, "Horizon timed out waiting for the transaction")
            if exc.status >= 500:
                raise LedgerError(LedgerErrorCode.unavailable, f"Horizon returned {exc.status}")
            result_codes = (exc.extras or {}).get("result_codes")
            code = ledger_code_from_result_codes(result_codes)
            if code is LedgerErrorCode.other:
                logger.exception("Unexpected Horizon rejection for %s", signer.public_key)
            raise LedgerError(code, str(result_codes or exc.title))
        except HorizonConnectionError as exc:
            raise LedgerError(LedgerErrorCode.unavailable, str(exc))

        logger.debug("Submitted transaction %s from %s", response["hash"], signer.public_key)
        return response["hash"]
