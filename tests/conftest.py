import os
from decimal import Decimal
from itertools import count

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from stellar_sdk import Asset, Keypair

from xpense.auth.token import create_access_token
from xpense.core.config import LedgerConfig
from xpense.core.errors import DependencyUnavailable, LedgerErrorCode
from xpense.database import Base, get_db
from xpense.dependencies import get_ledger_client, get_ledger_config
from xpense.main import app
from xpense.models.user import User
from xpense.services.rewards import RewardIssuer
from xpense.services.stellar_client import AccountNotFound, AccountState, AssetBalance, LedgerError
from xpense.services.transactions import TransactionLedger
from xpense.services.wallet import WalletManager


class FakeLedgerClient:
    """In-memory stand-in for StellarLedgerClient.

    Accounts exist once funded; trustlines and balances are tracked per
    account. Set `payment_error`, `trustline_error` or `fund_error` to make
    the next calls fail.
    """

    def __init__(self, config: LedgerConfig):
        self.config = config
        self.accounts: dict[str, dict] = {}
        self.payments: list[tuple[str, str, str]] = []
        self.trustline_ops: list[str] = []
        self.fund_calls: list[str] = []
        self.payment_error = None
        self.trustline_error = None
        self.fund_error = None
        self._hashes = count(1)

    # helpers for tests
    def add_account(self, public_key: str, trusted: bool = False, balance: str = "0"):
        self.accounts[public_key] = {"trusted": trusted, "balance": Decimal(balance)}

    def balance(self, public_key: str) -> Decimal:
        return self.accounts[public_key]["balance"]

    # client interface
    def load_account(self, public_key: str) -> AccountState:
        account = self.accounts.get(public_key)
        if account is None:
            raise AccountNotFound(public_key)
        balances = [AssetBalance(asset_type="native", balance="10000")]
        if account["trusted"]:
            asset = self.config.asset
            balances.append(
                AssetBalance(
                    asset_type="credit_alphanum4",
                    balance=str(account["balance"]),
                    asset_code=asset.code,
                    asset_issuer=asset.issuer,
                )
            )
        return AccountState(account_id=public_key, balances=balances)

    def fund_account(self, public_key: str) -> None:
        self.fund_calls.append(public_key)
        if self.fund_error:
            raise DependencyUnavailable("friendbot", self.fund_error)
        if public_key in self.accounts:
            raise DependencyUnavailable("friendbot", "Failed to fund wallet: 400 - account already funded")
        self.add_account(public_key)

    def establish_trustline(self, account: Keypair, asset: Asset, limit=None) -> bool:
        state = self.accounts.get(account.public_key)
        if state is None:
            raise LedgerError(LedgerErrorCode.no_destination, "account missing")
        if state["trusted"]:
            return False
        if self.trustline_error:
            raise LedgerError(self.trustline_error, "trustline rejected")
        self.trustline_ops.append(account.public_key)
        state["trusted"] = True
        return True

    def submit_payment(self, source: Keypair, destination: str, asset: Asset, amount: str) -> str:
        if self.payment_error:
            raise LedgerError(self.payment_error, "payment rejected")
        value = Decimal(amount)
        if destination not in self.accounts:
            raise LedgerError(LedgerErrorCode.no_destination)
        if destination != self.config.issuer_public_key and not self.accounts[destination]["trusted"]:
            raise LedgerError(LedgerErrorCode.destination_no_trust)
        if source.public_key != self.config.issuer_public_key:
            sender = self.accounts.get(source.public_key)
            if sender is None or not sender["trusted"]:
                raise LedgerError(LedgerErrorCode.source_no_trust)
            if source.public_key != self.config.distributor_public_key:
                if sender["balance"] < value:
                    raise LedgerError(LedgerErrorCode.underfunded)
                sender["balance"] -= value
        if destination != self.config.issuer_public_key:
            self.accounts[destination]["balance"] += value
        self.payments.append((source.public_key, destination, amount))
        return f"{next(self._hashes):064x}"


@pytest.fixture
def config() -> LedgerConfig:
    issuer = Keypair.random()
    distributor = Keypair.random()
    return LedgerConfig(
        issuer_public_key=issuer.public_key,
        distributor=distributor,
        asset=Asset("EDU", issuer.public_key),
        distribution_wallet=distributor.public_key,
    )


@pytest.fixture
def ledger(config) -> FakeLedgerClient:
    fake = FakeLedgerClient(config)
    fake.add_account(config.issuer_public_key)
    fake.add_account(config.distributor_public_key, trusted=True, balance="1000000")
    return fake


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def file_session_factory(tmp_path):
    """Sessions on a file database, one connection each, for tests that run threads."""
    engine = create_engine(f"sqlite:///{tmp_path / 'xpense.db'}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def transactions() -> TransactionLedger:
    return TransactionLedger(page_size=50)


@pytest.fixture
def issuer(ledger, config, transactions) -> RewardIssuer:
    return RewardIssuer(ledger, config, transactions)


@pytest.fixture
def wallets(ledger, config) -> WalletManager:
    return WalletManager(ledger, config)


@pytest.fixture
def make_user(db, ledger):
    serial = count(1)

    def _make(ready: bool = True, balance: str = "0", name: str = None, session=None) -> User:
        n = next(serial)
        session = session or db
        user = User(name=name or f"Student {n}", email=f"student{n}@example.com")
        if ready:
            keypair = Keypair.random()
            user.wallet_public_key = keypair.public_key
            user.wallet_secret_key = keypair.secret
            user.wallet_funded = True
            user.wallet_has_trustline = True
            ledger.add_account(keypair.public_key, trusted=True, balance=balance)
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture
def client(session_factory, ledger, config):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_ledger_client] = lambda: ledger
    app.dependency_overrides[get_ledger_config] = lambda: config
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth():
    def _headers(user_id: int) -> dict:
        return {"Authorization": f"Bearer {create_access_token({'sub': str(user_id)})}"}

    return _headers
