import os
from dataclasses import dataclass

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from stellar_sdk import Asset, Keypair, Network


def _split_csv(val: str | None) -> list[str]:
    return [v.strip() for v in (val or "").split(",") if v.strip()]


class Settings(BaseSettings):
    # App
    APP_NAME: str = "Xpense Backend"
    ENV: str = os.getenv("ENV", "production")
    LOG_LEVEL: str = "INFO"

    # CORS
    ALLOW_ORIGINS: list[str] = Field(default_factory=list)  # override via ALLOWED_ORIGINS (CSV)
    ALLOW_METHODS: list[str] = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
    ALLOW_HEADERS: list[str] = ["*"]
    ALLOW_CREDENTIALS: bool = True

    # DB
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./xpense.db")

    # Auth / JWT
    JWT_SECRET: str = os.getenv("SECRET_KEY") or os.getenv("JWT_SECRET", "dev-secret-change-me")
    JWT_ALG: str = "HS256"
    ACCESS_TOKEN_EXPIRES_MINUTES: int = 10080  # 7 days

    # Stellar ledger
    STELLAR_HORIZON_URL: str = "https://horizon-testnet.stellar.org"
    STELLAR_NETWORK_PASSPHRASE: str = Network.TESTNET_NETWORK_PASSPHRASE
    FRIENDBOT_URL: str = "https://friendbot.stellar.org"
    STELLAR_ISSUER_SECRET: str | None = None
    STELLAR_ISSUER_PUBLIC: str | None = None
    STELLAR_DISTRIBUTOR_SECRET: str | None = None
    DISTRIBUTION_WALLET_PUBLIC_KEY: str | None = None
    REWARD_ASSET_CODE: str = "EDU"
    TRUSTLINE_LIMIT: str = "1000000"
    LEDGER_TX_TIMEOUT: int = 30  # seconds the submitted transaction stays valid
    LEDGER_HTTP_TIMEOUT: int = 30

    # Reward rules
    DAILY_SAVING_BASE_REWARD: int = 10
    DAILY_SAVING_STREAK_BONUS: int = 5
    QUIZ_DAILY_CORRECT_CAP: int = 10
    COMMUNITY_POST_REWARD: int = 5
    CHALLENGE_DEFAULT_REWARD: int = 10
    HISTORY_PAGE_SIZE: int = 50

    # Load .env file
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@dataclass(frozen=True)
class LedgerConfig:
    """Key material and network identity shared by every ledger-facing service."""

    issuer_public_key: str
    distributor: Keypair
    asset: Asset
    distribution_wallet: str
    horizon_url: str = "https://horizon-testnet.stellar.org"
    network_passphrase: str = Network.TESTNET_NETWORK_PASSPHRASE
    friendbot_url: str = "https://friendbot.stellar.org"
    trustline_limit: str = "1000000"
    tx_timeout: int = 30
    http_timeout: int = 30

    @property
    def distributor_public_key(self) -> str:
        return self.distributor.public_key


def build_settings() -> Settings:
    s = Settings()

    if s.DATABASE_URL.startswith("postgres://"):
        s.DATABASE_URL = s.DATABASE_URL.replace("postgres://", "postgresql://", 1)

    # Load CORS overrides
    env_origins = _split_csv(os.getenv("ALLOWED_ORIGINS"))
    if env_origins:
        s.ALLOW_ORIGINS = env_origins
    elif not s.ALLOW_ORIGINS:
        s.ALLOW_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]

    return s


def build_ledger_config(s: Settings) -> LedgerConfig:
    if not s.STELLAR_DISTRIBUTOR_SECRET:
        raise RuntimeError("STELLAR_DISTRIBUTOR_SECRET is not configured")

    if s.STELLAR_ISSUER_PUBLIC:
        issuer_public = s.STELLAR_ISSUER_PUBLIC
    elif s.STELLAR_ISSUER_SECRET:
        issuer_public = Keypair.from_secret(s.STELLAR_ISSUER_SECRET).public_key
    else:
        raise RuntimeError("STELLAR_ISSUER_PUBLIC or STELLAR_ISSUER_SECRET must be configured")

    distributor = Keypair.from_secret(s.STELLAR_DISTRIBUTOR_SECRET)

    return LedgerConfig(
        issuer_public_key=issuer_public,
        distributor=distributor,
        asset=Asset(s.REWARD_ASSET_CODE, issuer_public),
        distribution_wallet=s.DISTRIBUTION_WALLET_PUBLIC_KEY or distributor.public_key,
        horizon_url=s.STELLAR_HORIZON_URL,
        network_passphrase=s.STELLAR_NETWORK_PASSPHRASE,
        friendbot_url=s.FRIENDBOT_URL,
        trustline_limit=s.TRUSTLINE_LIMIT,
        tx_timeout=s.LEDGER_TX_TIMEOUT,
        http_timeout=s.LEDGER_HTTP_TIMEOUT,
    )


settings = build_settings()
