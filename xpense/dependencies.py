# xpense/dependencies.py
from functools import lru_cache

from fastapi import Depends

from xpense.core.config import LedgerConfig, build_ledger_config, settings
from xpense.core.errors import DependencyUnavailable
from xpense.services.bookstore import BookstoreService
from xpense.services.challenges import ChallengeService
from xpense.services.community import CommunityService
from xpense.services.daily_saving import DailySavingService
from xpense.services.quiz import QuizService
from xpense.services.rewards import RewardIssuer
from xpense.services.stellar_client import StellarLedgerClient
from xpense.services.transactions import TransactionLedger
from xpense.services.wallet import WalletManager


@lru_cache
def _ledger_config() -> LedgerConfig:
    return build_ledger_config(settings)


def get_ledger_config() -> LedgerConfig:
    try:
        return _ledger_config()
    except RuntimeError as exc:
        raise DependencyUnavailable("ledger", str(exc))


def get_ledger_client(config: LedgerConfig = Depends(get_ledger_config)) -> StellarLedgerClient:
    return StellarLedgerClient(config)


def get_transaction_ledger() -> TransactionLedger:
    return TransactionLedger(page_size=settings.HISTORY_PAGE_SIZE)


def get_wallet_manager(
    ledger=Depends(get_ledger_client),
    config: LedgerConfig = Depends(get_ledger_config),
) -> WalletManager:
    return WalletManager(ledger, config)


def get_reward_issuer(
    ledger=Depends(get_ledger_client),
    config: LedgerConfig = Depends(get_ledger_config),
    transactions: TransactionLedger = Depends(get_transaction_ledger),
) -> RewardIssuer:
    return RewardIssuer(ledger, config, transactions)


def get_challenge_service(issuer: RewardIssuer = Depends(get_reward_issuer)) -> ChallengeService:
    return ChallengeService(issuer, default_reward=settings.CHALLENGE_DEFAULT_REWARD)


def get_daily_saving_service(issuer: RewardIssuer = Depends(get_reward_issuer)) -> DailySavingService:
    return DailySavingService(
        issuer,
        base_reward=settings.DAILY_SAVING_BASE_REWARD,
        streak_bonus=settings.DAILY_SAVING_STREAK_BONUS,
    )


def get_quiz_service(issuer: RewardIssuer = Depends(get_reward_issuer)) -> QuizService:
    return QuizService(issuer, daily_cap=settings.QUIZ_DAILY_CORRECT_CAP)


def get_community_service(issuer: RewardIssuer = Depends(get_reward_issuer)) -> CommunityService:
    return CommunityService(issuer, post_reward=settings.COMMUNITY_POST_REWARD)


def get_bookstore_service(issuer: RewardIssuer = Depends(get_reward_issuer)) -> BookstoreService:
    return BookstoreService(issuer)
