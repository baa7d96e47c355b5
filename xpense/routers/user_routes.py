import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from xpense.auth.token import create_access_token, get_current_user
from xpense.core.errors import InvalidRequest
from xpense.database import get_db
from xpense.dependencies import get_wallet_manager
from xpense.models.user import User
from xpense.schemas.user_schema import SessionResponse, UserCreate, UserResponse, WalletStatusOut
from xpense.services.wallet import WalletManager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["User"])


@router.post("/create-profile", response_model=SessionResponse, status_code=201)
def create_profile(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    wallets: WalletManager = Depends(get_wallet_manager),
):
    email = user_data.email.strip().lower()
    if db.query(User).filter(User.email == email).first():
        raise InvalidRequest("User already exists")

    user = User(name=user_data.name.strip(), email=email)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Created user %s", user.id)

    # Wallet problems are reported as warnings; signup itself has succeeded.
    wallet = wallets.ensure_wallet(db, user)

    return SessionResponse(
        message="User profile successfully created",
        access_token=create_access_token(data={"sub": str(user.id)}),
        user=UserResponse.model_validate(user),
        wallet=WalletStatusOut.from_status(wallet),
    )


@router.post("/session", response_model=SessionResponse)
def start_session(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    wallets: WalletManager = Depends(get_wallet_manager),
):
    wallet = wallets.ensure_wallet(db, user)
    return SessionResponse(
        message="Session started",
        access_token=create_access_token(data={"sub": str(user.id)}),
        user=UserResponse.model_validate(user),
        wallet=WalletStatusOut.from_status(wallet),
    )


@router.get("/me", response_model=UserResponse)
def read_me(user: User = Depends(get_current_user)):
    return user
