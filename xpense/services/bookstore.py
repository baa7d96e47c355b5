import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from xpense.core.errors import AlreadyProcessed, NotFound, WalletNotReady, WalletNotReadyReason
from xpense.models.book import Book, UserBook
from xpense.models.transaction import Transaction
from xpense.models.user import User
from xpense.schemas.transaction_schema import PurchaseRef
from xpense.services.locks import UserLocks, user_locks
from xpense.services.rewards import RewardIssuer
from xpense.utils.seed_data import BOOKS

logger = logging.getLogger(__name__)


@dataclass
class Purchase:
    user_book: UserBook
    transaction: Transaction


class BookstoreService:
    def __init__(self, issuer: RewardIssuer, locks: UserLocks = user_locks):
        self.issuer = issuer
        self.locks = locks

    def list_books(self, db: Session) -> list[Book]:
        return db.query(Book).filter(Book.is_active.is_(True)).order_by(Book.id).all()

    def get_book(self, db: Session, book_id: int) -> Book:
        book = db.get(Book, book_id)
        if not book:
            raise NotFound("Book not found")
        return book

    def my_books(self, db: Session, user: User) -> list[UserBook]:
        return (
            db.query(UserBook)
            .filter(UserBook.user_id == user.id)
            .order_by(UserBook.purchase_date.desc(), UserBook.id.desc())
            .all()
        )

    def purchase(self, db: Session, user: User, book_id: int) -> Purchase:
        """Debit the book price from the user's wallet, then grant ownership.

        Ownership is only written after the ledger accepts the debit.
        """
        book = db.query(Book).filter_by(id=book_id, is_active=True).first()
        if not book:
            raise NotFound("Book not found or unavailable")

        with self.locks.hold(user.id):
            owned = db.query(UserBook.id).filter_by(user_id=user.id, book_id=book.id).first()
            if owned:
                raise AlreadyProcessed("You already own this book")
            if not user.wallet_ready:
                raise WalletNotReady(WalletNotReadyReason.no_trustline, "Please set up your wallet first")

            transaction = self.issuer.charge(
                db, user, book.price, f"Book purchase: {book.title}", activity=PurchaseRef(book_id=book.id)
            ).unwrap()

            user_book = UserBook(user_id=user.id, book_id=book.id, tokens_paid=book.price)
            db.add(user_book)
            db.commit()
            db.refresh(user_book)

        logger.info("User %s bought book %s (%s)", user.id, book.id, transaction.tx_hash)
        return Purchase(user_book=user_book, transaction=transaction)

    def seed(self, db: Session) -> int:
        if db.query(Book.id).first() is not None:
            raise AlreadyProcessed("Books already seeded")
        db.add_all(Book(**book) for book in BOOKS)
        db.commit()
        logger.info("Seeded %d books", len(BOOKS))
        return len(BOOKS)
