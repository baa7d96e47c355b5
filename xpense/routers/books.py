from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from xpense.auth.token import get_current_user
from xpense.database import get_db
from xpense.dependencies import get_bookstore_service
from xpense.models.user import User
from xpense.schemas.book_schema import BookOut, PurchaseOut, UserBookOut
from xpense.services.bookstore import BookstoreService

router = APIRouter(prefix="/api/books", tags=["Books"])


@router.get("/", response_model=List[BookOut])
def list_books(
    db: Session = Depends(get_db),
    books: BookstoreService = Depends(get_bookstore_service),
):
    return books.list_books(db)


# Declared before /{book_id} so "mine" is not parsed as an id.
@router.get("/mine", response_model=List[UserBookOut])
def my_books(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    books: BookstoreService = Depends(get_bookstore_service),
):
    return books.my_books(db, user)


@router.post("/seed", status_code=201)
def seed_books(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    books: BookstoreService = Depends(get_bookstore_service),
):
    count = books.seed(db)
    return {"message": "Books seeded successfully", "count": count}


@router.get("/{book_id}", response_model=BookOut)
def get_book(
    book_id: int,
    db: Session = Depends(get_db),
    books: BookstoreService = Depends(get_bookstore_service),
):
    return books.get_book(db, book_id)


@router.post("/{book_id}/purchase", response_model=PurchaseOut, status_code=201)
def purchase_book(
    book_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    books: BookstoreService = Depends(get_bookstore_service),
):
    purchase = books.purchase(db, user, book_id)
    return PurchaseOut(
        message="Book purchased successfully",
        book=UserBookOut.model_validate(purchase.user_book),
        tx_hash=purchase.transaction.tx_hash,
    )
