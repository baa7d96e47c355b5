from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from xpense.database import Base


class Book(Base):
    __tablename__ = "books"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    author = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    cover_image = Column(String, nullable=True)
    price = Column(Float, nullable=False)          # in EDU tokens
    category = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)


class UserBook(Base):
    __tablename__ = "user_books"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    book_id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False)
    tokens_paid = Column(Float, nullable=False)
    purchase_date = Column(DateTime, default=datetime.utcnow)

    book = relationship("Book")

    __table_args__ = (UniqueConstraint("user_id", "book_id", name="_user_book_uc"),)
