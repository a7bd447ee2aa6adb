from datetime import datetime

from sqlalchemy import func, select, update

from library_api.extensions import db, get_service
from library_api.models.book import Book
from library_api.models.borrow import BorrowRecord
from library_api.schemas import BookCreate

ADMIN_EMAIL = "admin@library.test"
ADMIN_PASSWORD = "admin-pass"


def make_book(quantity=1, title="Dune"):
    """Create a book through the book service; needs an app context."""
    return get_service("books").create_book(BookCreate(title=title, book_quantity=quantity))


def quantity_of(book_id):
    return db.session.scalar(select(Book.book_quantity).where(Book.id == book_id))


def count_records(status=None):
    q = select(func.count(BorrowRecord.id))
    if status is not None:
        q = q.where(BorrowRecord.status == status)
    return db.session.scalar(q)


PAST = datetime(2000, 1, 1)


def backdate(book_id, when=PAST):
    """Pin a book's updated_at to a known past value."""
    db.session.execute(
        update(Book).where(Book.id == book_id).values(updated_at=when)
        .execution_options(synchronize_session=False)
    )
    db.session.commit()


def updated_at_of(book_id):
    return db.session.scalar(select(Book.updated_at).where(Book.id == book_id))
