from sqlalchemy import select, update

from library_api.models.base import utcnow
from library_api.models.book import Book


class BookRepo:
    def __init__(self, store):
        self.store = store

    def list_all(self):
        return self.store.session.scalars(
            select(Book).order_by(Book.created_at.desc())
        ).all()

    def get(self, book_id: str):
        return self.store.session.get(Book, book_id)

    def exists(self, book_id: str) -> bool:
        return self.store.session.scalar(
            select(Book.id).where(Book.id == book_id)
        ) is not None

    def create(self, book: Book):
        self.store.session.add(book)
        self.store.session.commit()
        return book

    def update(self):
        self.store.session.commit()

    def delete(self, book: Book):
        self.store.session.delete(book)
        self.store.session.commit()

    def adjust_quantity(self, book_id: str, delta: int) -> bool:
        """
        Add delta to the available copies in one conditional UPDATE.

        The row is only touched when the result stays non-negative, so the
        database serialises concurrent adjustments of the same book. Does not
        commit: callers run it inside an atomic unit. Returns False when no
        row matched (book missing or not enough copies).
        """
        result = self.store.session.execute(
            update(Book)
            .where(Book.id == book_id, Book.book_quantity + delta >= 0)
            .values(book_quantity=Book.book_quantity + delta, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
