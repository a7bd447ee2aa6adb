from flask import current_app

from library_api.errors import InvalidArgument, NotFound, Unavailable
from library_api.models.base import utcnow
from library_api.models.borrow import BorrowRecord, STATUS_BORROWED
from library_api.utils.ids import is_valid_id


class BorrowService:
    """
    Borrow / return workflow.

    Both operations write the ledger and the book's available copies in one
    atomic unit, so either both changes are visible or neither is. The
    availability read done before the unit only short-circuits obvious
    failures; the decision that matters is the conditional decrement made
    inside the unit against current stored state.
    """

    def __init__(self, store, books, borrows):
        self.store = store
        self.books = books
        self.borrows = borrows

    def borrow_book(self, book_id: str, requester_identity: str, metadata: dict | None = None) -> str:
        if not is_valid_id(book_id):
            raise InvalidArgument("Invalid Book ID")
        if not isinstance(requester_identity, str) or not requester_identity.strip():
            raise InvalidArgument("requesterIdentity is required")

        book = self.books.get(book_id)
        if not book:
            raise NotFound("Book not found")
        if book.book_quantity < 1:
            raise Unavailable("Book is not available")

        def _borrow(unit):
            if not self.books.adjust_quantity(book_id, -1):
                if not self.books.exists(book_id):
                    raise NotFound("Book not found")
                raise Unavailable("Book is not available")

            record = BorrowRecord(
                book_id=book_id,
                requester_identity=requester_identity.strip(),
                status=STATUS_BORROWED,
                borrowed_at=utcnow(),
                details=dict(metadata or {}),
            )
            return self.borrows.insert(record)

        record_id = self.store.run_in_transaction(_borrow)
        current_app.logger.info(
            f"[borrow] book={book_id} borrowed by {requester_identity} (record={record_id})"
        )
        return record_id

    def return_book(self, record_id: str) -> BorrowRecord:
        if not is_valid_id(record_id):
            raise InvalidArgument("Invalid borrow record ID")

        record = self.borrows.get(record_id)
        if not record or record.status != STATUS_BORROWED:
            raise NotFound("Borrowed book not found")
        book_id = record.book_id

        def _return(unit):
            if not self.borrows.close(record_id, utcnow()):
                # returned by a concurrent request after our read
                raise NotFound("Borrowed book not found")

            if not self.books.adjust_quantity(book_id, 1):
                current_app.logger.warning(
                    f"[borrow] record={record_id} closed but book={book_id} no longer exists; "
                    f"inventory not incremented"
                )

        self.store.run_in_transaction(_return)
        current_app.logger.info(f"[borrow] record={record_id} returned (book={book_id})")
        return self.borrows.get(record_id)
