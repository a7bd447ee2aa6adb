from library_api.extensions import db
from library_api.models.base import utcnow
from library_api.utils.ids import new_id

STATUS_BORROWED = "borrowed"
STATUS_RETURNED = "returned"
STATUSES = (STATUS_BORROWED, STATUS_RETURNED)


class BorrowRecord(db.Model):
    __tablename__ = "borrow_records"

    id = db.Column(db.String(32), primary_key=True, default=new_id)

    # no FK: a record outlives the book it points at (see BorrowService.return_book)
    book_id = db.Column(db.String(32), nullable=False, index=True)
    requester_identity = db.Column(db.String(255), nullable=False, index=True)

    status = db.Column(db.String(20), nullable=False, default=STATUS_BORROWED, index=True)
    borrowed_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    returned_at = db.Column(db.DateTime, nullable=True)

    details = db.Column(db.JSON, nullable=False, default=dict)
