from library_api.errors import InvalidArgument, NotFound
from library_api.models.borrow import STATUSES
from library_api.utils.ids import is_valid_id


class BorrowQueryService:
    """Read-only views over the borrow ledger."""

    def __init__(self, borrows):
        self.borrows = borrows

    def list_borrowed(self, requester_identity: str | None = None, status: str | None = None):
        if status is not None and status not in STATUSES:
            raise InvalidArgument(f"status must be one of: {', '.join(STATUSES)}")
        return self.borrows.list_all(requester_identity=requester_identity, status=status)

    def get_borrowed(self, record_id: str):
        if not is_valid_id(record_id):
            raise InvalidArgument("Invalid borrow record ID")
        record = self.borrows.get(record_id)
        if not record:
            raise NotFound("Borrowed book not found")
        return record
