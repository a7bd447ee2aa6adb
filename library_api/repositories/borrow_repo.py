from datetime import datetime

from sqlalchemy import select, update

from library_api.models.borrow import BorrowRecord, STATUS_BORROWED, STATUS_RETURNED


class BorrowRepo:
    def __init__(self, store):
        self.store = store

    def get(self, record_id: str):
        return self.store.session.get(BorrowRecord, record_id)

    def list_all(self, requester_identity: str | None = None, status: str | None = None):
        q = select(BorrowRecord)
        if requester_identity is not None:
            q = q.where(BorrowRecord.requester_identity == requester_identity)
        if status is not None:
            q = q.where(BorrowRecord.status == status)
        q = q.order_by(BorrowRecord.borrowed_at.desc(), BorrowRecord.id)
        return self.store.session.scalars(q).all()

    def insert(self, record: BorrowRecord) -> str:
        # flush so the row is written inside the caller's unit
        self.store.session.add(record)
        self.store.session.flush()
        return record.id

    def close(self, record_id: str, now: datetime) -> bool:
        """Flip a borrowed record to returned. False if it was not borrowed."""
        result = self.store.session.execute(
            update(BorrowRecord)
            .where(BorrowRecord.id == record_id, BorrowRecord.status == STATUS_BORROWED)
            .values(status=STATUS_RETURNED, returned_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

