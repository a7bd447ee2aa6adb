from library_api.extensions import db
from library_api.models.base import utcnow
from library_api.utils.ids import new_id


class Book(db.Model):
    __tablename__ = "books"
    __table_args__ = (
        db.CheckConstraint("book_quantity >= 0", name="ck_books_quantity_non_negative"),
    )

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    title = db.Column(db.String(200), nullable=False, index=True)
    writer = db.Column(db.String(200), nullable=True, index=True)
    category = db.Column(db.String(100), nullable=True)
    image = db.Column(db.String(500), nullable=True)
    published = db.Column(db.String(50), nullable=True)
    short_des = db.Column(db.Text, nullable=True)

    # available copies; mutate only through BookRepo.adjust_quantity
    book_quantity = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)
