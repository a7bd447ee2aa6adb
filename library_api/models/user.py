from library_api.extensions import db
from library_api.models.base import utcnow
from library_api.utils.ids import new_id


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    name = db.Column(db.String(120), nullable=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default="user")

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
