from flask_jwt_extended import create_access_token
from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from library_api.errors import Conflict
from library_api.models.user import User


class AuthService:
    def __init__(self, users, admin_emails=()):
        self.users = users
        self.admin_emails = {e.lower() for e in admin_emails}

    def register(self, email: str, password: str, name: str | None = None):
        if self.users.get_by_email(email):
            raise Conflict("Email is already registered")

        user = User(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role="admin" if email in self.admin_emails else "user",
        )
        try:
            self.users.create(user)
        except IntegrityError as e:
            # lost a race with another registration of the same email
            self.users.rollback()
            raise Conflict("Email is already registered") from e
        return user

    def login(self, email: str, password: str):
        user = self.users.get_by_email(email.strip().lower())
        if not user or not check_password_hash(user.password_hash, password):
            raise ValueError("Invalid email or password")

        token = create_access_token(
            identity=user.id,
            additional_claims={"role": user.role, "email": user.email}
        )
        return token, user
