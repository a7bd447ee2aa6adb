from sqlalchemy import select

from library_api.models.user import User


class UserRepo:
    def __init__(self, store):
        self.store = store

    def get_by_email(self, email: str):
        return self.store.session.scalars(select(User).filter_by(email=email)).first()

    def get_by_id(self, user_id: str):
        return self.store.session.get(User, user_id)

    def create(self, user: User):
        self.store.session.add(user)
        self.store.session.commit()
        return user

    def rollback(self):
        self.store.session.rollback()
