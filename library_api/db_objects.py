from sqlalchemy.exc import SQLAlchemyError

from library_api.extensions import db


def ensure_db_objects(app):
    """
    Create missing tables (books, borrow_records, users) at startup.
    Existing tables are left untouched; schema changes go through `flask db`.
    """
    if not app.config.get("CREATE_TABLES_ON_STARTUP", True):
        return

    # models must be imported so their tables are registered on db.metadata
    from library_api.models import book, borrow, user  # noqa: F401

    with app.app_context():
        try:
            db.create_all()
            app.logger.info("[schema] Tables ensured.")
        except SQLAlchemyError as e:
            app.logger.error(f"[schema] Could not create tables: {e}")
            raise
