from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from library_api.config import Config
from library_api.db_objects import ensure_db_objects
from library_api.extensions import db, jwt, migrate
from library_api.store import LibraryStore


def _engine_options(app):
    options = dict(app.config.get("SQLALCHEMY_ENGINE_OPTIONS") or {})
    if app.config["SQLALCHEMY_DATABASE_URI"].startswith("sqlite"):
        connect_args = dict(options.get("connect_args") or {})
        connect_args.setdefault("timeout", app.config["SQLITE_BUSY_TIMEOUT"])
        # sessions are per app context, so one thread per connection at a time
        connect_args.setdefault("check_same_thread", False)
        options["connect_args"] = connect_args
    return options


def _wire_services(app):
    from library_api.repositories.book_repo import BookRepo
    from library_api.repositories.borrow_repo import BorrowRepo
    from library_api.repositories.user_repo import UserRepo
    from library_api.services.auth_service import AuthService
    from library_api.services.book_service import BookService
    from library_api.services.borrow_query_service import BorrowQueryService
    from library_api.services.borrow_service import BorrowService

    store = LibraryStore(
        db,
        max_attempts=app.config["TX_MAX_ATTEMPTS"],
        timeout=app.config["TX_TIMEOUT_SECONDS"],
        backoff=app.config["TX_RETRY_BACKOFF_SECONDS"],
    )
    books = BookRepo(store)
    borrows = BorrowRepo(store)
    users = UserRepo(store)

    app.extensions["library"] = {
        "store": store,
        "books": BookService(store, books),
        "borrows": BorrowService(store, books, borrows),
        "borrow_queries": BorrowQueryService(borrows),
        "auth": AuthService(users, admin_emails=app.config.get("ADMIN_EMAILS", ())),
    }
    return store


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.config["SQLALCHEMY_ENGINE_OPTIONS"] = _engine_options(app)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # 1) db first, tables need the engine
    db.init_app(app)
    ensure_db_objects(app)

    # 2) other extensions
    migrate.init_app(app, db)
    jwt.init_app(app)

    store = _wire_services(app)

    # 3) blueprints
    from library_api.controllers.auth_controller import auth_bp
    from library_api.controllers.book_controller import book_bp
    from library_api.controllers.borrow_controller import borrow_bp
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(book_bp)
    app.register_blueprint(borrow_bp)

    @app.get("/")
    def index():
        return jsonify({"message": "Library Server Application"})

    @app.get("/health")
    def health():
        if store.ping():
            return jsonify({"ok": True})
        return jsonify({"ok": False}), 503

    @app.errorhandler(HTTPException)
    def http_error(e):
        return jsonify({"success": False, "message": e.description}), e.code

    @app.errorhandler(Exception)
    def unexpected_error(e):
        app.logger.exception(f"[app] unhandled error: {e}")
        db.session.rollback()
        return jsonify({"success": False, "message": "Internal server error"}), 500

    return app
