from flask import current_app
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()


def get_service(name: str):
    """Service wired by create_app for the current application."""
    return current_app.extensions["library"][name]
