import os


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "super-secret-key")

    SQLALCHEMY_DATABASE_URI = os.getenv("SQLALCHEMY_DATABASE_URI", "sqlite:///library.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    # sqlite3 busy handler; bounds how long a statement waits on a locked database
    SQLITE_BUSY_TIMEOUT = float(os.getenv("SQLITE_BUSY_TIMEOUT", "5"))
    CREATE_TABLES_ON_STARTUP = os.getenv("CREATE_TABLES_ON_STARTUP", "1") == "1"

    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "jwt-super-secret")
    ADMIN_EMAILS = [
        e.strip().lower() for e in os.getenv("ADMIN_EMAILS", "").split(",") if e.strip()
    ]

    # Atomic unit retry policy for transient store errors
    TX_MAX_ATTEMPTS = int(os.getenv("TX_MAX_ATTEMPTS", "3"))
    TX_TIMEOUT_SECONDS = float(os.getenv("TX_TIMEOUT_SECONDS", "5"))
    TX_RETRY_BACKOFF_SECONDS = float(os.getenv("TX_RETRY_BACKOFF_SECONDS", "0.05"))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
