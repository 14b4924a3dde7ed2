# config.py
import os


def _env_flag(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _database_url():
    # Unset means SQLite in the app instance folder (resolved by create_app)
    url = os.environ.get("DATABASE_URL")
    if not url:
        return None
    # Bare postgres URLs (including the legacy scheme) go through psycopg 3
    for scheme in ("postgres://", "postgresql://"):
        if url.startswith(scheme):
            return "postgresql+psycopg://" + url[len(scheme):]
    return url


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-change-me")

    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Sessions: "sqlalchemy" keeps them in the sessions table, "memory" is single-process only
    SESSION_BACKEND = os.environ.get("SESSION_BACKEND", "sqlalchemy")
    SESSION_COOKIE_NAME = os.environ.get("SESSION_COOKIE_NAME", "artistry.sid")
    SESSION_LIFETIME_HOURS = int(os.environ.get("SESSION_LIFETIME_HOURS", "24"))
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = _env_flag("SESSION_COOKIE_SECURE")

    # Comma-separated; the SPA sends the session cookie so origins must be explicit
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")

    SEED_ON_START = _env_flag("SEED_ON_START")
    ENFORCE_SEAT_CAPACITY = _env_flag("ENFORCE_SEAT_CAPACITY")

    ADMIN_USERNAME = os.environ.get("ADMIN_USERNAME", "admin")
    ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SESSION_BACKEND = "memory"
    SEED_ON_START = False
    ENFORCE_SEAT_CAPACITY = False
