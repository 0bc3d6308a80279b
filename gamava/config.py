import os
from urllib.parse import quote_plus

BASEDIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))


def _database_uri():
    uri = os.getenv("DB_URI")
    if uri:
        return uri

    db_user = os.getenv("DB_USER")
    db_password = quote_plus(os.getenv("DB_PASSWORD", ""))
    db_host = os.getenv("DB_HOST", "localhost")
    db_port = os.getenv("DB_PORT", "5432")
    db_name = os.getenv("DB_NAME")
    return f"postgresql+psycopg2://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"


def _engine_options(uri):
    """Pool and timeout settings, only meaningful for Postgres"""
    if not uri.startswith("postgresql"):
        return {}
    return {
        "pool_pre_ping": True,
        "pool_size": 10,
        "pool_recycle": 300,
        "connect_args": {
            "connect_timeout": 10,
            "options": "-c statement_timeout=20000",
            "application_name": "gamava_app",
        },
    }


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "secret")

    SQLALCHEMY_DATABASE_URI = _database_uri()
    SQLALCHEMY_ENGINE_OPTIONS = _engine_options(SQLALCHEMY_DATABASE_URI)
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    JWT_SECRET_KEY = os.getenv("JWT_SECRET", "jwt-secret")

    # Transient DB error retry (query layer only)
    DB_QUERY_RETRIES = int(os.getenv("DB_QUERY_RETRIES", 2))
    DB_RETRY_BASE_DELAY = float(os.getenv("DB_RETRY_BASE_DELAY", 1.0))
    DB_RETRY_MAX_DELAY = float(os.getenv("DB_RETRY_MAX_DELAY", 5.0))

    POPULAR_PRODUCTS_SEARCH_LIMIT = int(os.getenv("POPULAR_PRODUCTS_SEARCH_LIMIT", 30))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret-key"
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length"

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {}

    DB_RETRY_BASE_DELAY = 0.0
    DB_RETRY_MAX_DELAY = 0.0
