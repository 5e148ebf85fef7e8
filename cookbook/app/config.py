import os
from sqlalchemy.engine import URL


def env(key, default):
    # An empty variable counts as unset.
    return os.environ.get(key) or default


def database_url(user, password, host, port, name):
    return URL.create(
        "mysql+pymysql",
        username=user,
        password=password,
        host=host,
        port=int(port),
        database=name,
    ).render_as_string(hide_password=False)


class Config:
    DB_USER = env("MYSQL_DB_USERNAME", "backend_db_client")
    DB_PASS = env("MYSQL_DB_PASSWORD", "cookbook")
    DB_NAME = env("MYSQL_DATABASE", "cookbook")
    DB_HOST = env("MYSQL_HOST", "cookbookDB")
    DB_PORT = env("MYSQL_DB_PORT", "3307")
    BACKEND_PORT = env("BACKEND_PORT", "8085")

    SQLALCHEMY_DATABASE_URI = env(
        "DATABASE_URL",
        database_url(DB_USER, DB_PASS, DB_HOST, DB_PORT, DB_NAME)
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = env("LOG_LEVEL", "INFO")

    CORS_ALLOWED_METHODS = ["GET", "POST", "OPTIONS", "DELETE", "PUT", "PATCH"]
    CORS_ALLOWED_HEADERS = [
        "Accept", "Content-Type", "Content-Length",
        "Accept-Encoding", "X-CSRF-Token", "Authorization"
    ]
