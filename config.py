import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "gallery-dev-key")

    # Render/Railway hand out postgres:// URLs, SQLAlchemy wants postgresql://
    database_url = os.environ.get("DATABASE_URL")
    if database_url and database_url.startswith("postgres://"):
        database_url = database_url.replace("postgres://", "postgresql://", 1)

    SQLALCHEMY_DATABASE_URI = database_url or ("sqlite:///" + os.path.join(BASE_DIR, "gallery.db"))
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER", os.path.join(BASE_DIR, "uploads"))
    MAX_UPLOAD_BYTES = 10 * 1024 * 1024
    # room for the multipart envelope around a 10 MiB image
    MAX_CONTENT_LENGTH = 12 * 1024 * 1024
    ALLOWED_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp"}
    ALLOWED_MIMETYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}

    ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "")
    CLEANUP_WORKERS = int(os.environ.get("CLEANUP_WORKERS", 8))
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-key"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    ADMIN_PASSWORD = "test-admin-secret"
    CLEANUP_WORKERS = 4
    LOG_LEVEL = "DEBUG"
