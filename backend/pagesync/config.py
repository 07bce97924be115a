import os
from dotenv import load_dotenv

load_dotenv()


def _roles(name, default):
    raw = os.getenv(name)
    if raw is None:
        return default
    return tuple(role.strip() for role in raw.split(",") if role.strip())


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", SECRET_KEY)
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Page synchronization
    PAGES_COLLECTION = os.getenv("PAGES_COLLECTION", "pages")
    PAGES_MAX_LIMIT = int(os.getenv("PAGES_MAX_LIMIT", "100"))
    PAGES_VERSIONS_DEFAULT_LIMIT = int(os.getenv("PAGES_VERSIONS_DEFAULT_LIMIT", "20"))
    PAGES_ROOT_PROPS_MAPPING = []

    # None means "any authenticated user"
    PAGES_EDIT_ROLES = _roles("PAGES_EDIT_ROLES", None)
    PAGES_PUBLISH_ROLES = _roles("PAGES_PUBLISH_ROLES", None)
    PAGES_DELETE_ROLES = _roles("PAGES_DELETE_ROLES", None)


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
    SQLALCHEMY_DATABASE_URI = os.getenv("DEV_DATABASE_URI", "sqlite:///pagesync-dev.db")


class ProductionConfig(BaseConfig):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI")


class TestingConfig(BaseConfig):
    TESTING = True
    SECRET_KEY = "test-secret"
    JWT_SECRET_KEY = "test-jwt-secret-with-enough-bytes-for-hs256"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    PAGES_EDIT_ROLES = ("admin", "editor")
    PAGES_PUBLISH_ROLES = ("admin",)
    PAGES_DELETE_ROLES = ("admin",)


config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
