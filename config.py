import os
from dotenv import load_dotenv

BASE_DIR = os.path.abspath(os.path.dirname(__file__))
load_dotenv(os.path.join(BASE_DIR, ".env"))


def _flag(name, default):
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "change-this-secret")
    # relative sqlite paths land in the instance folder
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///leave_management.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    PERMANENT_SESSION_LIFETIME = 24 * 60 * 60
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SECURE = _flag("SESSION_COOKIE_SECURE", "false")

    JWT_SECRET = os.getenv("JWT_SECRET", "change-this-jwt-secret")
    JWT_ALGORITHM = "HS256"
    JWT_EXPIRES_HOURS = int(os.getenv("JWT_EXPIRES_HOURS", 24))

    BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", 10))
    DEFAULT_PASSWORD = os.getenv("DEFAULT_PASSWORD", "password")

    SEED_DEMO_DATA = _flag("SEED_DEMO_DATA", "true")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
