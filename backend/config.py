import os
from datetime import timedelta

from dotenv import load_dotenv

# Load .env from project root so local development MONGO_URI is picked up
load_dotenv()


def _env_flag(name, default):
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", "change-this-jwt-secret")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.environ.get("JWT_EXPIRES_HOURS", "168")))
    JWT_TOKEN_LOCATION = ["headers"]

    MONGO_URI = os.environ.get("MONGO_URI", "mongodb://localhost:27017/?directConnection=true")
    MONGO_DB_NAME = os.environ.get("MONGO_DB_NAME", "taskmanager")
    MONGO_SERVER_SELECTION_TIMEOUT_MS = int(os.environ.get("MONGO_TIMEOUT_MS", "5000"))
    MONGO_PING_ON_STARTUP = _env_flag("MONGO_PING_ON_STARTUP", "1")

    CORS_ORIGINS = [
        origin.strip()
        for origin in os.environ.get("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ]

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    DEBUG = _env_flag("FLASK_DEBUG", "0")


class TestConfig(Config):
    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = "test-jwt-secret-with-enough-length-for-hs256"
    MONGO_DB_NAME = "taskmanager_test"
    MONGO_PING_ON_STARTUP = False
    LOG_LEVEL = "DEBUG"
