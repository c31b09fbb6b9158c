from datetime import datetime, timezone

from bson import ObjectId
from bson.errors import InvalidId
from flask import current_app
from pymongo import ASCENDING, MongoClient
from pymongo.errors import PyMongoError


def init_app(app, client=None):
    """Attach a MongoDB client and database handle to ``app``.

    The connection is verified up front; an unreachable server at startup
    terminates the process instead of serving requests that can only fail.
    """
    if client is None:
        client = MongoClient(
            app.config["MONGO_URI"],
            serverSelectionTimeoutMS=app.config["MONGO_SERVER_SELECTION_TIMEOUT_MS"],
            tz_aware=False,
        )

    if app.config.get("MONGO_PING_ON_STARTUP", True):
        try:
            client.admin.command("ping")
        except PyMongoError as exc:
            app.logger.critical("MongoDB connection failed: %s", exc)
            raise SystemExit(1) from exc
        app.logger.info("MongoDB connected successfully")

    db = client[app.config["MONGO_DB_NAME"]]
    ensure_indexes(db)

    app.extensions["mongo_client"] = client
    app.extensions["mongo_db"] = db
    return db


def ensure_indexes(db):
    db.users.create_index([("email", ASCENDING)], unique=True)
    db.tasks.create_index([("user_id", ASCENDING), ("created_at", ASCENDING)])


def get_db():
    return current_app.extensions["mongo_db"]


def to_object_id(value):
    """Return ``value`` as an ObjectId, or None when it is not a valid id."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def utcnow():
    # BSON dates are naive UTC with millisecond precision.
    now = datetime.now(timezone.utc)
    return now.replace(tzinfo=None, microsecond=now.microsecond // 1000 * 1000)


def isoformat(value):
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat(timespec="milliseconds") + "Z"
