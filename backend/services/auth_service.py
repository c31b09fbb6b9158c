import re

from flask import current_app
from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError
from pymongo.errors import DuplicateKeyError
from werkzeug.security import check_password_hash, generate_password_hash

from backend.errors import Conflict, NotFound, Unauthorized, ValidationError
from backend.models.task_model import FieldError
from backend.models.user_model import User
from backend.utils.db import to_object_id, utcnow

MIN_PASSWORD_LENGTH = 6
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def normalize_email(email):
    return email.strip().lower() if isinstance(email, str) else ""


def _text(value):
    return value.strip() if isinstance(value, str) else ""


def validate_registration(name, email, password):
    errors = []
    if not _text(name):
        errors.append(FieldError("name", "Name is required", name))
    if not _text(email):
        errors.append(FieldError("email", "Email is required", email))
    elif not EMAIL_PATTERN.match(normalize_email(email)):
        errors.append(FieldError("email", "Please enter a valid email", email))
    if not isinstance(password, str) or not password:
        errors.append(FieldError("password", "Password is required"))
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors.append(
            FieldError("password", f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        )
    return errors


def issue_token(user):
    return create_access_token(identity=user.id, additional_claims={"email": user.email})


def register(db, name, email, password):
    errors = validate_registration(name, email, password)
    if errors:
        raise ValidationError(errors)

    email = normalize_email(email)
    if db.users.find_one({"email": email}, {"_id": 1}) is not None:
        raise Conflict("User already exists")

    now = utcnow()
    user = User(
        name=_text(name),
        email=email,
        password_hash=generate_password_hash(password),
        created_at=now,
        updated_at=now,
    )
    try:
        result = db.users.insert_one(user.to_doc())
    except DuplicateKeyError as exc:
        raise Conflict("User already exists") from exc
    user.id = str(result.inserted_id)

    current_app.logger.info("Registered user %s", user.id)
    return issue_token(user), user.to_public()


def login(db, email, password):
    errors = []
    if not _text(email):
        errors.append(FieldError("email", "Email is required", email))
    if not isinstance(password, str) or not password:
        errors.append(FieldError("password", "Password is required"))
    if errors:
        raise ValidationError(errors)

    doc = db.users.find_one({"email": normalize_email(email)})
    if doc is None or not check_password_hash(doc["password_hash"], password):
        current_app.logger.info("Failed login attempt")
        raise Unauthorized("Invalid credentials")

    user = User.from_doc(doc)
    return issue_token(user), user.to_public()


def verify_token(token):
    """Return the user id carried by ``token``.

    Raises Unauthorized when the token cannot be decoded, its signature does
    not match, or it has expired. Routes get the same check from
    ``@jwt_required()``; this is for callers holding a raw token.
    """
    if not token:
        raise Unauthorized("No token, authorization denied")
    try:
        claims = decode_token(token)
    except (PyJWTError, JWTExtendedException) as exc:
        raise Unauthorized("Token is not valid") from exc
    user_id = claims.get(current_app.config.get("JWT_IDENTITY_CLAIM", "sub"))
    if not user_id:
        raise Unauthorized("Token is not valid")
    return user_id


def get_user(db, user_id):
    oid = to_object_id(user_id)
    doc = db.users.find_one({"_id": oid}) if oid is not None else None
    if doc is None:
        raise NotFound("User not found")
    return User.from_doc(doc).to_public()
