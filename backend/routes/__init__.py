from flask import request

from backend.errors import ValidationError
from backend.models.task_model import FieldError


def json_body():
    """Return the request's JSON object, or {} when no body was sent."""
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError([FieldError("body", "Request body must be a JSON object")])
    return payload
