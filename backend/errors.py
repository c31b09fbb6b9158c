"""API error types and the Flask handlers that render them as JSON."""

from flask import jsonify
from werkzeug.exceptions import HTTPException


class ApiError(Exception):
    status_code = 500
    message = "Something went wrong"

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self):
        return {"message": self.message}


class ValidationError(ApiError):
    """Malformed or missing input; carries one entry per offending field."""

    status_code = 400
    message = "Validation failed"

    def __init__(self, errors, message=None):
        super().__init__(message)
        self.errors = list(errors)

    def to_dict(self):
        body = super().to_dict()
        body["errors"] = [e.to_dict() for e in self.errors]
        return body


class Unauthorized(ApiError):
    status_code = 401
    message = "Not authorized"


class NotFound(ApiError):
    status_code = 404
    message = "Not found"


class Conflict(ApiError):
    status_code = 409
    message = "Already exists"


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(err):
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(err):
        return jsonify(message=err.name), err.code

    @app.errorhandler(Exception)
    def handle_unexpected(err):
        app.logger.exception("Unhandled error: %s", err)
        return jsonify(message="Something went wrong"), 500
