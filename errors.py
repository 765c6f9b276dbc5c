"""Gallery exceptions and the JSON error handlers that render them.

Service code raises these; ``register_error_handlers`` maps each one to its
HTTP status with a ``{"error": message}`` body the admin and gallery pages
show to the user as-is.
"""

from flask import jsonify
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge


class GalleryError(Exception):
    """Base class for every error the gallery reports to a client.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code to return.
    """

    status_code = 500

    def __init__(self, message="An unexpected error occurred", status_code=None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(GalleryError):
    """Missing or invalid input."""

    status_code = 400


class NotFoundError(GalleryError):
    """The referenced photo does not exist."""

    status_code = 404


class StorageError(GalleryError):
    """The database or the upload folder failed underneath us."""

    status_code = 500


class AuthError(GalleryError):
    status_code = 401


def too_large_message(limit_bytes):
    return f"File too large, the limit is {limit_bytes // (1024 * 1024)} MB"


def register_error_handlers(app):
    @app.errorhandler(GalleryError)
    def handle_gallery_error(error):
        if error.status_code >= 500:
            app.logger.error("REQUEST_FAILED status=%d error=%s", error.status_code, error.message)
        else:
            app.logger.warning("REQUEST_REJECTED status=%d error=%s", error.status_code, error.message)
        return jsonify({"error": error.message}), error.status_code

    # a body over MAX_CONTENT_LENGTH is an oversized upload too
    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(error):
        return handle_gallery_error(ValidationError(too_large_message(app.config["MAX_UPLOAD_BYTES"])))

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        # routing redirects are HTTPExceptions too
        if error.code is None or error.code < 400:
            return error.get_response()
        return jsonify({"error": error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        app.logger.exception("UNHANDLED_ERROR %s", error)
        return jsonify({"error": "Internal server error"}), 500
