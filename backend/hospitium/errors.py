from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException
from hospitium.domain.exceptions import DomainError


def error_response(message, status_code):
    response = jsonify({
        "success": False,
        "error": message
    })
    response.status_code = status_code
    return response


def register_error_handlers(app):
    @app.errorhandler(DomainError)
    def handle_domain_error(error):
        return error_response(error.message, error.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return error_response(error.description, error.code)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        # Details stay in the server log; clients get a generic message.
        current_app.logger.exception("Unhandled error: %s", error)
        return error_response("Internal server error", 500)


def register_jwt_handlers(jwt):
    @jwt.unauthorized_loader
    def handle_missing_token(reason):
        return error_response("Authentication required", 401)

    @jwt.invalid_token_loader
    def handle_invalid_token(reason):
        return error_response("Authentication required", 401)

    @jwt.expired_token_loader
    def handle_expired_token(jwt_header, jwt_payload):
        return error_response("Session expired", 401)
