from flask import request, g
from hospitium.utils.activity import log_api_activity

API_PREFIX = "/api/v1"


def activity_middleware(app):
    @app.after_request
    def record_api_call(response):
        if not request.path.startswith(API_PREFIX):
            return response

        user = getattr(g, "current_user", None)
        log_api_activity(
            request.method,
            request.path,
            response.status_code,
            {"userId": user.id if user else None},
        )
        return response
