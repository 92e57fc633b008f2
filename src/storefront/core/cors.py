import logging
from typing import Iterable

from flask import Flask, jsonify, request

logger = logging.getLogger(__name__)

CORS_REJECTED_MESSAGE = "The CORS policy for this site does not allow access from the specified Origin."

ALLOWED_METHODS = "GET, POST, PUT, PATCH, DELETE, OPTIONS"
ALLOWED_HEADERS = "Content-Type, Authorization"


def init_cors(app: Flask, allowed_origins: Iterable[str]) -> None:
    """
    Origin allow-list with credentials.

    Requests without an Origin header (curl, server-to-server) pass through.
    Browser requests from any other origin are refused with a 403.
    """
    origins = frozenset(allowed_origins)

    @app.before_request
    def check_origin():
        origin = request.headers.get("Origin")
        if origin is None:
            return None
        if origin not in origins:
            logger.warning(f"Blocked request from origin {origin}")
            return jsonify({"error": CORS_REJECTED_MESSAGE, "code": "CORS_REJECTED"}), 403
        if request.method == "OPTIONS":
            # Preflight: headers are added in after_request
            return "", 204
        return None

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        if origin and origin in origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.vary.add("Origin")
            if request.method == "OPTIONS":
                response.headers["Access-Control-Allow-Methods"] = ALLOWED_METHODS
                response.headers["Access-Control-Allow-Headers"] = ALLOWED_HEADERS
        return response
