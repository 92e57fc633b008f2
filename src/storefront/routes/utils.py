from functools import wraps
from typing import Any, Dict, Optional

from flask import current_app, g, request
from marshmallow import Schema
from marshmallow import ValidationError as MarshmallowValidationError

from storefront.core.config import Config
from storefront.core.exceptions import ValidationError, field_errors_from
from storefront.services.auth_service import AuthService


def get_config() -> Config:
    return current_app.extensions["storefront_config"]


def get_auth_service() -> AuthService:
    return current_app.extensions["auth_service"]


def load_json(schema: Schema, message: str = "Invalid request body", max_size_mb: int = 1) -> Dict[str, Any]:
    """Validate the JSON body with a marshmallow schema, 400 on any problem."""
    if request.content_length and request.content_length > max_size_mb * 1024 * 1024:
        raise ValidationError(f"Request payload too large. Maximum size: {max_size_mb}MB")

    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError(message, {"_schema": ["Request body must be a JSON object"]})

    try:
        return schema.load(data)
    except MarshmallowValidationError as err:
        raise ValidationError(message, field_errors_from(err.messages))


def extract_token() -> Optional[str]:
    """Session cookie first, then an Authorization: Bearer header."""
    token = request.cookies.get(get_config().security.cookie_name)
    if token:
        return token

    header = request.headers.get("Authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


def _cookie_secure() -> bool:
    return get_config().is_production or request.is_secure


def set_session_cookie(response, token: str):
    security = get_config().security
    response.set_cookie(
        security.cookie_name,
        token,
        max_age=security.cookie_max_age_seconds,
        httponly=True,
        samesite="Lax",
        secure=_cookie_secure(),
    )
    return response


def clear_session_cookie(response):
    response.delete_cookie(
        get_config().security.cookie_name,
        httponly=True,
        samesite="Lax",
        secure=_cookie_secure(),
    )
    return response


def require_admin(view):
    """Reject the request unless it carries a valid admin token; claims land on g.admin."""
    @wraps(view)
    def wrapper(*args, **kwargs):
        g.admin = get_auth_service().authenticate(extract_token())
        return view(*args, **kwargs)
    return wrapper
