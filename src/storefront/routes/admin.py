from flask import Blueprint, g, jsonify

from storefront.core.exceptions import ValidationError
from storefront.routes.schemas import LoginSchema, UpdateCredentialsSchema
from storefront.routes.utils import (
    clear_session_cookie, get_auth_service, load_json, require_admin, set_session_cookie
)

admin_bp = Blueprint("admin", __name__)

_login_schema = LoginSchema()
_update_schema = UpdateCredentialsSchema()


@admin_bp.route("/login", methods=["POST"])
def login():
    """Check email/password and set the session cookie."""
    data = load_json(_login_schema, "email and password required")

    result = get_auth_service().login(data["email"], data["password"])

    response = jsonify({
        "message": "Logged in",
        "admin": result.admin.to_public_dict(include_created_at=False),
    })
    return set_session_cookie(response, result.token)


@admin_bp.route("/logout", methods=["POST"])
def logout():
    """Drop the session cookie. The token itself stays valid until it expires."""
    return clear_session_cookie(jsonify({"message": "Logged out"}))


@admin_bp.route("/me", methods=["GET"])
@require_admin
def me():
    admin = get_auth_service().get_self(g.admin["id"])
    return jsonify({"admin": admin.to_public_dict()})


@admin_bp.route("", methods=["PUT"])
@admin_bp.route("/", methods=["PUT"])
@require_admin
def update_credentials():
    """
    Update email and/or password.

    body: { currentPassword, email?, password? }
    A new cookie is issued whenever an email is supplied.
    """
    data = load_json(_update_schema)
    if not data["current_password"]:
        raise ValidationError("currentPassword is required to update credentials")

    result = get_auth_service().update_credentials(
        g.admin["id"],
        current_password=data["current_password"],
        new_email=data["email"],
        new_password=data["password"],
    )

    response = jsonify({"message": "Credentials updated", "admin": result.admin.to_public_dict()})
    if result.token:
        set_session_cookie(response, result.token)
    return response
