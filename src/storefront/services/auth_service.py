from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, Optional
import logging

import bcrypt
import jwt
from email_validator import EmailNotValidError, validate_email

from storefront.core.config import SecurityConfig
from storefront.core.exceptions import (
    InvalidCredentialsError, InvalidTokenError, MissingTokenError,
    NotFoundError, UnauthorizedError, ValidationError
)
from storefront.models.admin import AdminAccount, CredentialPatch
from storefront.repositories.admin_repository import AdminRepository
from storefront.utils.date_utils import now_utc

logger = logging.getLogger(__name__)

# bcrypt only reads the first 72 bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]


@dataclass
class LoginResult:
    admin: AdminAccount
    token: str


@dataclass
class UpdateResult:
    admin: AdminAccount
    token: Optional[str] = None  # set when the email changed and the cookie must be rotated


class AuthService:
    """
    Admin authentication

    Sessions are stateless: a signed JWT carrying {id, email} is the only
    proof of login and is re-verified on every request. There is no
    revocation list, so logging out only drops the client's cookie.
    """

    def __init__(self, admin_repository: AdminRepository, security: SecurityConfig):
        self.admin_repo = admin_repository
        self.security = security
        self._dummy_hash: Optional[bytes] = None

    # ------------------------------------------------------------------ #
    # Passwords                                                            #
    # ------------------------------------------------------------------ #
    def hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.security.password_hash_rounds)
        return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")

    @staticmethod
    def verify_password(password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
        except ValueError:
            # Malformed hash in the table
            logger.error("Stored password hash is not a valid bcrypt hash")
            return False

    def _burn_password_check(self, password: str) -> None:
        """Spend the same bcrypt work as a real check when the email is unknown."""
        if self._dummy_hash is None:
            self._dummy_hash = bcrypt.hashpw(
                b"not-a-real-password", bcrypt.gensalt(rounds=self.security.password_hash_rounds)
            )
        bcrypt.checkpw(_password_bytes(password), self._dummy_hash)

    # ------------------------------------------------------------------ #
    # Tokens                                                               #
    # ------------------------------------------------------------------ #
    def sign_token(self, admin: AdminAccount) -> str:
        issued_at = now_utc()
        payload = {
            "id": admin.id,
            "email": admin.email,
            "iat": issued_at,
            "exp": issued_at + timedelta(seconds=self.security.jwt_expires_in_seconds),
        }
        return jwt.encode(payload, self.security.jwt_secret_key, algorithm=self.security.jwt_algorithm)

    def authenticate(self, token: Optional[str]) -> Dict[str, Any]:
        """
        Verify a session token and return its claims.

        Raises:
            MissingTokenError: no token supplied
            InvalidTokenError: bad signature, expired, or claims missing
        """
        if not token:
            raise MissingTokenError()

        try:
            claims = jwt.decode(
                token,
                self.security.jwt_secret_key,
                algorithms=[self.security.jwt_algorithm],
                options={"require": ["exp"]},
            )
        except jwt.PyJWTError as e:
            logger.warning(f"Rejected token: {e}")
            raise InvalidTokenError()

        if "id" not in claims or "email" not in claims:
            logger.warning("Rejected token without id/email claims")
            raise InvalidTokenError()

        return claims

    # ------------------------------------------------------------------ #
    # Operations                                                           #
    # ------------------------------------------------------------------ #
    def login(self, email: str, password: str) -> LoginResult:
        admin = self.admin_repo.get_by_email(email)
        if admin is None:
            self._burn_password_check(password)
            logger.info("Login failed: unknown email")
            raise InvalidCredentialsError()

        if not self.verify_password(password, admin.password_hash):
            logger.info(f"Login failed for admin {admin.id}: wrong password")
            raise InvalidCredentialsError()

        logger.info(f"Admin {admin.id} logged in")
        return LoginResult(admin=admin, token=self.sign_token(admin))

    def get_self(self, admin_id: int) -> AdminAccount:
        admin = self.admin_repo.get_public_by_id(admin_id)
        if admin is None:
            # Token outlived the account
            raise NotFoundError("Admin")
        return admin

    def update_credentials(
        self,
        admin_id: int,
        current_password: Optional[str],
        new_email: Optional[str] = None,
        new_password: Optional[str] = None,
    ) -> UpdateResult:
        """
        Change email and/or password after re-checking the current password.

        Nothing is written unless current_password matches, whatever fields
        are supplied. When an email is supplied a fresh token is issued so
        the session's claims match the stored account.
        """
        if not current_password:
            raise ValidationError("currentPassword is required to update credentials")
        if not new_email and not new_password:
            raise ValidationError("Provide at least email or password to update")

        admin = self.admin_repo.get_by_id(admin_id)
        if admin is None:
            raise NotFoundError("Admin")

        if not self.verify_password(current_password, admin.password_hash):
            logger.warning(f"Credential update for admin {admin_id} refused: wrong current password")
            raise UnauthorizedError("Current password incorrect", "INVALID_CURRENT_PASSWORD")

        patch = CredentialPatch(
            email=check_email(new_email) if new_email else None,
            password_hash=self.hash_password(new_password) if new_password else None,
        )

        updated = self.admin_repo.update_admin(admin_id, patch)
        if updated is None:
            raise NotFoundError("Admin")

        changed = [name for name in ("email", "password_hash") if getattr(patch, name) is not None]
        logger.info(f"Admin {admin_id} updated credentials: {', '.join(changed)}")

        token = self.sign_token(updated) if patch.email is not None else None
        return UpdateResult(admin=updated, token=token)

    def create_admin(self, email: str, password: str) -> AdminAccount:
        if not password:
            raise ValidationError("password is required")
        admin = self.admin_repo.create_admin(check_email(email), self.hash_password(password))
        logger.info(f"Created admin {admin.id}")
        return admin


def check_email(email: str) -> str:
    """Syntax-check an email address (no DNS lookups) and return it as given."""
    email = email.strip()
    try:
        validate_email(email, check_deliverability=False)
        return email
    except EmailNotValidError as e:
        raise ValidationError("Invalid email address", {"email": [str(e)]})
