from typing import Optional

from sqlalchemy import DateTime, text
from sqlalchemy.exc import IntegrityError

from storefront.core.exceptions import ConflictError
from storefront.models.admin import AdminAccount, CredentialPatch
from storefront.repositories.base import BaseRepository

# Columns PUT /admin may change. SET clauses are only ever built from this
# tuple, values always go through bind parameters.
UPDATABLE_COLUMNS = ("email", "password_hash")

_TIMESTAMPS = {"created_at": DateTime(timezone=True)}


class AdminRepository(BaseRepository):
    """Credential store: the admins table"""

    def handle_integrity_error(self, error: IntegrityError, operation: str) -> None:
        # admins.email is the only unique column besides the primary key
        raise ConflictError("Email already in use", conflict_field="email")

    def get_by_email(self, email: str) -> Optional[AdminAccount]:
        row = self.execute_single_query(
            text("SELECT id, email, password_hash, created_at FROM admins WHERE email = :email")
            .columns(**_TIMESTAMPS),
            {"email": email},
        )
        return AdminAccount.from_row(row) if row else None

    def get_by_id(self, admin_id: int) -> Optional[AdminAccount]:
        row = self.execute_single_query(
            text("SELECT id, email, password_hash, created_at FROM admins WHERE id = :id")
            .columns(**_TIMESTAMPS),
            {"id": admin_id},
        )
        return AdminAccount.from_row(row) if row else None

    def get_public_by_id(self, admin_id: int) -> Optional[AdminAccount]:
        """Same as get_by_id without reading the password hash"""
        row = self.execute_single_query(
            text("SELECT id, email, created_at FROM admins WHERE id = :id").columns(**_TIMESTAMPS),
            {"id": admin_id},
        )
        return AdminAccount.from_row(row) if row else None

    def create_admin(self, email: str, password_hash: str) -> AdminAccount:
        row = self.execute_returning(
            text("""
                INSERT INTO admins (email, password_hash, created_at)
                VALUES (:email, :password_hash, CURRENT_TIMESTAMP)
                RETURNING id, email, created_at
            """).columns(**_TIMESTAMPS),
            {"email": email, "password_hash": password_hash},
            operation="INSERT admins",
        )
        return AdminAccount.from_row(row)

    def update_admin(self, admin_id: int, patch: CredentialPatch) -> Optional[AdminAccount]:
        """
        Apply the non-empty fields of patch.

        Returns the updated account (without hash), or None when the id no
        longer exists.
        """
        if patch.is_empty():
            raise ValueError("CredentialPatch has no fields to update")

        assignments = []
        params = {"id": admin_id}
        for column in UPDATABLE_COLUMNS:
            value = getattr(patch, column)
            if value is not None:
                assignments.append(f"{column} = :{column}")
                params[column] = value

        row = self.execute_returning(
            text(
                f"UPDATE admins SET {', '.join(assignments)} "
                "WHERE id = :id RETURNING id, email, created_at"
            ).columns(**_TIMESTAMPS),
            params,
            operation="UPDATE admins",
        )
        return AdminAccount.from_row(row) if row else None
