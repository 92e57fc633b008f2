from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import BigInteger, Column, DateTime, Integer, Text, func

from storefront.db import Base
from storefront.utils.date_utils import to_iso


class AdminAccountModel(Base):
    """
    An administrator allowed into the back office.

    email uniqueness is enforced by the database; the repository maps the
    resulting integrity error to a 409.
    """

    __tablename__ = "admins"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    email = Column(Text, nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<AdminAccount id={self.id} email={self.email!r}>"


@dataclass
class AdminAccount:
    """Admin row as returned by the repository"""
    id: int
    email: str
    password_hash: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "AdminAccount":
        return cls(
            id=row["id"],
            email=row["email"],
            password_hash=row.get("password_hash"),
            created_at=row.get("created_at"),
        )

    def to_public_dict(self, include_created_at: bool = True) -> Dict[str, Any]:
        """Never includes the password hash"""
        data: Dict[str, Any] = {"id": self.id, "email": self.email}
        if include_created_at:
            data["created_at"] = to_iso(self.created_at)
        return data


@dataclass
class CredentialPatch:
    """Optional-field patch applied by AdminRepository.update_admin"""
    email: Optional[str] = None
    password_hash: Optional[str] = None

    def is_empty(self) -> bool:
        return self.email is None and self.password_hash is None
