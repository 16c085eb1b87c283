"""User accounts: artists, businesses and administrators."""
import uuid
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, List

from sqlalchemy import String, DateTime, Uuid
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from prorights.core.database import Base

if TYPE_CHECKING:
    from prorights.models.work import Work
    from prorights.models.contributor import Contributor


class UserRole(str, Enum):
    """Account role, decides what an actor may do."""
    ARTIST = "artist"       # Registers works, receives royalties
    BUSINESS = "business"   # Holds licenses, reports usage
    ADMIN = "admin"         # Reviews works and licenses, settles payments


class User(Base):
    """An authenticated account."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str] = mapped_column(String(100), nullable=True)

    role: Mapped[UserRole] = mapped_column(
        SAEnum(UserRole, values_callable=lambda x: [e.value for e in x]),
        default=UserRole.ARTIST,
        nullable=False,
        index=True,
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    # Relationships
    registered_works: Mapped[List["Work"]] = relationship(
        "Work",
        back_populates="registrant",
    )
    contributions: Mapped[List["Contributor"]] = relationship(
        "Contributor",
        back_populates="user",
    )

    @property
    def display_name(self) -> str:
        name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return name or self.email

    def __repr__(self) -> str:
        return f"<User {self.id} email={self.email} role={self.role}>"
