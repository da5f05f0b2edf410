"""Personnel (user) model."""
import enum

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, enum_column


class UserRole(str, enum.Enum):
    officer = "officer"
    admin = "admin"


class User(Base):
    """Represents a member of the station's personnel."""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    rank: Mapped[str | None] = mapped_column(String(100), nullable=True)
    badge_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    role: Mapped[UserRole] = mapped_column(
        enum_column(UserRole, "userrole"), nullable=False, default=UserRole.officer
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
