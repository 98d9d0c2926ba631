"""User model."""
from sqlalchemy import String, Integer, ForeignKey, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import Optional, TYPE_CHECKING
from hrcompliance.models.base import Base, new_uuid

if TYPE_CHECKING:
    from hrcompliance.models.role import Role
    from hrcompliance.models.organisation import Organisation


class User(Base):
    """An authenticated principal (HR staff, supervisors, administrators)."""
    __tablename__ = "users"

    user_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    email: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    role_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("roles.role_id"), nullable=True)
    organisation_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("organisations.organisation_id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="Home organisation; null for platform-level users"
    )

    role_ref: Mapped[Optional["Role"]] = relationship("Role", back_populates="users")
    organisation: Mapped[Optional["Organisation"]] = relationship("Organisation")
