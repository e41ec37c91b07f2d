# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User and remote identity models."""

from sqlalchemy import Boolean, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quickfeed.infrastructure.database.models.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    """A person using quickfeed, either student, teacher or admin."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    login: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    student_id: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    avatar_url: Mapped[str] = mapped_column(String(512), nullable=False, default="")
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    remote_identities: Mapped[list["RemoteIdentity"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def token_for(self, provider: str) -> str | None:
        """Return the access token stored for a provider, if any."""
        for identity in self.remote_identities:
            if identity.provider == provider:
                return identity.access_token
        return None


class RemoteIdentity(Base, TimestampMixin):
    """Link between a user and an account on an SCM provider."""

    __tablename__ = "remote_identities"
    __table_args__ = (UniqueConstraint("provider", "remote_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    provider: Mapped[str] = mapped_column(String(20), nullable=False)
    remote_id: Mapped[int] = mapped_column(Integer, nullable=False)
    access_token: Mapped[str] = mapped_column(String(512), nullable=False)

    user: Mapped[User] = relationship(back_populates="remote_identities")
