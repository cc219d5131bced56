"""Marketplace participants."""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin, status_enum
from app.models.types import GUID, WalletAddress


class UserRole(str, Enum):
    OWNER = "owner"
    TENANT = "tenant"
    ADMIN = "admin"


class User(TimestampMixin, Base):
    """An owner, tenant or administrator. Credentials live with the auth provider."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(length=255), nullable=False)
    email: Mapped[str] = mapped_column(String(length=320), unique=True, nullable=False)
    role: Mapped[UserRole] = mapped_column(status_enum(UserRole, "user_role"), nullable=False)
    wallet_address: Mapped[Optional[str]] = mapped_column(WalletAddress(), unique=True, nullable=True)
