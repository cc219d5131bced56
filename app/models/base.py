"""Declarative base, mixins and column helpers."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Type

from sqlalchemy import Enum as SqlEnum
from sqlalchemy import func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base class for all ORM models."""


class TimestampMixin:
    """Adds created_at/updated_at columns."""

    created_at: Mapped[datetime] = mapped_column(
        default=None,
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=None,
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


def status_enum(enum_cls: Type[Enum], name: str) -> SqlEnum:
    """VARCHAR-backed enum storing member values, so partial indexes can compare literals."""

    return SqlEnum(
        enum_cls,
        name=name,
        native_enum=False,
        length=32,
        values_callable=lambda members: [member.value for member in members],
    )
