import uuid
from datetime import datetime

from sqlalchemy import String, func
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(AsyncAttrs, DeclarativeBase):
    pass


def _new_id() -> str:
    return uuid.uuid4().hex


class StringPrimaryKeyMixin:
    # Document-style ids; external postings use "<source>-<id>".
    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
