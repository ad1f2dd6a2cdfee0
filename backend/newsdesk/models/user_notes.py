"""UserNotes ORM model: one row per user holding every note as a JSON array."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from newsdesk.db import Base


class UserNotes(Base):
    __tablename__ = "user_notes"

    user_id: Mapped[str] = mapped_column(Text, primary_key=True)
    user_email: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Newest first. JSONB on Postgres, plain JSON elsewhere (sqlite in tests).
    notes: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=list
    )
    updated_at: Mapped[datetime] = mapped_column(nullable=False, server_default=func.now())
