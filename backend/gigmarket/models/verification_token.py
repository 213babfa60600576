"""VerificationToken ORM — one-time email verification secret.

Invariants:
    - token is unique
    - at most one live token per identifier (issuer deletes older ones first)
"""

import uuid
from datetime import datetime

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from gigmarket.db.base import Base


class VerificationToken(Base):
    __tablename__ = "verification_tokens"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    identifier: Mapped[str] = mapped_column(
        String(320), nullable=False, index=True,
    )
    token: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    expires: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
