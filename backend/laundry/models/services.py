"""
Service model - laundry services offered on the booking form.
"""
from datetime import datetime, timezone
from uuid import uuid4, UUID

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from laundry.lib.db import Base, UTCDateTime


class Service(Base):
    """
    Service entity - bookable laundry services.

    `price` is a display label such as "R170" or "R170-R470". It is only used
    as a fallback revenue estimate; the tier table in the pricing engine is
    the authoritative price source.
    """
    __tablename__ = "services"

    # Primary key
    id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )

    # Service details
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    price: Mapped[str] = mapped_column(String(64), nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<Service(id={self.id}, name={self.name}, price={self.price})>"
