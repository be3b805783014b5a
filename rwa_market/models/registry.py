"""Registry ORM — the single row holding fee, owner and id counters.

Invariants:
    - Exactly one row, id == REGISTRY_ROW_ID
    - fee stored as its decimal string ("0.02"), never as float
    - Counters only increase
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from rwa_market.db.base import Base


REGISTRY_ROW_ID: int = 1


class RegistryRow(Base):
    """Singleton protocol settings."""
    __tablename__ = "registry"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, default=REGISTRY_ROW_ID,
    )
    owner: Mapped[str] = mapped_column(String(128), nullable=False)
    fee: Mapped[str] = mapped_column(String(64), nullable=False)
    offering_counter: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )
    rental_counter: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
