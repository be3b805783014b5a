"""Offering ORM — a listed quantity of a custodied asset.

Invariants:
    - id is the stringified registry offering counter
    - amount and price_amount are u128 stored as decimal strings
    - Row is deleted when the offering is bought or withdrawn
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from rwa_market.db.base import Base


class OfferingRow(Base):
    """Offering entity — keyed by offering id."""
    __tablename__ = "offerings"

    id: Mapped[str] = mapped_column(String(40), primary_key=True)
    asset_contract: Mapped[str] = mapped_column(String(128), nullable=False)
    seller: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    amount: Mapped[str] = mapped_column(String(40), nullable=False)
    price_denom: Mapped[str] = mapped_column(String(128), nullable=False)
    price_amount: Mapped[str] = mapped_column(String(40), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
