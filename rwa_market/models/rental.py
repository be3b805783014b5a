"""Rental ORM — a time-boxed lease of an offering's asset.

Invariants:
    - id is the stringified registry rental counter
    - end_time == start_time + duration (seconds)
    - start_time / end_time are u64 stored as decimal strings (beyond BIGINT range)
    - offering_id is NOT a foreign key: the offering may be bought or
      withdrawn while the rental is outstanding
    - Row is deleted by whichever of end-rental / clawback commits first
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from rwa_market.db.base import Base


class RentalRow(Base):
    """Rental entity — keyed by rental id."""
    __tablename__ = "rentals"

    id: Mapped[str] = mapped_column(String(40), primary_key=True)
    offering_id: Mapped[str] = mapped_column(
        String(40), nullable=False, index=True,
    )
    renter: Mapped[str] = mapped_column(String(128), nullable=False)
    start_time: Mapped[str] = mapped_column(String(20), nullable=False)
    end_time: Mapped[str] = mapped_column(String(20), nullable=False)
    amount: Mapped[str] = mapped_column(String(40), nullable=False)
