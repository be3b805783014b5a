"""OutboundTransfer ORM — outbox of transfer instructions awaiting the dispatcher.

Invariants:
    - Rows are written in the same transaction as the state change that emitted them
    - status transitions: pending -> dispatched (never back)
    - sequence preserves emission order within an operation

Design Decisions:
    - denom set for bank sends, asset_contract set for asset transfers; the other is NULL
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from rwa_market.db.base import Base


class OutboundTransfer(Base):
    """Outbox entry — one transfer instruction."""
    __tablename__ = "outbound_transfers"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    action: Mapped[str] = mapped_column(String(32), nullable=False)
    sequence: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    kind: Mapped[str] = mapped_column(String(32), nullable=False)
    recipient: Mapped[str] = mapped_column(String(128), nullable=False)
    denom: Mapped[str | None] = mapped_column(String(128), nullable=True)
    asset_contract: Mapped[str | None] = mapped_column(
        String(128), nullable=True,
    )
    amount: Mapped[str] = mapped_column(String(40), nullable=False)
    offering_id: Mapped[str | None] = mapped_column(String(40), nullable=True)
    rental_id: Mapped[str | None] = mapped_column(String(40), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending", index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    dispatched_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
