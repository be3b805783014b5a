"""Transfer Outbox — queues engine-emitted transfers for the external dispatcher.

Invariants:
    - enqueue() only adds rows to the caller's transaction; it never commits
    - Transfers keep their emission order (sequence) within one operation
    - mark_dispatched() is idempotent for already-dispatched rows
    - Listings page by an exclusive id cursor (after_id)
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rwa_market.core.domain_types import (
    MarketAction, OfferingId, RentalId, TransferStatus,
)
from rwa_market.core.errors import ResourceNotFoundError
from rwa_market.core.transfers import Transfer, describe_transfer
from rwa_market.models.outbound_transfer import OutboundTransfer

logger = logging.getLogger(__name__)


def transfer_row_to_dict(row: OutboundTransfer) -> dict:
    return {
        "id": row.id,
        "action": row.action,
        "sequence": row.sequence,
        "kind": row.kind,
        "recipient": row.recipient,
        "denom": row.denom,
        "asset_contract": row.asset_contract,
        "amount": row.amount,
        "offering_id": row.offering_id,
        "rental_id": row.rental_id,
        "status": row.status,
        "created_at": row.created_at,
        "dispatched_at": row.dispatched_at,
    }


class SqlTransferOutbox:
    """TransferOutbox over an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def enqueue(
        self, action: MarketAction, transfers: list[Transfer],
        offering_id: OfferingId | None = None, rental_id: RentalId | None = None,
    ) -> list[int]:
        rows = [
            OutboundTransfer(
                action=action.value,
                sequence=i,
                status=TransferStatus.PENDING.value,
                offering_id=offering_id,
                rental_id=rental_id,
                **describe_transfer(t),
            )
            for i, t in enumerate(transfers)
        ]
        self._db.add_all(rows)
        await self._db.flush()
        return [row.id for row in rows]

    async def list_transfers(
        self, status: TransferStatus | None, limit: int, after_id: int | None = None,
    ) -> list[dict]:
        """Rows in id order, strictly after `after_id` when given."""
        stmt = select(OutboundTransfer).order_by(OutboundTransfer.id).limit(limit)
        if status is not None:
            stmt = stmt.where(OutboundTransfer.status == status.value)
        if after_id is not None:
            stmt = stmt.where(OutboundTransfer.id > after_id)
        rows = (await self._db.execute(stmt)).scalars().all()
        return [transfer_row_to_dict(r) for r in rows]

    async def mark_dispatched(self, transfer_id: int) -> dict:
        row = await self._db.get(OutboundTransfer, transfer_id)
        if row is None:
            raise ResourceNotFoundError("Transfer", str(transfer_id))
        if row.status != TransferStatus.DISPATCHED.value:
            row.status = TransferStatus.DISPATCHED.value
            row.dispatched_at = datetime.now(timezone.utc)
            logger.info(
                "Transfer marked dispatched",
                extra={"transfer_id": transfer_id, "action": row.action},
            )
        await self._db.flush()
        return transfer_row_to_dict(row)
