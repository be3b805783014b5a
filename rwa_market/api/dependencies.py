"""Route Dependencies — per-request wiring of the market service and block time.

Invariants:
    - get_block_time is the ONLY place the wall clock is read
    - Tests override get_block_time to move time deterministically
"""

import time

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rwa_market.config import get_settings
from rwa_market.core.domain_types import Timestamp
from rwa_market.core.repository_protocols import AddressValidator
from rwa_market.infrastructure.address_validation import CanonicalAddressValidator
from rwa_market.infrastructure.database import get_db
from rwa_market.services.market_service import MarketService


def get_block_time() -> Timestamp:
    """Current block time in whole seconds."""
    return Timestamp(int(time.time()))


def get_address_validator() -> AddressValidator:
    settings = get_settings()
    return CanonicalAddressValidator(
        settings.address_min_length, settings.address_max_length,
    )


def get_market_service(
    db: AsyncSession = Depends(get_db),
    validator: AddressValidator = Depends(get_address_validator),
) -> MarketService:
    return MarketService(db, validator)
