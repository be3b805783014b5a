"""ORM Models — SQLAlchemy declarative models for the persisted market layout.

Invariants:
    - All models inherit from Base (db/base.py)
    - One registry row, one table per record store, one outbox table

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all / autogenerate
"""

from rwa_market.models.registry import RegistryRow  # noqa: F401
from rwa_market.models.offering import OfferingRow  # noqa: F401
from rwa_market.models.rental import RentalRow  # noqa: F401
from rwa_market.models.outbound_transfer import OutboundTransfer  # noqa: F401
