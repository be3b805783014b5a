"""Infrastructure Layer — database access, identity validation and logging.

Invariants:
    - SQLAlchemy errors surface as DatabaseError, never raw driver exceptions
    - Repositories translate rows to core types; no market rules live here
"""
