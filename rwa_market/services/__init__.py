"""Services Layer — orchestration of repository, engine and outbox.

Invariants:
    - One service call = one database transaction
"""
