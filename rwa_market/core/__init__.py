"""Core Layer — pure market logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic; time and funds arrive as arguments

Design Decisions:
    - Functional core separated from imperative shell
"""
