"""Infrastructure Layer — database sessions and structured logging.

Invariants:
    - Infrastructure never contains trust logic
    - Errors from external systems are mapped to core/errors.py types

Design Decisions:
    - Separate from services/: infrastructure owns connections, services own orchestration
"""
