"""Database Layer — declarative base and column types.

Invariants:
    - Every ORM model inherits from db/base.py Base
    - All sessions are async (AsyncSession)

Design Decisions:
    - aiosqlite for local and test databases, asyncpg for PostgreSQL (both native async)
"""
