"""Data stores for persistence and caching.

Stores handle:
- PostgreSQL: DB session, deal/profile repositories
- Redis: trust score cache with TTL

No business/ranking logic in stores - that belongs in services.
"""
