"""Data stores for persistence and caching.

Stores handle:
- PostgreSQL: engine/session lifecycle, comment and post queries
- Redis: cache-aside primitives, key naming

No feed assembly logic in stores - that belongs in services.
"""
