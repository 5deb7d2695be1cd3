"""Cache: per-request query cache and cache key utilities.

Key format is in keys.py (DRY); QueryCache implements IQueryCache.
"""

from app.infrastructure.cache.keys import query_key
from app.infrastructure.cache.query_cache import QueryCache

__all__ = ["QueryCache", "query_key"]
