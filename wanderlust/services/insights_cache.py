"""
In-memory TTL cache for destination lookups to avoid repeated model calls
for the same search.
"""
import logging
from typing import Dict, Optional, Tuple
from datetime import datetime, timedelta

from wanderlust.models.trip_models import DestinationInfo

logger = logging.getLogger(__name__)

# normalized query -> (destination, expiry)
_cache_store: Dict[str, Tuple[DestinationInfo, datetime]] = {}
_cache_ttl_seconds = 3600  # 1 hour default


def normalize_query(query: str) -> str:
    return " ".join(query.lower().split())


def get_cached(query: str) -> Optional[DestinationInfo]:
    """Return the cached destination for a query if present and not expired."""
    key = normalize_query(query)
    entry = _cache_store.get(key)
    if entry is None:
        return None
    value, expiry = entry
    if datetime.utcnow() < expiry:
        logger.debug(f"Cache hit for '{key}'")
        return value
    del _cache_store[key]
    logger.debug(f"Cache expired for '{key}'")
    return None


def set_cached(query: str, value: DestinationInfo, ttl_seconds: Optional[int] = None):
    """Store a destination with TTL. A TTL of 0 disables caching."""
    ttl = ttl_seconds if ttl_seconds is not None else _cache_ttl_seconds
    if ttl <= 0:
        return
    key = normalize_query(query)
    _cache_store[key] = (value, datetime.utcnow() + timedelta(seconds=ttl))
    logger.debug(f"Cached '{key}' for {ttl}s")


def clear_cache():
    """Clear all cached entries (useful for testing)."""
    _cache_store.clear()
    logger.info("Destination cache cleared")


def cleanup_expired() -> int:
    """Remove expired entries from cache."""
    now = datetime.utcnow()
    expired_keys = [k for k, (_, expiry) in _cache_store.items() if now >= expiry]
    for k in expired_keys:
        del _cache_store[k]
    if expired_keys:
        logger.debug(f"Cleaned up {len(expired_keys)} expired cache entries")
    return len(expired_keys)
