"""Reference dataset loading, caching and normalization."""

from eventform.data.models import CacheEntry, Option, ResourceKey
from eventform.data.cache import ResourceCache, shared_cache
from eventform.data.loader import FALLBACK_URLS, DataLoader
from eventform.data.catalog import DataCatalog

__all__ = [
    "FALLBACK_URLS",
    "CacheEntry",
    "DataCatalog",
    "DataLoader",
    "Option",
    "ResourceCache",
    "ResourceKey",
    "shared_cache",
]
