"""Persistence: key-value backends, TTL cache and deal pipeline."""

from .kv_store import KeyValueStore, InMemoryStore, JsonFileStore
from .cache import TTLCache, cache_key_for_symbol
from .pipeline_store import PipelineStore, make_pipeline_entry

__all__ = [
    'KeyValueStore',
    'InMemoryStore',
    'JsonFileStore',
    'TTLCache',
    'cache_key_for_symbol',
    'PipelineStore',
    'make_pipeline_entry',
]
