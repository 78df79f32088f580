"""
Core components for the Snippet Board service.
"""

from .resolution import Resolution, parse_id_list, parse_path_id, resolve
from .store import (
    JsonStore,
    StoreError,
    StoreReadError,
    StoreWriteError,
    find_by_ids,
    find_one,
    next_id,
)

__all__ = [
    "JsonStore",
    "Resolution",
    "StoreError",
    "StoreReadError",
    "StoreWriteError",
    "find_by_ids",
    "find_one",
    "next_id",
    "parse_id_list",
    "parse_path_id",
    "resolve",
]
