"""
Id resolution shared by the card and comment GET endpoints.

A request selects entities in one of three ways: a single path id, a
comma-separated ``ids`` query parameter, or the whole collection.
"""

import re
from typing import Any, List, NamedTuple, Optional, Sequence, TypeVar

from snippet_board.core.store import find_by_ids

EntityT = TypeVar("EntityT")

_PATH_ID_RE = re.compile(r"\d+")
_QUERY_ID_RE = re.compile(r"[+-]?\d+")


class Resolution(NamedTuple):
    items: List[Any]
    single: bool


def parse_path_id(raw: str) -> Optional[int]:
    """Parse a path id; anything other than a non-negative integer yields None."""
    if _PATH_ID_RE.fullmatch(raw):
        return int(raw)
    return None


def parse_id_list(raw: str) -> List[int]:
    """
    Parse ``"1, 2,3"`` into ``[1, 2, 3]``.

    Items that are not integers are dropped; they could never match an id.
    """
    ids = []
    for part in raw.split(","):
        part = part.strip()
        if _QUERY_ID_RE.fullmatch(part):
            ids.append(int(part))
    return ids


def resolve(collection: Sequence[EntityT], path_id: Optional[str], ids: Optional[str]) -> Resolution:
    """
    Select entries of ``collection`` for a GET request.

    Args:
        collection: Cards or comments, in store order
        path_id: Raw id from the URL path, if the route has one
        ids: Raw ``ids`` query parameter, if given

    Returns:
        Resolution: The selected entries (store order) and whether a single
            path id was requested.
    """
    if path_id is not None:
        entity_id = parse_path_id(path_id)
        if entity_id is None:
            return Resolution(items=[], single=True)
        return Resolution(items=find_by_ids(collection, [entity_id]), single=True)

    if ids:
        return Resolution(items=find_by_ids(collection, parse_id_list(ids)), single=False)

    return Resolution(items=list(collection), single=False)
