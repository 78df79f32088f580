"""
Data store accessor for the Snippet Board service.

The whole dataset lives in a single JSON document ``{"cards": [...], "comments": [...]}``.
Every request loads it fresh, mutates it in memory and writes it back in full.
This module is the only code that touches the file.
"""

import asyncio
import json
import logging
import os
import tempfile
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Iterable, List, Optional, Sequence, TypeVar, Union

from pydantic import ValidationError

from snippet_board.models.dtos import StoreDocument

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT")


class StoreError(Exception):
    """Base class for store failures."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.message = message
        self.path = path
        super().__init__(message)


class StoreReadError(StoreError):
    """The document could not be read or does not have the expected shape."""


class StoreWriteError(StoreError):
    """The document could not be serialized or written."""


def next_id(collection: Sequence) -> int:
    """
    Return the id for a new entry of ``collection``.

    ``0`` for an empty collection, otherwise ``max(id) + 1``. Computed from the
    current contents on every call, so ids are never reused even if entries
    were removed out of band.
    """
    if not collection:
        return 0
    return max(entry.id for entry in collection) + 1


def find_by_ids(collection: Iterable[EntityT], ids: Iterable[int]) -> List[EntityT]:
    """
    Return every entry whose id is in ``ids``, in the collection's own order.

    The order of ``ids`` has no effect on the result.
    """
    wanted = set(ids)
    return [entry for entry in collection if entry.id in wanted]


def find_one(collection: Iterable[EntityT], entity_id: int) -> Optional[EntityT]:
    """Return the entry with ``entity_id`` or ``None``."""
    matches = find_by_ids(collection, [entity_id])
    return matches[0] if matches else None


class JsonStore:
    """
    Flat-file store backed by a single JSON document.

    ``transaction()`` serializes read-modify-write cycles inside one process.
    Separate processes writing the same file can still lose updates.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    def init(self) -> bool:
        """
        Create an empty document if none exists.

        Returns:
            bool: True if a new document was written.
        """
        if self.path.exists():
            return False
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreWriteError(f"Could not create store directory: {e}", self.path) from e
        self.save(StoreDocument(cards=[], comments=[]))
        logger.info(f"Created empty store at {self.path}")
        return True

    def load(self) -> StoreDocument:
        """
        Read and parse the whole document.

        Raises:
            StoreReadError: If the file cannot be read or parsed into the store shape.
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to read store {self.path}: {e}")
            raise StoreReadError(f"Could not read store: {e}", self.path) from e

        try:
            return StoreDocument.model_validate(json.loads(raw))
        except (ValueError, ValidationError) as e:
            logger.error(f"Store {self.path} is not a valid document: {e}")
            raise StoreReadError(f"Could not parse store: {e}", self.path) from e

    def save(self, document: StoreDocument) -> None:
        """
        Replace the durable document with ``document``.

        The text is written to a temporary file beside the store and moved over
        it, so a failure leaves the previous content in place.

        Raises:
            StoreWriteError: If serialization or the write fails.
        """
        try:
            text = json.dumps(document.to_json(), indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to serialize store document: {e}")
            raise StoreWriteError(f"Could not serialize store: {e}", self.path) from e

        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"Failed to write store {self.path}: {e}")
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StoreWriteError(f"Could not write store: {e}", self.path) from e

    async def aload(self) -> StoreDocument:
        """Run ``load()`` in the default executor, off the event loop."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.load)

    async def asave(self, document: StoreDocument) -> None:
        """Run ``save()`` in the default executor, off the event loop."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self.save, document)

    def next_id(self, collection: Sequence) -> int:
        return next_id(collection)

    def find_by_ids(self, collection: Iterable[EntityT], ids: Iterable[int]) -> List[EntityT]:
        return find_by_ids(collection, ids)

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[StoreDocument, None]:
        """
        Hold the store lock for a load -> compute -> save cycle.

        Yields the freshly loaded document. Nothing is written implicitly;
        the caller awaits ``asave()`` when it has mutated the document.
        Nothing slow besides store I/O should be awaited inside the block.
        """
        async with self._lock:
            yield await self.aload()
