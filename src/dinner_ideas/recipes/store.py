"""Storage operations for the recipe collection.

The whole collection lives in one JSON file inside the profile's document
directory. Every save rewrites the complete file through a temp file and
``os.replace`` so a reader only ever sees the old or the new collection.
"""

import asyncio
import os
import tempfile
from pathlib import Path
from typing import Iterable, Optional, Union
from uuid import UUID

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from ..errors import DecodeError, StoreError, WriteError
from ..logger import get_logger
from ..profile import Profile
from .records import Recipe, sample_items, search_recipes

logger = get_logger("store")

_COLLECTION = TypeAdapter(list[Recipe])

RecipeRef = Union[UUID, str]


def _duplicate_ids(items: Iterable[Recipe]) -> list[UUID]:
    seen: set[UUID] = set()
    duplicates = []
    for recipe in items:
        if recipe.id in seen:
            duplicates.append(recipe.id)
        seen.add(recipe.id)
    return duplicates


def decode_collection(data: Union[bytes, str], source: str = "collection") -> list[Recipe]:
    """Parse serialized recipes, raising DecodeError on any schema mismatch."""
    try:
        items = _COLLECTION.validate_json(data)
    except ValidationError as e:
        raise DecodeError(
            f"{source} is not a valid recipe collection ({e.error_count()} errors): {e}"
        ) from e

    duplicates = _duplicate_ids(items)
    if duplicates:
        raise DecodeError(f"{source} contains duplicate recipe ids: {', '.join(map(str, duplicates))}")
    return items


def encode_collection(items: Iterable[Recipe]) -> bytes:
    try:
        return _COLLECTION.dump_json(list(items), by_alias=True, indent=2)
    except PydanticSerializationError as e:
        raise WriteError(f"Could not serialize recipe collection: {e}") from e


def read_collection(path: Path) -> list[Recipe]:
    """Load the collection at ``path``.

    A missing or unreadable file yields the sample recipes. A file that is
    there but fails to decode raises DecodeError instead.
    """
    try:
        data = path.read_bytes()
    except FileNotFoundError:
        logger.info(f"No collection at {path}, starting from sample recipes")
        return sample_items()
    except OSError as e:
        logger.warning(f"Could not read {path} ({e}), starting from sample recipes")
        return sample_items()

    return decode_collection(data, source=str(path))


def write_bytes_atomic(path: Path, data: bytes) -> None:
    """Replace ``path`` with ``data`` in one step."""
    tmp_path: Optional[Path] = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        tmp_path = Path(tmp_name)
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except OSError as e:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)
        raise WriteError(f"Could not write {path}: {e}") from e


def write_collection(path: Path, items: Iterable[Recipe]) -> None:
    write_bytes_atomic(path, encode_collection(items))


class RecipeStore:
    """Owns the in-memory recipe collection and its file.

    Mutating methods only touch memory; ``save()`` persists the full
    collection. File I/O runs in a worker thread and is serialized by a lock
    private to the store.
    """

    def __init__(self, path: Optional[Path] = None, *, profile: Optional[Profile] = None):
        if path is None:
            path = (profile or Profile.current()).store_file
        self.path = Path(path)
        self._items: list[Recipe] = []
        self._io_lock = asyncio.Lock()
        self.loaded = False
        self.last_error: Optional[StoreError] = None

    @property
    def items(self) -> tuple[Recipe, ...]:
        """Snapshot of the current collection."""
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    async def load(self) -> tuple[Recipe, ...]:
        """Load the collection from disk, keeping the old snapshot on failure."""
        async with self._io_lock:
            try:
                items = await asyncio.to_thread(read_collection, self.path)
            except DecodeError as e:
                self.last_error = e
                logger.error(f"Failed to load recipes: {e}")
                raise

        self._items = items
        self.loaded = True
        self.last_error = None
        logger.debug(f"Loaded {len(items)} recipes from {self.path}")
        return self.items

    async def save(self, items: Optional[Iterable[Recipe]] = None) -> None:
        """Persist the whole collection, optionally replacing it with ``items`` first."""
        if items is not None:
            items = list(items)
            duplicates = _duplicate_ids(items)
            if duplicates:
                raise ValueError(f"Duplicate recipe ids: {', '.join(map(str, duplicates))}")
            self._items = items

        # Serialize on the caller's side so later mutations can't leak into this write
        data = encode_collection(self._items)
        count = len(self._items)

        async with self._io_lock:
            try:
                await asyncio.to_thread(write_bytes_atomic, self.path, data)
            except WriteError as e:
                self.last_error = e
                logger.error(f"Failed to save recipes: {e}")
                raise

        self.last_error = None
        logger.info(f"Saved {count} recipes to {self.path}")

    def _index(self, recipe_id: UUID) -> int:
        for index, recipe in enumerate(self._items):
            if recipe.id == recipe_id:
                return index
        raise KeyError(f"Recipe '{recipe_id}' does not exist.")

    def get(self, recipe_id: RecipeRef) -> Optional[Recipe]:
        try:
            wanted = recipe_id if isinstance(recipe_id, UUID) else UUID(str(recipe_id))
        except ValueError:
            return None
        return next((recipe for recipe in self._items if recipe.id == wanted), None)

    def find(self, ref: str) -> Optional[Recipe]:
        """Look a recipe up by id, id prefix or (case-insensitive) name."""
        ref = ref.strip()
        if not ref:
            return None

        recipe = self.get(ref)
        if recipe:
            return recipe

        lowered = ref.lower()
        for recipe in self._items:
            if recipe.name.lower() == lowered:
                return recipe

        prefixed = [recipe for recipe in self._items if str(recipe.id).startswith(lowered)]
        if len(prefixed) == 1:
            return prefixed[0]
        return None

    def search(self, text: str) -> list[Recipe]:
        return search_recipes(self._items, text)

    def add(self, recipe: Recipe) -> Recipe:
        if any(existing.id == recipe.id for existing in self._items):
            raise ValueError(f"Recipe '{recipe.id}' already exists.")
        self._items.append(recipe)
        logger.debug(f"Added recipe: {recipe.name}")
        return recipe

    def update(self, recipe: Recipe, modifier_id: int = 1) -> Recipe:
        """Replace the stored recipe with the same id."""
        index = self._index(recipe.id)
        recipe.touch(modifier_id)
        self._items[index] = recipe
        logger.debug(f"Updated recipe: {recipe.name}")
        return recipe

    def delete(self, recipe_id: RecipeRef) -> Recipe:
        wanted = recipe_id if isinstance(recipe_id, UUID) else UUID(str(recipe_id))
        removed = self._items.pop(self._index(wanted))
        logger.debug(f"Deleted recipe: {removed.name}")
        return removed

    async def commit(self, recipe: Recipe) -> Recipe:
        """Add a new recipe and persist the collection."""
        self.add(recipe)
        await self.save()
        return recipe


__all__ = [
    "RecipeStore",
    "read_collection",
    "write_collection",
    "decode_collection",
    "encode_collection",
    "write_bytes_atomic",
]
