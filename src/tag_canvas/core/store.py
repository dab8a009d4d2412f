"""Ordered storage of tag areas and their drawable sets."""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Sequence, Tuple

from .exceptions import TagIndexError
from .models import DrawableSet, TagArea

logger = logging.getLogger(__name__)


class AnnotationStore:
    """
    Tag area records with their drawable sets kept in lockstep.

    Index ``i`` of the records and index ``i`` of the drawable sets always
    describe the same tag area. The store never builds or removes primitives;
    callers hand the drawable sets in and take them back out.
    """

    def __init__(self) -> None:
        self._data: List[TagArea] = []
        self._drawables: List[DrawableSet] = []

    def __len__(self) -> int:
        return len(self._data)

    @property
    def data(self) -> List[TagArea]:
        """Snapshot of the records, in order."""
        return list(self._data)

    def entries(self) -> Iterator[Tuple[int, TagArea, DrawableSet]]:
        """Iterate ``(index, data, drawables)`` triples."""
        for i, (data, drawables) in enumerate(zip(self._data, self._drawables)):
            yield i, data, drawables

    def append(self, data: TagArea, drawables: DrawableSet) -> int:
        """
        Append a tag area and its drawable set.

        Returns:
            Index of the new tag area
        """
        self._data.append(data)
        self._drawables.append(drawables)
        index = len(self._data) - 1
        logger.debug(f"Appended {data.type.value} tag area at index {index}")
        return index

    def get(self, index: int) -> Tuple[TagArea, DrawableSet]:
        """
        Get the record and drawable set at ``index``.

        Raises:
            TagIndexError: If ``index`` is out of range
        """
        self._check_index(index)
        return self._data[index], self._drawables[index]

    def remove_at(self, index: int) -> Tuple[TagArea, DrawableSet]:
        """
        Remove and return the record and drawable set at ``index``.

        Raises:
            TagIndexError: If ``index`` is out of range
        """
        self._check_index(index)
        data = self._data.pop(index)
        drawables = self._drawables.pop(index)
        logger.debug(f"Removed tag area at index {index}")
        return data, drawables

    def replace_all(self, records: Sequence[TagArea], drawable_sets: Sequence[DrawableSet]) -> None:
        """
        Swap the whole contents in one step.

        The caller is responsible for having built ``drawable_sets`` for
        ``records`` and for detaching the primitives of the previous contents.

        Raises:
            ValueError: If the two sequences differ in length
        """
        if len(records) != len(drawable_sets):
            raise ValueError(
                f"Got {len(records)} records but {len(drawable_sets)} drawable sets"
            )
        self._data = list(records)
        self._drawables = list(drawable_sets)
        logger.debug(f"Replaced store contents with {len(self._data)} tag areas")

    def index_of(self, data: TagArea) -> Optional[int]:
        """Index of the given record object, or None if it is not stored."""
        for i, stored in enumerate(self._data):
            if stored is data:
                return i
        return None

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._data):
            raise TagIndexError(index, len(self._data))
