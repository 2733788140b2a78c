"""In-memory sighting collection.

The client-side list every view reads from. It is ordered most recent
first: new sightings are prepended and ``load`` sorts by timestamp.
Mutations come from completed service calls only.

Example:
    >>> from findr.collection import SightingCollection
    >>> collection = SightingCollection()
    >>> collection.add(sighting)
    >>> collection.get(sighting.id) is sighting
    True
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from findr.models.sighting import Sighting


class SightingCollection:
    """Most-recent-first list of sightings keyed by id."""

    def __init__(self, sightings: Iterable[Sighting] = ()) -> None:
        self._items: list[Sighting] = []
        self.load(sightings)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Sighting]:
        return iter(list(self._items))

    def __contains__(self, sighting_id: object) -> bool:
        return self._index(sighting_id) is not None

    @property
    def items(self) -> list[Sighting]:
        """Snapshot of the collection."""
        return list(self._items)

    def _index(self, sighting_id: object) -> int | None:
        for i, s in enumerate(self._items):
            if s.id == sighting_id:
                return i
        return None

    def add(self, sighting: Sighting) -> None:
        """Prepend, replacing any existing entry with the same id."""
        self.remove(sighting.id)
        self._items.insert(0, sighting)

    def replace(self, sighting: Sighting, previous_id: str | None = None) -> bool:
        """Swap an entry in place.

        Args:
            sighting: The new version
            previous_id: Id of the entry to replace when it differs from
                ``sighting.id`` (a local sighting that got a stored id)

        Returns:
            False if no matching entry exists.
        """
        index = self._index(previous_id or sighting.id)
        if index is None:
            return False
        self._items[index] = sighting
        return True

    def remove(self, sighting_id: str) -> Sighting | None:
        index = self._index(sighting_id)
        if index is None:
            return None
        return self._items.pop(index)

    def get(self, sighting_id: str) -> Sighting | None:
        index = self._index(sighting_id)
        return self._items[index] if index is not None else None

    def for_owner(self, user_id: str) -> list[Sighting]:
        return [s for s in self._items if s.user_id == user_id]

    def pending(self) -> list[Sighting]:
        """Sightings not yet in the hosted store."""
        return [s for s in self._items if s.is_pending]

    def load(self, sightings: Iterable[Sighting]) -> None:
        """Replace the contents, sorted newest first."""
        self._items = sorted(sightings, key=lambda s: s.timestamp, reverse=True)
