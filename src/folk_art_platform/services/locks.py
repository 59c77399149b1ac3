"""Per-artist serialization for booking and rating writes."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from uuid import UUID


class ArtistLocks:
    """Hands out one lock per artist so check-then-write runs alone."""

    def __init__(self) -> None:
        self._locks: dict[UUID, threading.Lock] = {}
        self._guard = threading.Lock()

    @contextmanager
    def hold(self, artist_id: UUID) -> Iterator[None]:
        """Hold the artist's lock for the duration of the block."""
        with self._guard:
            lock = self._locks.setdefault(artist_id, threading.Lock())
        with lock:
            yield
