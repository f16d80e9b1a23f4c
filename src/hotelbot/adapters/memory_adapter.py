from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import replace
from typing import Dict, Iterator, List, Optional

from hotelbot.models import Guest

logger = logging.getLogger(__name__)


class InMemoryRegistryAdapter:
    """Process-local storage for guests and the room pool.

    Guests are copied on the way in and out so callers never hold a
    reference to the stored record.
    """

    def __init__(self) -> None:
        self._guests: Dict[int, Guest] = {}
        self._room_pool: Optional[List[int]] = None
        self._in_transaction = False

    def init(self) -> None:
        logger.info("In-memory registry storage ready.")

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self._in_transaction:
            yield
            return

        guests_snapshot = dict(self._guests)
        pool_snapshot = None if self._room_pool is None else list(self._room_pool)
        self._in_transaction = True
        try:
            yield
        except Exception:
            self._guests = guests_snapshot
            self._room_pool = pool_snapshot
            raise
        finally:
            self._in_transaction = False

    def get_guest(self, guest_id: int) -> Optional[Guest]:
        guest = self._guests.get(guest_id)
        return replace(guest) if guest is not None else None

    def put_guest(self, guest: Guest) -> None:
        self._guests[guest.id] = replace(guest)

    def remove_guest(self, guest_id: int) -> bool:
        return self._guests.pop(guest_id, None) is not None

    def list_guests(self) -> List[Guest]:
        return [replace(g) for g in self._guests.values()]

    def load_room_pool(self) -> Optional[List[int]]:
        if self._room_pool is None:
            return None
        return list(self._room_pool)

    def replace_room_pool(self, rooms: List[int]) -> None:
        self._room_pool = list(rooms)
