"""
Guest registry: guests keyed by id plus the pool of free rooms.

Every room of ROOM_NUMBERS is either in the pool or assigned to exactly one
guest. Each public method validates everything it needs before writing, and
writes through a single adapter transaction, so a rejected call leaves both
the guests and the pool untouched.

The registry assumes one caller at a time. Hosts that serve concurrent
requests must serialise mutations themselves.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable, List, Optional, Type

from hotelbot.adapters.base import RegistryAdapter
from hotelbot.adapters.memory_adapter import InMemoryRegistryAdapter
from hotelbot.exceptions import (
    DuplicateGuestError,
    EmptyEmailError,
    EmptyNameError,
    GuestNotFoundError,
    InvalidIdentifierError,
    RegistryError,
    RoomUnavailableError,
)
from hotelbot.models import Guest, GuestView, PaymentMethod
from hotelbot.services.clock import SystemClock, TimestampRenderer

logger = logging.getLogger(__name__)

ROOM_NUMBERS = tuple(range(1, 21))

# 9-digit ids: MIN_GUEST_ID is exclusive, MAX_GUEST_ID inclusive
MIN_GUEST_ID = 99_999_999
MAX_GUEST_ID = 999_999_999


def _validate_guest_id(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidIdentifierError(value)
    if not (MIN_GUEST_ID < value <= MAX_GUEST_ID):
        raise InvalidIdentifierError(value)
    return value


def _room_is_free(room: Any, pool: List[int]) -> bool:
    return isinstance(room, int) and not isinstance(room, bool) and room in pool


def _require_text(value: Any, error: Type[RegistryError]) -> str:
    if not isinstance(value, str) or not value.strip():
        raise error()
    return value.strip()


class Registry:
    """Owns the guest records and the room pool and keeps them consistent."""

    def __init__(
        self,
        adapter: Optional[RegistryAdapter] = None,
        clock: Optional[Callable[[], int]] = None,
        time_renderer: Optional[Callable[[int], str]] = None,
    ):
        self.adapter = adapter if adapter is not None else InMemoryRegistryAdapter()
        self.clock = clock if clock is not None else SystemClock()
        self.render_time = time_renderer if time_renderer is not None else TimestampRenderer()

        if self.adapter.load_room_pool() is None:
            logger.info(f"Seeding room pool with rooms {ROOM_NUMBERS[0]}-{ROOM_NUMBERS[-1]}.")
            self.adapter.replace_room_pool(list(ROOM_NUMBERS))

    def _room_pool(self) -> List[int]:
        return self.adapter.load_room_pool() or []

    def _view(self, guest: Guest) -> GuestView:
        return GuestView.from_guest(guest, self.render_time(guest.checkin_time))

    # ------------------------------------
    # Mutations
    # ------------------------------------
    def add_guest(
        self,
        guest_id: int,
        name: str,
        email: str,
        room: int,
        payment_method: Any = PaymentMethod.CREDIT,
    ) -> None:
        """Checks a guest into a free room.

        Raises RoomUnavailableError, InvalidIdentifierError, EmptyNameError,
        EmptyEmailError, InvalidPaymentMethodError or DuplicateGuestError,
        checked in that order.
        """
        pool = self._room_pool()
        if not _room_is_free(room, pool):
            logger.warning(f"Check-in rejected: room {room} is not available.")
            raise RoomUnavailableError(room)

        guest_id = _validate_guest_id(guest_id)
        name = _require_text(name, EmptyNameError)
        email = _require_text(email, EmptyEmailError)
        payment_method = PaymentMethod.parse(payment_method)

        if self.adapter.get_guest(guest_id) is not None:
            logger.warning(f"Check-in rejected: guest id {guest_id} already registered.")
            raise DuplicateGuestError(guest_id)

        guest = Guest(
            id=guest_id,
            name=name,
            email=email,
            room=room,
            payment_method=payment_method,
            checkin_time=self.clock(),
        )
        pool.remove(room)

        with self.adapter.transaction():
            self.adapter.put_guest(guest)
            self.adapter.replace_room_pool(pool)

        logger.info(f"Guest {guest_id} checked into room {room}.")

    def update_guest(
        self,
        guest_id: int,
        new_id: Optional[int] = None,
        name: Optional[str] = None,
        email: Optional[str] = None,
        payment_method: Any = None,
        room: Optional[int] = None,
    ) -> bool:
        """Replaces the supplied fields of a guest.

        All supplied fields are validated on a staged copy first; the stored
        record and the pool only change when every field is valid. A supplied
        room must be free, so the guest's own room is rejected. Moving a
        guest returns their previous room to the end of the pool.
        """
        current = self.adapter.get_guest(guest_id)
        if current is None:
            raise GuestNotFoundError(guest_id)

        staged = replace(current)
        pool = self._room_pool()

        if new_id is not None:
            staged.id = _validate_guest_id(new_id)
            if staged.id != current.id and self.adapter.get_guest(staged.id) is not None:
                raise DuplicateGuestError(staged.id)

        if name is not None:
            staged.name = _require_text(name, EmptyNameError)

        if email is not None:
            staged.email = _require_text(email, EmptyEmailError)

        if payment_method is not None:
            staged.payment_method = PaymentMethod.parse(payment_method)

        if room is not None:
            if not _room_is_free(room, pool):
                logger.warning(f"Update of guest {guest_id} rejected: room {room} is not available.")
                raise RoomUnavailableError(room)
            pool.append(current.room)
            pool.remove(room)
            staged.room = room

        with self.adapter.transaction():
            if staged.id != current.id:
                self.adapter.remove_guest(current.id)
            self.adapter.put_guest(staged)
            if staged.room != current.room:
                self.adapter.replace_room_pool(pool)

        logger.info(f"Guest {guest_id} updated.")
        return True

    def delete_guest(self, guest_id: int) -> bool:
        """Checks a guest out and frees their room."""
        guest = self.adapter.get_guest(guest_id)
        if guest is None:
            raise GuestNotFoundError(guest_id)

        pool = self._room_pool()
        pool.append(guest.room)

        with self.adapter.transaction():
            self.adapter.remove_guest(guest_id)
            self.adapter.replace_room_pool(pool)

        logger.info(f"Guest {guest_id} checked out of room {guest.room}.")
        return True

    # ------------------------------------
    # Reads
    # ------------------------------------
    def get_guest(self, guest_id: int) -> Optional[GuestView]:
        guest = self.adapter.get_guest(guest_id)
        if guest is None:
            return None
        return self._view(guest)

    def list_guests(self) -> List[GuestView]:
        guests = sorted(self.adapter.list_guests(), key=lambda g: g.id)
        return [self._view(g) for g in guests]

    def list_available_rooms(self) -> List[int]:
        return self._room_pool()
