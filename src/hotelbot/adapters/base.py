from __future__ import annotations

from typing import ContextManager, List, Optional, Protocol, runtime_checkable

from hotelbot.models import Guest


@runtime_checkable
class RegistryAdapter(Protocol):
    # lifecycle
    def init(self) -> None: ...

    # groups writes so they land together or not at all
    def transaction(self) -> ContextManager[None]: ...

    # guests
    def get_guest(self, guest_id: int) -> Optional[Guest]: ...
    def put_guest(self, guest: Guest) -> None: ...
    def remove_guest(self, guest_id: int) -> bool: ...
    def list_guests(self) -> List[Guest]: ...

    # room pool; None until the pool has been seeded once
    def load_room_pool(self) -> Optional[List[int]]: ...
    def replace_room_pool(self, rooms: List[int]) -> None: ...
