from __future__ import annotations

from hotelbot.tools import tool, get_registry


@tool
def list_available_rooms() -> str:
    """
    Lists the free rooms in pool order.
    """
    rooms = get_registry().list_available_rooms()
    if not rooms:
        return "❌ No rooms are available right now."
    return f"Available rooms ({len(rooms)}): " + ", ".join(str(r) for r in rooms)
