from __future__ import annotations
from typing import Any, Optional
import logging

from hotelbot.tools import tool, get_registry
from hotelbot.models import GuestView
from hotelbot.exceptions import DatabaseError, RegistryError

logger = logging.getLogger(__name__)


# ------------------------------------
# Helpers
# ------------------------------------

def _extract_int(value: Any, label: str) -> int:
    """
    Accepts ints and digit strings ('123456789', ' 5 ') coming from chat or
    LLM arguments.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid {label}: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            raise ValueError(f"Invalid {label}: {value!r}. A number is expected.")
    raise ValueError(f"{label} must be int or str, got {type(value).__name__}")


def format_guest(guest: GuestView) -> str:
    result = f"Guest ID: **{guest.id}**\n"
    result += f"Name: {guest.name}\n"
    result += f"Email: {guest.email}\n"
    result += f"Room: {guest.room}\n"
    result += f"Payment: {guest.payment_method.label()}\n"
    result += f"Checked in: {guest.checkin_time_display}\n"
    return result


# ------------------------------------
# TOOLS IMPLEMENTATION
# ------------------------------------

@tool
def register_guest(
    guest_id: Any,
    name: str,
    email: str,
    room: Any,
    payment_method: str = "Credit",
) -> str:
    """
    Checks a new guest into a free room. Id, name, email and room are required.
    """
    try:
        gid = _extract_int(guest_id, "guest id")
        room_number = _extract_int(room, "room")
    except ValueError as e:
        return f"❌ Error: {e}"

    registry = get_registry()
    try:
        registry.add_guest(gid, name, email, room_number, payment_method)
    except RegistryError as e:
        return f"❌ Check-in failed: {e}"
    except DatabaseError as e:
        logger.error(f"Database error during check-in of {gid}: {e}")
        return f"❌ Error: the guest could not be saved: {e}"

    guest = registry.get_guest(gid)
    return "✅ Guest checked in!\n\n" + format_guest(guest)


@tool
def get_guest_details(guest_id: Any) -> str:
    """
    Shows a guest's record by 9-digit guest id.
    """
    try:
        gid = _extract_int(guest_id, "guest id")
    except ValueError as e:
        return f"❌ Error: {e}"

    guest = get_registry().get_guest(gid)
    if guest is None:
        return f"❌ Error: no guest with id {gid}."

    return "Guest details:\n\n" + format_guest(guest)


@tool
def update_guest_details(
    guest_id: Any,
    new_guest_id: Optional[Any] = None,
    name: Optional[str] = None,
    email: Optional[str] = None,
    payment_method: Optional[str] = None,
    room: Optional[Any] = None,
) -> str:
    """
    Changes id, name, email, payment method or room of a checked-in guest;
    other fields stay as they are.
    """
    try:
        gid = _extract_int(guest_id, "guest id")
        new_gid = _extract_int(new_guest_id, "new guest id") if new_guest_id is not None else None
        room_number = _extract_int(room, "room") if room is not None else None
    except ValueError as e:
        return f"❌ Error: {e}"

    if all(v is None for v in (new_gid, name, email, payment_method, room_number)):
        return "❌ Error: tell me at least one field to change."

    registry = get_registry()
    try:
        registry.update_guest(
            gid,
            new_id=new_gid,
            name=name,
            email=email,
            payment_method=payment_method,
            room=room_number,
        )
    except RegistryError as e:
        return f"❌ Update failed: {e}"
    except DatabaseError as e:
        logger.error(f"Database error while updating guest {gid}: {e}")
        return f"❌ Error: the guest could not be updated: {e}"

    guest = registry.get_guest(new_gid if new_gid is not None else gid)
    return "✅ Guest updated!\n\n" + format_guest(guest)


@tool
def check_out_guest(guest_id: Any) -> str:
    """
    Checks a guest out and frees their room.
    """
    try:
        gid = _extract_int(guest_id, "guest id")
    except ValueError as e:
        return f"❌ Error: {e}"

    registry = get_registry()
    guest = registry.get_guest(gid)
    try:
        registry.delete_guest(gid)
    except RegistryError as e:
        return f"❌ Check-out failed: {e}"
    except DatabaseError as e:
        logger.error(f"Database error during check-out of {gid}: {e}")
        return f"❌ Error: the check-out could not be saved: {e}"

    return f"✅ Guest **{gid}** checked out. Room {guest.room} is free again."


@tool
def list_guests() -> str:
    """
    Lists every checked-in guest with their room.
    """
    guests = get_registry().list_guests()
    if not guests:
        return "No guests are checked in."

    result = f"Checked-in guests ({len(guests)}):\n"
    for guest in guests:
        result += f"\n- {guest.id}: {guest.name}, room {guest.room} ({guest.payment_method.value})"
    return result
