"""Custom exceptions for Hotel Bot."""
from __future__ import annotations

from typing import Any


class HotelBotError(Exception):
    """Base exception for all Hotel Bot errors."""
    pass


class ConfigurationError(HotelBotError):
    """Raised when configuration is invalid or missing."""
    pass


class DatabaseError(HotelBotError):
    """Raised when database operations fail."""
    pass


class ChannelError(HotelBotError):
    """Raised when channel (Telegram) operations fail."""
    pass


class RegistryError(HotelBotError):
    """Raised when a guest/room request breaks a registry rule."""
    pass


class RoomUnavailableError(RegistryError):
    def __init__(self, room: Any):
        self.room = room
        super().__init__(f"Room {room} is not available.")


class InvalidIdentifierError(RegistryError):
    def __init__(self, guest_id: Any):
        self.guest_id = guest_id
        super().__init__(f"Invalid guest id {guest_id!r}: expected a 9-digit number.")


class EmptyNameError(RegistryError):
    def __init__(self) -> None:
        super().__init__("Guest name must not be empty.")


class EmptyEmailError(RegistryError):
    def __init__(self) -> None:
        super().__init__("Guest email must not be empty.")


class InvalidPaymentMethodError(RegistryError):
    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Unknown payment method {value!r}. Use Credit, Cash or Pix.")


class GuestNotFoundError(RegistryError):
    def __init__(self, guest_id: Any):
        self.guest_id = guest_id
        super().__init__(f"Guest {guest_id} not found.")


class DuplicateGuestError(RegistryError):
    def __init__(self, guest_id: Any):
        self.guest_id = guest_id
        super().__init__(f"Guest id {guest_id} is already registered.")
