"""Hotel Bot Core - guest and room registry"""

__version__ = "0.1.0"

# Core abstractions
from .base_config import HotelBotConfig

# Exceptions
from .exceptions import (
    HotelBotError,
    ConfigurationError,
    DatabaseError,
    ChannelError,
    RegistryError,
    RoomUnavailableError,
    InvalidIdentifierError,
    EmptyNameError,
    EmptyEmailError,
    InvalidPaymentMethodError,
    GuestNotFoundError,
    DuplicateGuestError,
)

# Config management
from .config import get_config, set_config

# Models
from .models import Guest, GuestView, PaymentMethod

# Adapters
from .adapters import RegistryAdapter, InMemoryRegistryAdapter, SQLiteRegistryAdapter

# Registry
from .services import Registry, ROOM_NUMBERS

__all__ = [
    # Version
    "__version__",

    # Core
    "HotelBotConfig",
    "Registry",
    "ROOM_NUMBERS",

    # Exceptions
    "HotelBotError",
    "ConfigurationError",
    "DatabaseError",
    "ChannelError",
    "RegistryError",
    "RoomUnavailableError",
    "InvalidIdentifierError",
    "EmptyNameError",
    "EmptyEmailError",
    "InvalidPaymentMethodError",
    "GuestNotFoundError",
    "DuplicateGuestError",

    # Config
    "get_config",
    "set_config",

    # Models
    "Guest",
    "GuestView",
    "PaymentMethod",

    # Adapters
    "RegistryAdapter",
    "InMemoryRegistryAdapter",
    "SQLiteRegistryAdapter",
]
