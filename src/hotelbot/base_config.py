"""
Base configuration abstractions for Hotel Bot.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from hotelbot.adapters.base import RegistryAdapter
from hotelbot.services.clock import DEFAULT_UTC_OFFSET_HOURS, TimestampRenderer
from hotelbot.services.registry import Registry


class HotelBotConfig(ABC):
    """Abstract configuration contract for the registry and its channels."""

    @abstractmethod
    def get_database_url(self) -> str: pass

    @abstractmethod
    def get_groq_api_key(self) -> Optional[str]: pass

    @abstractmethod
    def get_groq_model(self) -> str: pass

    @abstractmethod
    def get_llm_timeout(self) -> int: pass

    @abstractmethod
    def get_telegram_bot_token(self) -> Optional[str]: pass

    @abstractmethod
    def create_adapter(self) -> RegistryAdapter: pass

    def get_hotel_display_name(self) -> str: return "Hotel Bot"
    def get_utc_offset_hours(self) -> float: return DEFAULT_UTC_OFFSET_HOURS

    def create_registry(self) -> Registry:
        """Builds the registry the hosting process owns for its lifetime."""
        return Registry(
            adapter=self.create_adapter(),
            time_renderer=TimestampRenderer(self.get_utc_offset_hours()),
        )

    def get_system_prompt(self) -> str:
        name = self.get_hotel_display_name()
        now = datetime.now()
        current_date = now.strftime("%Y-%m-%d")
        current_time = now.strftime("%H:%M")

        return f"""You are the front desk assistant of {name}.
CURRENT DATE: {current_date}
CURRENT TIME: {current_time}

You help the staff check guests in and out and keep guest records up to date.

CHECK-IN
- A check-in needs: a 9-digit guest id, full name, email, a free room and the
  payment method (Credit, Cash or Pix; Credit when the staff does not say).
- Call 'list_available_rooms' before suggesting a room. Never invent room numbers.
- Only call 'register_guest' once every field is known. Do not invent names or emails.

UPDATES AND CHECK-OUT
- Use 'get_guest_details' to show a guest before changing anything.
- 'update_guest_details' only changes the fields you pass.
- 'check_out_guest' frees the room; confirm the guest id with the staff first.

STRICT TOOL RULES:
- guest_id, new_guest_id and room MUST be raw integers (e.g. 123456789, NOT "123456789").
- NEVER use markdown inside tool arguments.
- Report tool errors to the staff as they are; do not retry with guessed values.
"""
