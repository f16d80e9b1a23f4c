from __future__ import annotations
import inspect
from typing import Callable, Dict, List, Optional

from langchain_core.tools import StructuredTool
from pydantic import BaseModel, Field

from hotelbot.config import get_config
from hotelbot.services import Registry

# Registry owned by the hosting process
_registry: Optional[Registry] = None


# ------------------------------------
# Interface utilities
# ------------------------------------
def tool(func: Callable) -> Callable:
    """Marks a function the LLM agent may call."""
    func._is_tool = True
    func._tool_name = func.__name__
    func._tool_description = inspect.cleandoc(func.__doc__ or "")
    return func


def get_registry() -> Registry:
    """
    Returns the registry in use, building it from the active config on
    first access.
    """
    global _registry
    if _registry is None:
        _registry = get_config().create_registry()
    return _registry


def set_registry(registry: Optional[Registry]) -> None:
    """Installs the registry the tools operate on (used by main.py and tests)."""
    global _registry
    _registry = registry


from .guest_tools import (
    register_guest,
    get_guest_details,
    update_guest_details,
    check_out_guest,
    list_guests,
)
from .room_tools import list_available_rooms


# ------------------------------------
# LangChain argument schemas
# ------------------------------------
class RegisterGuestInput(BaseModel):
    """Check-in parameters with strict types."""
    guest_id: int = Field(description="9-digit guest id (integer only)")
    name: str = Field(description="Guest full name")
    email: str = Field(description="Guest email address")
    room: int = Field(description="Free room number (integer only)")
    payment_method: str = Field(default="Credit", description="Credit, Cash or Pix")


class UpdateGuestInput(BaseModel):
    """Fields to change on an existing guest; omit the ones that stay the same."""
    guest_id: int = Field(description="Current 9-digit guest id (integer only)")
    new_guest_id: Optional[int] = Field(default=None, description="New 9-digit guest id")
    name: Optional[str] = Field(default=None, description="New full name")
    email: Optional[str] = Field(default=None, description="New email address")
    payment_method: Optional[str] = Field(default=None, description="Credit, Cash or Pix")
    room: Optional[int] = Field(default=None, description="Free room to move the guest to")


TOOL_FUNCTIONS = [
    list_available_rooms,
    list_guests,
    get_guest_details,
    register_guest,
    update_guest_details,
    check_out_guest,
]

ARGS_SCHEMAS = {
    "register_guest": RegisterGuestInput,
    "update_guest_details": UpdateGuestInput,
}

_tools: Optional[List[StructuredTool]] = None
_tool_map: Dict[str, StructuredTool] = {}


def get_tools() -> List[StructuredTool]:
    """
    LangChain `StructuredTool` list (lazy init), named and described from
    the `@tool` markers.
    """
    global _tools, _tool_map
    if _tools is None:
        _tools = [
            StructuredTool.from_function(
                func=func,
                name=func._tool_name,
                description=func._tool_description,
                args_schema=ARGS_SCHEMAS.get(func._tool_name),
            )
            for func in TOOL_FUNCTIONS
            if getattr(func, "_is_tool", False)
        ]
        _tool_map = {t.name: t for t in _tools}

    return _tools


def get_tool_map() -> Dict[str, StructuredTool]:
    """Maps tool names to their `StructuredTool`."""
    if not _tool_map:
        get_tools()
    return _tool_map


__all__ = [
    # Utilities
    "tool",
    "get_registry",
    "set_registry",

    # Tools
    "register_guest",
    "get_guest_details",
    "update_guest_details",
    "check_out_guest",
    "list_guests",
    "list_available_rooms",

    # LangChain helpers
    "RegisterGuestInput",
    "UpdateGuestInput",
    "get_tools",
    "get_tool_map",
]
