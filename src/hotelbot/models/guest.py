from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict

from hotelbot.exceptions import InvalidPaymentMethodError


class PaymentMethod(str, Enum):
    """Accepted payment methods. Closed set: every consumer matches all members."""

    CREDIT = "Credit"
    CASH = "Cash"
    PIX = "Pix"

    @classmethod
    def parse(cls, value: Any) -> PaymentMethod:
        """Accepts a member or its value in any letter case ('pix', 'CASH')."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if member.value.lower() == wanted:
                    return member
        raise InvalidPaymentMethodError(value)

    def label(self) -> str:
        if self is PaymentMethod.CREDIT:
            return "Credit card"
        elif self is PaymentMethod.CASH:
            return "Cash"
        elif self is PaymentMethod.PIX:
            return "Pix transfer"
        raise ValueError(f"Unhandled payment method: {self!r}")


@dataclass
class Guest:
    """A hotel occupant and the room assigned to them."""

    id: int
    name: str
    email: str
    room: int
    payment_method: PaymentMethod = field(default=PaymentMethod.CREDIT)
    # milliseconds since the Unix epoch, set once at check-in
    checkin_time: int = field(default=0)

    def to_dict(self) -> Dict[str, Any]:
        data = self.__dict__.copy()
        data["payment_method"] = self.payment_method.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Guest:
        data = dict(data)
        if "payment_method" in data:
            data["payment_method"] = PaymentMethod.parse(data["payment_method"])

        field_names = {f.name for f in cls.__dataclass_fields__.values()}
        filtered_data = {k: v for k, v in data.items() if k in field_names}

        return cls(**filtered_data)


@dataclass(frozen=True)
class GuestView:
    """Read-only snapshot of a guest, with the check-in time already rendered."""

    id: int
    name: str
    email: str
    room: int
    payment_method: PaymentMethod
    checkin_time: int
    checkin_time_display: str

    @classmethod
    def from_guest(cls, guest: Guest, checkin_time_display: str) -> GuestView:
        return cls(
            id=guest.id,
            name=guest.name,
            email=guest.email,
            room=guest.room,
            payment_method=guest.payment_method,
            checkin_time=guest.checkin_time,
            checkin_time_display=checkin_time_display,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "room": self.room,
            "payment_method": self.payment_method.value,
            "checkin_time": self.checkin_time,
            "checkin_time_display": self.checkin_time_display,
        }
