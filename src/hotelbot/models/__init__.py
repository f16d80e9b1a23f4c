from .guest import Guest, GuestView, PaymentMethod

__all__ = [
    "Guest",
    "GuestView",
    "PaymentMethod",
]
