from .telegram import run_telegram_bot, create_telegram_app

__all__ = [
    "run_telegram_bot",
    "create_telegram_app",
]
