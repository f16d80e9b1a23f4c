from __future__ import annotations
import asyncio
import logging

from hotelbot.channels import run_telegram_bot, create_telegram_app
from hotelbot.config import get_config
from hotelbot.tools import set_registry

logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=logging.INFO)
logger = logging.getLogger(__name__)


def main():
    try:
        # one registry for the whole process, shared by every handler
        registry = get_config().create_registry()
        set_registry(registry)

        app = create_telegram_app()
        asyncio.run(run_telegram_bot(app))
    except KeyboardInterrupt:
        logger.info("Stopped by user")
    except Exception as e:
        logger.error(f"System Error: {e}", exc_info=True)


if __name__ == "__main__":
    main()
