#!/usr/bin/env python3
"""Voice-assistant to IR / Roku / home automation bridge."""

import asyncio
import logging
import signal

from irbridge_app import IrBridge
from settings import Settings, load_settings

logger = logging.getLogger(__name__)


async def main(settings: Settings):
    """Main entry point."""
    app = IrBridge(settings)
    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()

    async def runner():
        try:
            await app.start()
        except asyncio.CancelledError:
            pass
        finally:
            await app.stop()
            stop_event.set()

    task = loop.create_task(runner())

    def _shutdown():
        if not task.done():
            logger.info("Shutting down...")
            task.cancel()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _shutdown)
        except NotImplementedError:
            pass

    await stop_event.wait()


def run():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    settings = load_settings()
    if settings.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    asyncio.run(main(settings))


if __name__ == "__main__":
    run()
