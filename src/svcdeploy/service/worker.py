"""The default payload run by a deployed service.

Logs a heartbeat every interval until SIGTERM or SIGINT arrives, so the
service stays observable while the lifecycle run holds it alive.
"""

import asyncio
import logging
import signal

logger = logging.getLogger(__name__)


async def run_worker(interval: float = 5.0) -> int:
    """Run the heartbeat loop.

    Args:
        interval: Seconds between heartbeats.

    Returns:
        Number of heartbeats emitted.
    """
    shutdown_event = asyncio.Event()
    loop = asyncio.get_running_loop()

    installed: list[signal.Signals] = []
    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            loop.add_signal_handler(sig, shutdown_event.set)
            installed.append(sig)
        except (NotImplementedError, RuntimeError):
            # Windows event loops have no signal handler support
            logger.debug("Signal handler for %s not installed", sig.name)

    logger.info("Worker started (interval %.1fs)", interval)
    beats = 0
    while not shutdown_event.is_set():
        beats += 1
        logger.info("Heartbeat %d", beats)
        try:
            await asyncio.wait_for(shutdown_event.wait(), timeout=interval)
        except TimeoutError:
            pass

    for sig in installed:
        loop.remove_signal_handler(sig)

    logger.info("Worker stopping after %d heartbeats", beats)
    return beats
