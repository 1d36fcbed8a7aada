import asyncio
import logging
from cafe_api.services.reorder_service import check_and_reorder
from cafe_api.core.db import init_db, close_db
from cafe_api.core.config import LOG_LEVEL, REORDER_INTERVAL

logging.basicConfig(level=LOG_LEVEL, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
log = logging.getLogger("reorder_poller")


async def run_reorder_sweep():
    """Runs one auto-reorder pass, logging instead of raising so the loop survives DB hiccups."""
    try:
        log.debug("Checking for items to auto-reorder...")
        replenished = await check_and_reorder()
        if replenished:
            log.info(f"Auto-reorder sweep replenished {len(replenished)} item(s).")
    except Exception as e:
        log.error(f"Error in auto-reorder sweep: {e}", exc_info=True)


async def run_reorder_poller(interval: int = REORDER_INTERVAL):
    """Main loop: sweep once immediately, then every `interval` seconds until cancelled."""
    log.info(f"--- Reorder Poller Started (interval: {interval}s) ---")
    try:
        while True:
            await run_reorder_sweep()
            await asyncio.sleep(interval)
    except asyncio.CancelledError:
        log.info("Reorder poller stopped (cancellation requested).")
        raise


async def main():
    await init_db()
    try:
        await run_reorder_poller()
    finally:
        await close_db()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        log.info("Reorder poller service stopped.")
