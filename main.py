from __future__ import annotations

import asyncio
import contextlib
import signal

from dotenv import load_dotenv

from galaswap_arb.bot_runtime import AppSettings, guarded_call, run_trading_loop, setup_logger
from galaswap_arb.common import log_event
from galaswap_arb.trading import (
    DryRunFillExecutor,
    GalaSwapClient,
    LiveFillExecutor,
    RiskConfig,
    TradeEngine,
    load_pairs,
)


async def main() -> int:
    load_dotenv()
    app_settings = AppSettings.from_env()
    logger = setup_logger(app_settings.log_level)

    try:
        app_settings.require_credentials()
        risk = RiskConfig.from_env()
        pairs = load_pairs(app_settings.pairs)
    except ValueError as error:
        log_event(logger, level="critical", event="startup_failed", message=str(error))
        return 1

    client = GalaSwapClient(
        logger=logger,
        api_base_url=app_settings.api_base_url,
        wallet_address=app_settings.wallet_address,
        timeout_seconds=app_settings.request_timeout_seconds,
    )
    if app_settings.dry_run:
        executor: DryRunFillExecutor | LiveFillExecutor = DryRunFillExecutor(logger=logger)
    else:
        executor = LiveFillExecutor(logger=logger, venue=client)

    engine = TradeEngine(
        logger=logger,
        venue=client,
        executor=executor,
        risk=risk,
        wallet_address=app_settings.wallet_address,
        private_key=app_settings.private_key,
        signer_public_key=app_settings.signer_public_key,
    )

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()

    def request_shutdown(sig: signal.Signals) -> None:
        logger.info(
            "Shutdown signal received",
            extra={"event": "shutdown_signal_received", "signal": sig.name},
        )
        stop_event.set()

    for sig in (signal.SIGTERM, signal.SIGINT):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, request_shutdown, sig)

    log_event(
        logger,
        level="info",
        event="bot_started",
        message="Connect bot starting",
        dry_run=app_settings.dry_run,
        pairs=[pair.symbol for pair in pairs],
        watch_interval_seconds=app_settings.watch_interval_seconds,
        **risk.to_dict(),
    )

    try:
        await run_trading_loop(
            logger=logger,
            stop_event=stop_event,
            engine=engine,
            pairs=pairs,
            watch_interval_seconds=app_settings.watch_interval_seconds,
        )
    finally:
        await guarded_call(
            client.close,
            logger=logger,
            event="shutdown_close_failed",
            message="Failed to close GalaSwap client",
        )
        logger.info("Shutdown completed", extra={"event": "shutdown_completed"})

    return 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
