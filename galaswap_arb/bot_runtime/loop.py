from __future__ import annotations

import asyncio
import logging
from collections import Counter
from typing import Sequence

from galaswap_arb.common import log_event
from galaswap_arb.trading import PairConfig, PairOutcome, TradeEngine
from galaswap_arb.trading.types import OUTCOME_ERROR

from .guards import error_fields, guarded_call


async def wait_with_stop(stop_event: asyncio.Event, timeout_seconds: float) -> None:
    if timeout_seconds <= 0:
        return

    try:
        await asyncio.wait_for(stop_event.wait(), timeout=timeout_seconds)
    except asyncio.TimeoutError:
        pass


async def run_cycle(
    *,
    logger: logging.Logger,
    engine: TradeEngine,
    pairs: Sequence[PairConfig],
) -> list[PairOutcome]:
    log_event(
        logger,
        level="info",
        event="cycle_started",
        message="Evaluation cycle started",
        pairs=[pair.symbol for pair in pairs],
    )

    prices = await guarded_call(
        engine.venue.fetch_prices,
        logger=logger,
        event="price_snapshot_failed",
        message="Could not load USD reference prices; skipping cycle",
        level="error",
    )
    if prices is None:
        return []

    outcomes: list[PairOutcome] = []
    for pair in pairs:
        try:
            outcome = await engine.evaluate_pair(pair=pair, prices=prices)
        except asyncio.CancelledError:
            raise
        except Exception as error:
            details = error_fields(error)
            log_event(
                logger,
                level="exception",
                event="pair_error",
                message="Pair evaluation failed",
                pair=pair.symbol,
                error=str(error),
                **details,
            )
            outcome = PairOutcome(
                pair=pair.symbol,
                status=OUTCOME_ERROR,
                reason=details["reason"],
                error=str(error),
            )
        outcomes.append(outcome)

    log_event(
        logger,
        level="info",
        event="cycle_completed",
        message="Done.",
        priced_tokens=len(prices),
        statuses=dict(Counter(outcome.status for outcome in outcomes)),
    )
    return outcomes


async def run_trading_loop(
    *,
    logger: logging.Logger,
    stop_event: asyncio.Event,
    engine: TradeEngine,
    pairs: Sequence[PairConfig],
    watch_interval_seconds: float,
) -> None:
    loop = asyncio.get_running_loop()

    while not stop_event.is_set():
        cycle_started = loop.time()
        await run_cycle(logger=logger, engine=engine, pairs=pairs)

        if watch_interval_seconds <= 0:
            return

        elapsed = loop.time() - cycle_started
        await wait_with_stop(stop_event, max(0.0, watch_interval_seconds - elapsed))
