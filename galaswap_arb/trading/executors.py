from __future__ import annotations

import logging

from galaswap_arb.common import log_event

from .client import extract_transaction_id
from .types import (
    OUTCOME_DRY_RUN,
    OUTCOME_SUBMITTED,
    ExecutionResult,
    PairConfig,
    SignedAuthorization,
    SwapVenue,
)


class DryRunFillExecutor:
    def __init__(self, *, logger: logging.Logger) -> None:
        self._logger = logger

    async def execute(self, *, signed: SignedAuthorization, pair: PairConfig) -> ExecutionResult:
        payload = signed.payload
        log_event(
            self._logger,
            level="info",
            event="fill_dry_run",
            message="[DRY_RUN] Would accept swap",
            pair=pair.symbol,
            swap_request_id=payload.swap_request_id,
            uses=str(payload.uses),
            unique_key=payload.unique_key,
        )
        return ExecutionResult(
            status=OUTCOME_DRY_RUN,
            reason="DRY_RUN is enabled",
            unique_key=payload.unique_key,
        )


class LiveFillExecutor:
    def __init__(self, *, logger: logging.Logger, venue: SwapVenue) -> None:
        self._logger = logger
        self._venue = venue

    async def execute(self, *, signed: SignedAuthorization, pair: PairConfig) -> ExecutionResult:
        payload = signed.payload
        response = await self._venue.submit(signed)
        transaction_id = extract_transaction_id(response)

        log_event(
            self._logger,
            level="info",
            event="fill_submitted",
            message="Submitted",
            pair=pair.symbol,
            swap_request_id=payload.swap_request_id,
            uses=str(payload.uses),
            unique_key=payload.unique_key,
            txid=transaction_id,
        )
        return ExecutionResult(
            status=OUTCOME_SUBMITTED,
            reason="fill submitted",
            unique_key=payload.unique_key,
            transaction_id=transaction_id,
            response=response,
        )
