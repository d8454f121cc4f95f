from __future__ import annotations

import logging
from typing import Mapping

from galaswap_arb.common import log_event

from .authorization import build_authorization, sign_authorization
from .economics import ArbitrageEvaluator
from .errors import MissingPrice, SwapArbError
from .types import (
    OUTCOME_ERROR,
    OUTCOME_NO_OFFER,
    OUTCOME_REJECTED,
    OUTCOME_SKIPPED,
    SKIP_REASON_NO_OFFER,
    FillExecutor,
    PairConfig,
    PairOutcome,
    RiskConfig,
    SwapVenue,
    TradeDecision,
)


class TradeEngine:
    def __init__(
        self,
        *,
        logger: logging.Logger,
        venue: SwapVenue,
        executor: FillExecutor,
        risk: RiskConfig,
        wallet_address: str,
        private_key: str,
        signer_public_key: str = "",
    ) -> None:
        self._logger = logger
        self.venue = venue
        self.executor = executor
        self.evaluator = ArbitrageEvaluator(risk=risk, wallet_address=wallet_address)
        self._wallet_address = wallet_address
        self._private_key = private_key
        self._signer_public_key = signer_public_key.strip()

    async def ensure_signer_public_key(self) -> str:
        if not self._signer_public_key:
            self._signer_public_key = await self.venue.fetch_signer_public_key(self._wallet_address)
        return self._signer_public_key

    def _skip(self, pair: PairConfig, decision: TradeDecision) -> PairOutcome:
        log_event(
            self._logger,
            level="info",
            event="pair_skipped",
            message=f"Skip {pair.symbol}: {decision.reason}",
            pair=pair.symbol,
            reason=decision.reason,
            **decision.details,
        )
        return PairOutcome(pair=pair.symbol, status=OUTCOME_SKIPPED, reason=decision.reason)

    async def evaluate_pair(self, *, pair: PairConfig, prices: Mapping[str, float]) -> PairOutcome:
        try:
            return await self._evaluate_pair(pair=pair, prices=prices)
        except MissingPrice as error:
            log_event(
                self._logger,
                level="info",
                event="pair_skipped",
                message=f"Missing USD price(s) for {pair.symbol}, skipping",
                pair=pair.symbol,
                reason=error.reason,
                token_key=error.token_key,
            )
            return PairOutcome(
                pair=pair.symbol,
                status=OUTCOME_SKIPPED,
                reason=error.reason,
                error=str(error),
            )
        except SwapArbError as error:
            log_event(
                self._logger,
                level="error",
                event="pair_error",
                message=f"Error on {pair.symbol}",
                pair=pair.symbol,
                reason=error.reason,
                error=str(error),
            )
            return PairOutcome(
                pair=pair.symbol,
                status=OUTCOME_ERROR,
                reason=error.reason,
                error=str(error),
            )

    async def _evaluate_pair(self, *, pair: PairConfig, prices: Mapping[str, float]) -> PairOutcome:
        quote = await self.venue.fetch_offer(pair.offered, pair.wanted)
        if quote is None:
            log_event(
                self._logger,
                level="info",
                event="pair_no_offer",
                message=f"No swaps found for {pair.symbol}",
                pair=pair.symbol,
            )
            return PairOutcome(pair=pair.symbol, status=OUTCOME_NO_OFFER, reason=SKIP_REASON_NO_OFFER)

        screened = self.evaluator.screen(quote, prices)
        if isinstance(screened, TradeDecision):
            return self._skip(pair, screened)

        fee_native = await self.venue.estimate_fee(quote, screened.uses_to_take)
        decision = self.evaluator.complete(screened, fee_native=fee_native, prices=prices)
        assessment = decision.assessment

        log_event(
            self._logger,
            level="info",
            event="pair_checked",
            message=f"Check {pair.symbol}",
            pair=pair.symbol,
            offer_id=quote.offer_id,
            remaining_uses=str(quote.remaining_uses),
            **(assessment.to_dict() if assessment else {}),
        )

        if not decision.accepted:
            log_event(
                self._logger,
                level="info",
                event="pair_rejected",
                message=f"Skip {pair.symbol}: {decision.reason}",
                pair=pair.symbol,
                reason=decision.reason,
                **decision.details,
            )
            return PairOutcome(
                pair=pair.symbol,
                status=OUTCOME_REJECTED,
                reason=decision.reason,
                assessment=assessment,
            )

        payload = build_authorization(
            quote,
            uses=screened.uses_to_take,
            signer_public_key=await self.ensure_signer_public_key(),
        )
        signed = sign_authorization(payload, self._private_key)

        log_event(
            self._logger,
            level="info",
            event="pair_accepted",
            message=f"Accept {pair.symbol}",
            pair=pair.symbol,
            reason=decision.reason,
            swap_request_id=payload.swap_request_id,
            uses=str(payload.uses),
            unique_key=payload.unique_key,
            total_pnl_usd=assessment.total_pnl_usd if assessment else None,
        )

        execution = await self.executor.execute(signed=signed, pair=pair)
        return PairOutcome(
            pair=pair.symbol,
            status=execution.status,
            reason=decision.reason,
            assessment=assessment,
            execution=execution,
        )
