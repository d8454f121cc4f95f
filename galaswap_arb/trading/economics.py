from __future__ import annotations

import math
from typing import Any, Mapping

from .errors import MissingPrice
from .token_class import format_token_class
from .types import (
    ACCEPT_REASON_PROFITABLE,
    REJECT_REASON_EDGE_BELOW_MIN,
    REJECT_REASON_NON_POSITIVE_PNL,
    SKIP_REASON_DUST,
    SKIP_REASON_EXHAUSTED,
    SKIP_REASON_OWN_OFFER,
    EconomicAssessment,
    FillCandidate,
    RiskConfig,
    SwapQuote,
    TokenClass,
    TradeDecision,
)


def lookup_usd_price(prices: Mapping[str, float], token_class: TokenClass | str) -> float:
    key = token_class if isinstance(token_class, str) else format_token_class(token_class)
    price = prices.get(key)
    if price is None or not math.isfinite(price) or price <= 0:
        raise MissingPrice(key)
    return float(price)


def compute_edge_bps(implied_price: float, reference_price: float) -> float:
    if not reference_price or reference_price <= 0:
        return 0.0
    return (10_000 * (implied_price - reference_price)) / reference_price


def size_fill(*, per_use_value_in_usd: float, remaining_uses: int, risk: RiskConfig) -> int:
    uses_to_take = 1
    if risk.max_notional_usd > 0:
        by_notional = risk.max_notional_usd / per_use_value_in_usd
        uses_to_take = max(1, math.floor(by_notional)) if math.isfinite(by_notional) else remaining_uses

    uses_to_take = min(uses_to_take, remaining_uses)
    uses_to_take = min(uses_to_take, int(risk.max_uses_per_trade))
    return max(1, uses_to_take)


def decide(*, edge_bps: float, total_pnl_usd: float, min_edge_bps: float) -> tuple[bool, str]:
    # NaN fails both comparisons and is rejected
    if not edge_bps >= min_edge_bps:
        return False, REJECT_REASON_EDGE_BELOW_MIN
    if not total_pnl_usd > 0:
        return False, REJECT_REASON_NON_POSITIVE_PNL
    return True, ACCEPT_REASON_PROFITABLE


class ArbitrageEvaluator:
    """Turns a normalized offer plus a USD price snapshot into a fill decision.

    ``screen`` covers everything that can be decided before the fee probe and sizes the
    fill; ``complete`` folds the probed fee in and applies the edge and PnL gates.
    """

    def __init__(self, *, risk: RiskConfig, wallet_address: str) -> None:
        self._risk = risk
        self._wallet_address = wallet_address

    @property
    def risk(self) -> RiskConfig:
        return self._risk

    def screen(self, quote: SwapQuote, prices: Mapping[str, float]) -> FillCandidate | TradeDecision:
        if quote.owner_identity and quote.owner_identity == self._wallet_address:
            return TradeDecision(
                accepted=False,
                reason=SKIP_REASON_OWN_OFFER,
                details={"offer_id": quote.offer_id},
            )

        if quote.remaining_uses <= 0:
            return TradeDecision(
                accepted=False,
                reason=SKIP_REASON_EXHAUSTED,
                details={
                    "offer_id": quote.offer_id,
                    "total_uses": quote.total_uses,
                    "uses_spent": quote.uses_spent,
                },
            )

        usd_offered = lookup_usd_price(prices, quote.offered_token_class)
        usd_wanted = lookup_usd_price(prices, quote.wanted_token_class)

        reference_price = usd_offered / usd_wanted
        edge_bps = compute_edge_bps(quote.implied_price, reference_price)

        per_use_value_out_usd = quote.get_per_use * usd_offered
        per_use_value_in_usd = quote.give_per_use * usd_wanted
        per_use_pnl_usd = per_use_value_out_usd - per_use_value_in_usd

        if (
            not per_use_value_in_usd
            or math.isnan(per_use_value_in_usd)
            or per_use_value_in_usd < self._risk.min_per_use_usd
        ):
            return TradeDecision(
                accepted=False,
                reason=SKIP_REASON_DUST,
                details={
                    "offer_id": quote.offer_id,
                    "per_use_value_in_usd": per_use_value_in_usd,
                    "min_per_use_usd": self._risk.min_per_use_usd,
                },
            )

        uses_to_take = size_fill(
            per_use_value_in_usd=per_use_value_in_usd,
            remaining_uses=quote.remaining_uses,
            risk=self._risk,
        )

        return FillCandidate(
            quote=quote,
            reference_price=reference_price,
            edge_bps=edge_bps,
            per_use_value_out_usd=per_use_value_out_usd,
            per_use_value_in_usd=per_use_value_in_usd,
            per_use_pnl_usd=per_use_pnl_usd,
            uses_to_take=uses_to_take,
        )

    def fee_token_usd(self, prices: Mapping[str, float]) -> float:
        # an unpriced fee token is treated as free
        try:
            return lookup_usd_price(prices, self._risk.fee_token_class)
        except MissingPrice:
            return 0.0

    def complete(
        self,
        candidate: FillCandidate,
        *,
        fee_native: float,
        prices: Mapping[str, float],
    ) -> TradeDecision:
        fee_usd = fee_native * self.fee_token_usd(prices)
        total_pnl_usd = candidate.per_use_pnl_usd * candidate.uses_to_take - fee_usd

        assessment = EconomicAssessment(
            reference_price=candidate.reference_price,
            implied_price=candidate.quote.implied_price,
            edge_bps=candidate.edge_bps,
            per_use_value_out_usd=candidate.per_use_value_out_usd,
            per_use_value_in_usd=candidate.per_use_value_in_usd,
            per_use_pnl_usd=candidate.per_use_pnl_usd,
            fee_native=fee_native,
            fee_usd=fee_usd,
            uses_to_take=candidate.uses_to_take,
            total_pnl_usd=total_pnl_usd,
        )
        accepted, reason = decide(
            edge_bps=assessment.edge_bps,
            total_pnl_usd=total_pnl_usd,
            min_edge_bps=self._risk.min_edge_bps,
        )
        details: dict[str, Any] = {
            "offer_id": candidate.quote.offer_id,
            "min_edge_bps": self._risk.min_edge_bps,
        }
        return TradeDecision(accepted=accepted, reason=reason, assessment=assessment, details=details)
