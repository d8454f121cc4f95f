from __future__ import annotations

import math
import os
from dataclasses import asdict, dataclass, field
from typing import Any, Protocol

DEFAULT_FEE_TOKEN_CLASS = "GALA|Unit|none|none"

SKIP_REASON_NO_OFFER = "no_offer"
SKIP_REASON_OWN_OFFER = "own_offer"
SKIP_REASON_EXHAUSTED = "exhausted"
SKIP_REASON_MISSING_PRICE = "missing_price"
SKIP_REASON_DUST = "dust"
REJECT_REASON_EDGE_BELOW_MIN = "edge_below_min"
REJECT_REASON_NON_POSITIVE_PNL = "non_positive_pnl"
ACCEPT_REASON_PROFITABLE = "profitable"

OUTCOME_NO_OFFER = "no_offer"
OUTCOME_SKIPPED = "skipped"
OUTCOME_REJECTED = "rejected"
OUTCOME_DRY_RUN = "dry_run"
OUTCOME_SUBMITTED = "submitted"
OUTCOME_ERROR = "error"


def to_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def to_int(value: Any, default: int) -> int:
    try:
        if value is None or str(value).strip() == "":
            return default
        return int(float(str(value).strip()))
    except (TypeError, ValueError, OverflowError):
        return default


def to_float(value: Any, default: float) -> float:
    try:
        if value is None or str(value).strip() == "":
            return default
        parsed = float(str(value).strip())
    except (TypeError, ValueError):
        return default
    return parsed if math.isfinite(parsed) else default


@dataclass(slots=True, frozen=True)
class TokenClass:
    collection: str
    category: str
    type: str
    additional_key: str

    def to_dict(self) -> dict[str, str]:
        return {
            "collection": self.collection,
            "category": self.category,
            "type": self.type,
            "additionalKey": self.additional_key,
        }


@dataclass(slots=True, frozen=True)
class PairConfig:
    """One directed pair: offers that give ``offered`` and want ``wanted`` in return."""

    symbol: str
    offered: TokenClass
    wanted: TokenClass


@dataclass(slots=True, frozen=True)
class RiskConfig:
    min_edge_bps: float
    max_notional_usd: float
    max_uses_per_trade: int
    min_per_use_usd: float
    fee_token_class: str = DEFAULT_FEE_TOKEN_CLASS

    @classmethod
    def from_env(cls) -> "RiskConfig":
        return cls(
            min_edge_bps=to_float(os.getenv("MIN_EDGE_BPS"), 30.0),
            max_notional_usd=to_float(os.getenv("MAX_NOTIONAL_USD"), 250.0),
            max_uses_per_trade=max(1, to_int(os.getenv("MAX_USES_PER_TRADE"), 3)),
            min_per_use_usd=max(0.0, to_float(os.getenv("MIN_PER_USE_USD"), 1.0)),
            fee_token_class=os.getenv("FEE_TOKEN_CLASS", DEFAULT_FEE_TOKEN_CLASS).strip()
            or DEFAULT_FEE_TOKEN_CLASS,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True, frozen=True)
class SwapQuote:
    offer_id: str
    offered_token_class: TokenClass
    wanted_token_class: TokenClass
    give_per_use: float
    get_per_use: float
    total_uses: int
    uses_spent: int
    owner_identity: str
    offered: list[dict[str, Any]] = field(default_factory=list)
    wanted: list[dict[str, Any]] = field(default_factory=list)

    @property
    def implied_price(self) -> float:
        return self.get_per_use / self.give_per_use

    @property
    def remaining_uses(self) -> int:
        return self.total_uses - self.uses_spent


@dataclass(slots=True, frozen=True)
class FillCandidate:
    quote: SwapQuote
    reference_price: float
    edge_bps: float
    per_use_value_out_usd: float
    per_use_value_in_usd: float
    per_use_pnl_usd: float
    uses_to_take: int


@dataclass(slots=True, frozen=True)
class EconomicAssessment:
    reference_price: float
    implied_price: float
    edge_bps: float
    per_use_value_out_usd: float
    per_use_value_in_usd: float
    per_use_pnl_usd: float
    fee_native: float
    fee_usd: float
    uses_to_take: int
    total_pnl_usd: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True, frozen=True)
class TradeDecision:
    accepted: bool
    reason: str
    assessment: EconomicAssessment | None = None
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class AuthorizationPayload:
    swap_request_id: str
    uses: int
    expected_offered: list[dict[str, Any]]
    expected_wanted: list[dict[str, Any]]
    unique_key: str
    signer_public_key: str

    def to_dto(self) -> dict[str, Any]:
        return {
            "swapDtos": [
                {
                    "swapRequestId": self.swap_request_id,
                    "uses": str(self.uses),
                    "expectedTokenSwap": {
                        "wanted": self.expected_wanted,
                        "offered": self.expected_offered,
                    },
                }
            ],
            "uniqueKey": self.unique_key,
            "signerPublicKey": self.signer_public_key,
        }


@dataclass(slots=True, frozen=True)
class SignedAuthorization:
    payload: AuthorizationPayload
    signature: str

    def to_dto(self) -> dict[str, Any]:
        dto = self.payload.to_dto()
        dto["signature"] = self.signature
        return dto


@dataclass(slots=True, frozen=True)
class ExecutionResult:
    status: str
    reason: str
    unique_key: str
    transaction_id: str | None = None
    response: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True, frozen=True)
class PairOutcome:
    pair: str
    status: str
    reason: str
    assessment: EconomicAssessment | None = None
    execution: ExecutionResult | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class SwapVenue(Protocol):
    async def fetch_offer(self, offered: TokenClass, wanted: TokenClass) -> SwapQuote | None:
        ...

    async def fetch_prices(self) -> dict[str, float]:
        ...

    async def estimate_fee(self, quote: SwapQuote, uses: int) -> float:
        ...

    async def fetch_signer_public_key(self, wallet_address: str) -> str:
        ...

    async def submit(self, signed: SignedAuthorization) -> dict[str, Any]:
        ...


class FillExecutor(Protocol):
    async def execute(self, *, signed: SignedAuthorization, pair: PairConfig) -> ExecutionResult:
        ...
