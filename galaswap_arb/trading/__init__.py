from .authorization import build_authorization, build_swap_dto, new_unique_key, sign_authorization
from .client import GalaSwapClient
from .economics import ArbitrageEvaluator, compute_edge_bps, size_fill
from .engine import TradeEngine
from .errors import (
    InvalidKey,
    MalformedOffer,
    MalformedSymbol,
    MissingPrice,
    RemoteUnavailable,
    SwapArbError,
)
from .executors import DryRunFillExecutor, LiveFillExecutor
from .quotes import normalize_offer
from .signing import sign_payload
from .token_class import format_token_class, load_pairs, parse_pair, parse_token_class
from .types import (
    AuthorizationPayload,
    EconomicAssessment,
    ExecutionResult,
    PairConfig,
    PairOutcome,
    RiskConfig,
    SignedAuthorization,
    SwapQuote,
    TokenClass,
    TradeDecision,
)

__all__ = [
    "ArbitrageEvaluator",
    "AuthorizationPayload",
    "DryRunFillExecutor",
    "EconomicAssessment",
    "ExecutionResult",
    "GalaSwapClient",
    "InvalidKey",
    "LiveFillExecutor",
    "MalformedOffer",
    "MalformedSymbol",
    "MissingPrice",
    "PairConfig",
    "PairOutcome",
    "RemoteUnavailable",
    "RiskConfig",
    "SignedAuthorization",
    "SwapArbError",
    "SwapQuote",
    "TokenClass",
    "TradeDecision",
    "TradeEngine",
    "build_authorization",
    "build_swap_dto",
    "compute_edge_bps",
    "format_token_class",
    "load_pairs",
    "new_unique_key",
    "normalize_offer",
    "parse_pair",
    "parse_token_class",
    "sign_authorization",
    "sign_payload",
    "size_fill",
]
