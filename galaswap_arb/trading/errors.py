from __future__ import annotations


class SwapArbError(RuntimeError):
    """Base class for failures scoped to a single pair evaluation."""

    reason = "error"


class MalformedSymbol(SwapArbError, ValueError):
    reason = "malformed_symbol"


class MalformedOffer(SwapArbError, ValueError):
    reason = "malformed_offer"


class MissingPrice(SwapArbError):
    reason = "missing_price"

    def __init__(self, token_key: str) -> None:
        super().__init__(f"No USD reference price for {token_key}")
        self.token_key = token_key


class InvalidKey(SwapArbError, ValueError):
    reason = "invalid_key"


class RemoteUnavailable(SwapArbError):
    reason = "remote_unavailable"

    def __init__(self, message: str, *, status: int | None = None, endpoint: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.endpoint = endpoint
