from __future__ import annotations

import uuid
from typing import Any

from .signing import sign_payload
from .types import AuthorizationPayload, SignedAuthorization, SwapQuote

UNIQUE_KEY_PREFIX = "galaconnect-operation-"


def new_unique_key() -> str:
    return f"{UNIQUE_KEY_PREFIX}{uuid.uuid4()}"


def build_swap_dto(quote: SwapQuote, uses: int) -> dict[str, Any]:
    return {
        "swapRequestId": quote.offer_id,
        "uses": str(int(uses)),
        "expectedTokenSwap": {
            "wanted": quote.wanted,
            "offered": quote.offered,
        },
    }


def build_authorization(
    quote: SwapQuote,
    *,
    uses: int,
    signer_public_key: str,
    unique_key: str | None = None,
) -> AuthorizationPayload:
    if isinstance(uses, bool) or not isinstance(uses, int) or uses < 1:
        raise ValueError(f"uses must be a positive integer, got {uses!r}")

    return AuthorizationPayload(
        swap_request_id=quote.offer_id,
        uses=uses,
        expected_offered=quote.offered,
        expected_wanted=quote.wanted,
        unique_key=unique_key or new_unique_key(),
        signer_public_key=signer_public_key,
    )


def sign_authorization(payload: AuthorizationPayload, private_key: str) -> SignedAuthorization:
    return SignedAuthorization(
        payload=payload,
        signature=sign_payload(payload.to_dto(), private_key),
    )
