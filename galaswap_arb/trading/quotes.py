from __future__ import annotations

import math
from typing import Any

from .errors import MalformedOffer
from .token_class import token_class_from_instance
from .types import SwapQuote


def _first_leg(raw: dict[str, Any], side: str) -> dict[str, Any]:
    legs = raw.get(side)
    if not isinstance(legs, list) or not legs or not isinstance(legs[0], dict):
        raise MalformedOffer(f"Offer {raw.get('swapRequestId')!r} has no {side} leg")
    return legs[0]


def _quantity(leg: dict[str, Any], *, side: str) -> float:
    raw_quantity = leg.get("quantity")
    try:
        quantity = float(raw_quantity)
    except (TypeError, ValueError) as error:
        raise MalformedOffer(f"Invalid {side} quantity: {raw_quantity!r}") from error
    if not math.isfinite(quantity) or quantity <= 0:
        raise MalformedOffer(f"Non-positive {side} quantity: {raw_quantity!r}")
    return quantity


def _count(value: Any, *, name: str, default: int | None = None) -> int:
    if value is None or str(value).strip() == "":
        if default is None:
            raise MalformedOffer(f"Offer is missing {name}")
        return default
    if isinstance(value, bool):
        raise MalformedOffer(f"Invalid {name}: {value!r}")
    if isinstance(value, int):
        return value
    try:
        # counts are arbitrary-precision integer strings
        return int(str(value).strip())
    except ValueError as error:
        raise MalformedOffer(f"Invalid {name}: {value!r}") from error


def normalize_offer(raw: dict[str, Any]) -> SwapQuote:
    if not isinstance(raw, dict):
        raise MalformedOffer(f"Offer is not an object: {raw!r}")

    offer_id = str(raw.get("swapRequestId") or "").strip()
    if not offer_id:
        raise MalformedOffer("Offer is missing swapRequestId")

    offered_leg = _first_leg(raw, "offered")
    wanted_leg = _first_leg(raw, "wanted")

    total_uses = _count(raw.get("uses"), name="uses")
    uses_spent = _count(raw.get("usesSpent"), name="usesSpent", default=0)
    if uses_spent < 0 or uses_spent > total_uses:
        raise MalformedOffer(
            f"Offer {offer_id} has usesSpent={uses_spent} outside [0, uses={total_uses}]"
        )

    return SwapQuote(
        offer_id=offer_id,
        offered_token_class=token_class_from_instance(offered_leg.get("tokenInstance")),
        wanted_token_class=token_class_from_instance(wanted_leg.get("tokenInstance")),
        # what we pay per use is what the owner wants; what we receive is what they offer
        give_per_use=_quantity(wanted_leg, side="wanted"),
        get_per_use=_quantity(offered_leg, side="offered"),
        total_uses=total_uses,
        uses_spent=uses_spent,
        owner_identity=str(raw.get("offeredBy") or ""),
        offered=list(raw.get("offered") or []),
        wanted=list(raw.get("wanted") or []),
    )


def pick_best_offer(results: Any) -> SwapQuote | None:
    """Discovery lists offers best-first; only the head is considered."""
    if not isinstance(results, list) or not results:
        return None
    return normalize_offer(results[0])
