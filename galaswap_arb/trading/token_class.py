from __future__ import annotations

from typing import Any

from .errors import MalformedOffer, MalformedSymbol
from .types import PairConfig, TokenClass

PRIMARY_DELIMITER = "|"
ALTERNATE_DELIMITER = "$"

UNIT_CATEGORY = "Unit"
NONE_FIELD = "none"


def parse_token_class(symbol: str) -> TokenClass:
    raw = str(symbol or "").strip()
    if not raw:
        raise MalformedSymbol("Bad token class symbol: empty")

    delimiter = PRIMARY_DELIMITER if PRIMARY_DELIMITER in raw else ALTERNATE_DELIMITER
    parts = raw.split(delimiter)

    if len(parts) == 1:
        return TokenClass(
            collection=raw,
            category=UNIT_CATEGORY,
            type=NONE_FIELD,
            additional_key=NONE_FIELD,
        )
    if len(parts) != 4:
        raise MalformedSymbol(f"Bad token class symbol: {raw}")
    if any(not part for part in parts):
        raise MalformedSymbol(f"Bad token class symbol (empty segment): {raw}")

    collection, category, type_, additional_key = parts
    return TokenClass(
        collection=collection,
        category=category,
        type=type_,
        additional_key=additional_key,
    )


def format_token_class(token_class: TokenClass) -> str:
    return PRIMARY_DELIMITER.join(
        (
            token_class.collection,
            token_class.category,
            token_class.type,
            token_class.additional_key,
        )
    )


def token_class_from_instance(instance: Any) -> TokenClass:
    if not isinstance(instance, dict):
        raise MalformedOffer(f"tokenInstance is not an object: {instance!r}")

    fields = []
    for name in ("collection", "category", "type", "additionalKey"):
        value = instance.get(name)
        if value is None or str(value) == "":
            raise MalformedOffer(f"tokenInstance is missing {name}: {instance!r}")
        fields.append(str(value))

    collection, category, type_, additional_key = fields
    return TokenClass(
        collection=collection,
        category=category,
        type=type_,
        additional_key=additional_key,
    )


def parse_pair(spec: str) -> PairConfig:
    """Parse ``OFFERED>WANTED`` where each side is any symbol accepted by parse_token_class."""
    raw = str(spec or "").strip()
    sides = [side.strip() for side in raw.split(">")]
    if len(sides) != 2 or not all(sides):
        raise MalformedSymbol(f"Bad pair spec (expected OFFERED>WANTED): {raw}")

    return PairConfig(
        symbol=raw,
        offered=parse_token_class(sides[0]),
        wanted=parse_token_class(sides[1]),
    )


def load_pairs(raw: str) -> tuple[PairConfig, ...]:
    return tuple(parse_pair(item) for item in str(raw or "").split(",") if item.strip())
