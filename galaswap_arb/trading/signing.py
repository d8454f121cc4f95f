from __future__ import annotations

import base64
import binascii
import json
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping

from coincurve import PrivateKey, PublicKey
from coincurve.ecdsa import cdata_to_der, deserialize_compact
from eth_utils import keccak

from .errors import InvalidKey

SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
SECP256K1_HALF_ORDER = SECP256K1_ORDER >> 1

SIGNATURE_FIELD = "signature"

# largest decimal exponent JavaScript prints without switching to e-notation
CANONICAL_JS_DECIMAL_LIMIT = 21


@dataclass(slots=True, frozen=True)
class RecoverableSignature:
    r: int
    s: int
    recovery_id: int

    @property
    def is_low_s(self) -> bool:
        return self.s <= SECP256K1_HALF_ORDER


def js_number(value: float) -> str:
    """Render a float the way JavaScript's ``Number.prototype.toString`` does."""
    if not math.isfinite(value):
        raise ValueError(f"Out of range float values are not JSON compliant: {value!r}")
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    # shortest round-trip digits
    _, digit_tuple, exponent = Decimal(repr(abs(value))).as_tuple()
    digits = "".join(str(digit) for digit in digit_tuple).rstrip("0")
    exponent += len(digit_tuple) - len(digits)
    point = exponent + len(digits)

    if len(digits) <= point <= CANONICAL_JS_DECIMAL_LIMIT:
        return sign + digits + "0" * (point - len(digits))
    if 0 < point <= CANONICAL_JS_DECIMAL_LIMIT:
        return sign + digits[:point] + "." + digits[point:]
    if -6 < point <= 0:
        return sign + "0." + "0" * -point + digits

    scientific = point - 1
    mantissa = digits if len(digits) == 1 else f"{digits[0]}.{digits[1:]}"
    return f"{sign}{mantissa}e{'+' if scientific > 0 else '-'}{abs(scientific)}"


def _canonical(value: Any) -> str:
    if isinstance(value, Mapping):
        members = sorted(((str(key), child) for key, child in value.items()), key=lambda member: member[0])
        encoded = (f"{json.dumps(key, ensure_ascii=False)}:{_canonical(child)}" for key, child in members)
        return "{" + ",".join(encoded) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_canonical(child) for child in value) + "]"
    if isinstance(value, float):
        return js_number(value)
    return json.dumps(value, ensure_ascii=False, allow_nan=False)


def canonical_json(payload: Mapping[str, Any]) -> bytes:
    """Sorted-key compact JSON without the top-level signature, numbers rendered as JavaScript does."""
    unsigned = {key: value for key, value in payload.items() if key != SIGNATURE_FIELD}
    return _canonical(unsigned).encode("utf-8")


def keccak_digest(data: bytes) -> bytes:
    return keccak(data)


def load_private_key(private_key: str) -> PrivateKey:
    raw = str(private_key or "").strip()
    if raw[:2].lower() == "0x":
        raw = raw[2:]
    try:
        secret = bytes.fromhex(raw)
    except ValueError as error:
        raise InvalidKey("Private key is not valid hex") from error
    if len(secret) != 32:
        raise InvalidKey(f"Private key must be 32 bytes, got {len(secret)}")
    try:
        return PrivateKey(secret)
    except ValueError as error:
        raise InvalidKey("Private key is outside the secp256k1 scalar range") from error


def public_key_from_private(private_key: str, *, compressed: bool = True) -> str:
    key = load_private_key(private_key)
    return base64.b64encode(key.public_key.format(compressed=compressed)).decode("ascii")


def normalize_low_s(signature: RecoverableSignature) -> RecoverableSignature:
    if signature.s <= SECP256K1_HALF_ORDER:
        return signature
    return RecoverableSignature(
        r=signature.r,
        s=SECP256K1_ORDER - signature.s,
        recovery_id=signature.recovery_id ^ 1,
    )


def encode_der(r: int, s: int) -> bytes:
    compact = r.to_bytes(32, "big") + s.to_bytes(32, "big")
    return cdata_to_der(deserialize_compact(compact))


def sign_digest(digest: bytes, private_key: str) -> RecoverableSignature:
    key = load_private_key(private_key)
    compact = key.sign_recoverable(digest, hasher=None)
    signature = RecoverableSignature(
        r=int.from_bytes(compact[:32], "big"),
        s=int.from_bytes(compact[32:64], "big"),
        recovery_id=compact[64],
    )
    return normalize_low_s(signature)


def sign_payload(payload: Mapping[str, Any], private_key: str) -> str:
    """Keccak-256 over the canonical JSON, secp256k1 ECDSA, low-s, DER, base64."""
    digest = keccak_digest(canonical_json(payload))
    signature = sign_digest(digest, private_key)
    return base64.b64encode(encode_der(signature.r, signature.s)).decode("ascii")


def verify_signature(payload: Mapping[str, Any], signature_b64: str, public_key_b64: str) -> bool:
    try:
        der = base64.b64decode(signature_b64, validate=True)
        public_key = PublicKey(base64.b64decode(public_key_b64, validate=True))
    except (binascii.Error, ValueError):
        return False

    digest = keccak_digest(canonical_json(payload))
    try:
        return public_key.verify(der, digest, hasher=None)
    except ValueError:
        return False
