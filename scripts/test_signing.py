from __future__ import annotations

import base64
import json
import unittest

from coincurve import PublicKey
from coincurve.ecdsa import der_to_cdata, serialize_compact

from galaswap_arb.trading.errors import InvalidKey
from galaswap_arb.trading.signing import (
    SECP256K1_HALF_ORDER,
    SECP256K1_ORDER,
    RecoverableSignature,
    canonical_json,
    encode_der,
    js_number,
    keccak_digest,
    load_private_key,
    normalize_low_s,
    public_key_from_private,
    sign_payload,
    verify_signature,
)

PRIVATE_KEY = "0x" + "4c" * 32


def _decode_der(der: bytes) -> tuple[int, int]:
    compact = serialize_compact(der_to_cdata(der))
    return int.from_bytes(compact[:32], "big"), int.from_bytes(compact[32:], "big")


def _sample_payload(unique_key: str = "galaconnect-operation-1") -> dict[str, object]:
    return {
        "swapDtos": [
            {
                "swapRequestId": "client:abc|swap-1",
                "uses": "3",
                "expectedTokenSwap": {
                    "wanted": [{"quantity": "100", "tokenInstance": {"collection": "GALA"}}],
                    "offered": [{"quantity": "1", "tokenInstance": {"collection": "SILK"}}],
                },
            }
        ],
        "uniqueKey": unique_key,
        "signerPublicKey": public_key_from_private(PRIVATE_KEY),
    }


class CanonicalJsonTests(unittest.TestCase):
    def test_key_order_does_not_change_encoding(self) -> None:
        first = {"b": 1, "a": {"d": [1, 2], "c": "x"}}
        second = {"a": {"c": "x", "d": [1, 2]}, "b": 1}

        self.assertEqual(canonical_json(first), canonical_json(second))
        self.assertEqual(canonical_json(first), b'{"a":{"c":"x","d":[1,2]},"b":1}')

    def test_signature_field_is_excluded(self) -> None:
        payload = {"uniqueKey": "k", "signature": "abc"}

        self.assertEqual(canonical_json(payload), b'{"uniqueKey":"k"}')
        self.assertIn("signature", payload)

    def test_non_ascii_is_kept_as_utf8(self) -> None:
        self.assertEqual(canonical_json({"name": "Tōken"}), '{"name":"Tōken"}'.encode("utf-8"))

    def test_floats_are_rendered_like_javascript(self) -> None:
        self.assertEqual(canonical_json({"q": 1.0, "small": 1e-7}), b'{"q":1,"small":1e-7}')

    def test_js_number_forms(self) -> None:
        cases = {
            0.0: "0",
            100.0: "100",
            -2.5: "-2.5",
            123.456: "123.456",
            0.1: "0.1",
            0.000001: "0.000001",
            0.0000015: "0.0000015",
            1.5e-7: "1.5e-7",
            1e20: "100000000000000000000",
            1e21: "1e+21",
            1.25e22: "1.25e+22",
        }
        for value, expected in cases.items():
            with self.subTest(value=value):
                self.assertEqual(js_number(value), expected)

    def test_non_finite_numbers_are_refused(self) -> None:
        for value in (float("nan"), float("inf")):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    canonical_json({"q": value})

    def test_numeric_quantities_sign_over_javascript_text(self) -> None:
        payload = _sample_payload()
        payload["swapDtos"][0]["expectedTokenSwap"]["offered"][0]["quantity"] = 1.0  # type: ignore[index]

        encoded = canonical_json(payload)
        self.assertIn(b'"quantity":1,', encoded)
        signature = sign_payload(payload, PRIVATE_KEY)
        self.assertTrue(verify_signature(payload, signature, public_key_from_private(PRIVATE_KEY)))

    def test_keccak_is_not_sha3(self) -> None:
        self.assertEqual(
            keccak_digest(b"").hex(),
            "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470",
        )


class LowSNormalizationTests(unittest.TestCase):
    def test_high_s_is_flipped_with_parity(self) -> None:
        high = RecoverableSignature(r=5, s=SECP256K1_ORDER - 3, recovery_id=0)

        normalized = normalize_low_s(high)

        self.assertEqual(normalized.s, 3)
        self.assertEqual(normalized.r, 5)
        self.assertEqual(normalized.recovery_id, 1)
        self.assertTrue(normalized.is_low_s)

    def test_low_s_is_unchanged(self) -> None:
        low = RecoverableSignature(r=5, s=SECP256K1_HALF_ORDER, recovery_id=1)

        self.assertIs(normalize_low_s(low), low)


class DerEncodingTests(unittest.TestCase):
    def test_high_bit_integers_get_a_leading_zero(self) -> None:
        self.assertEqual(encode_der(0x80, 1), bytes.fromhex("3007020200800201" "01"))

    def test_decode_inverts_encode(self) -> None:
        r = 0x00FF_1234_5678_9ABC
        s = SECP256K1_HALF_ORDER - 7
        self.assertEqual(_decode_der(encode_der(r, s)), (r, s))

    def test_der_is_minimal_for_small_values(self) -> None:
        self.assertEqual(len(encode_der(1, 1)), 8)


class SignPayloadTests(unittest.TestCase):
    def test_signature_verifies_and_is_low_s(self) -> None:
        public_key = public_key_from_private(PRIVATE_KEY)
        for index in range(25):
            payload = _sample_payload(unique_key=f"galaconnect-operation-{index}")
            with self.subTest(index=index):
                signature = sign_payload(payload, PRIVATE_KEY)
                _, s = _decode_der(base64.b64decode(signature))

                self.assertLessEqual(s, SECP256K1_HALF_ORDER)
                self.assertTrue(verify_signature(payload, signature, public_key))

    def test_signature_over_canonical_bytes_ignores_field_order(self) -> None:
        payload = _sample_payload()
        reordered = json.loads(json.dumps(dict(reversed(list(payload.items())))))
        signature = sign_payload(payload, PRIVATE_KEY)

        self.assertTrue(verify_signature(reordered, signature, public_key_from_private(PRIVATE_KEY)))

    def test_existing_signature_field_does_not_change_the_digest(self) -> None:
        payload = _sample_payload()
        signature = sign_payload(payload, PRIVATE_KEY)
        signed = dict(payload, signature=signature)

        self.assertTrue(verify_signature(signed, signature, public_key_from_private(PRIVATE_KEY)))

    def test_tampered_payload_fails_verification(self) -> None:
        payload = _sample_payload()
        signature = sign_payload(payload, PRIVATE_KEY)
        tampered = dict(payload, uniqueKey="galaconnect-operation-other")

        self.assertFalse(verify_signature(tampered, signature, public_key_from_private(PRIVATE_KEY)))

    def test_high_s_twin_is_rejected_by_the_verifier(self) -> None:
        payload = _sample_payload()
        r, s = _decode_der(base64.b64decode(sign_payload(payload, PRIVATE_KEY)))
        high_s = base64.b64encode(encode_der(r, SECP256K1_ORDER - s)).decode("ascii")

        self.assertFalse(verify_signature(payload, high_s, public_key_from_private(PRIVATE_KEY)))


class KeyMaterialTests(unittest.TestCase):
    def test_invalid_keys_raise(self) -> None:
        cases = {
            "empty": "",
            "short": "0x" + "11" * 31,
            "long": "11" * 33,
            "not_hex": "zz" * 32,
            "zero": "00" * 32,
            "order": format(SECP256K1_ORDER, "064x"),
        }
        for name, raw in cases.items():
            with self.subTest(case=name):
                with self.assertRaises(InvalidKey):
                    load_private_key(raw)

    def test_sign_with_invalid_key_raises(self) -> None:
        with self.assertRaises(InvalidKey):
            sign_payload({"uniqueKey": "k"}, "0x1234")

    def test_prefix_is_optional_and_public_key_is_compressed(self) -> None:
        with_prefix = public_key_from_private(PRIVATE_KEY)
        without_prefix = public_key_from_private(PRIVATE_KEY[2:])

        self.assertEqual(with_prefix, without_prefix)
        raw = base64.b64decode(with_prefix)
        self.assertEqual(len(raw), 33)
        self.assertIn(raw[0], (2, 3))
        PublicKey(raw)

        uncompressed = base64.b64decode(public_key_from_private(PRIVATE_KEY, compressed=False))
        self.assertEqual(len(uncompressed), 65)


if __name__ == "__main__":
    unittest.main()
