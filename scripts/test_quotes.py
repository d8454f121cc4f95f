from __future__ import annotations

import unittest
from typing import Any

from galaswap_arb.trading.errors import MalformedOffer
from galaswap_arb.trading.quotes import normalize_offer, pick_best_offer
from galaswap_arb.trading.token_class import parse_token_class


def _leg(symbol: str, quantity: Any) -> dict[str, Any]:
    return {
        "quantity": quantity,
        "tokenInstance": {
            "collection": symbol,
            "category": "Unit",
            "type": "none",
            "additionalKey": "none",
            "instance": "0",
        },
    }


def _make_offer(**overrides: Any) -> dict[str, Any]:
    offer: dict[str, Any] = {
        "swapRequestId": "client:abc|swap-1",
        "offeredBy": "client|maker",
        "offered": [_leg("SILK", "1")],
        "wanted": [_leg("GALA", "100")],
        "uses": "10",
        "usesSpent": "4",
    }
    offer.update(overrides)
    return offer


class NormalizeOfferTests(unittest.TestCase):
    def test_give_is_wanted_and_get_is_offered(self) -> None:
        quote = normalize_offer(_make_offer())

        self.assertEqual(quote.offer_id, "client:abc|swap-1")
        self.assertEqual(quote.offered_token_class, parse_token_class("SILK"))
        self.assertEqual(quote.wanted_token_class, parse_token_class("GALA"))
        self.assertEqual(quote.give_per_use, 100.0)
        self.assertEqual(quote.get_per_use, 1.0)
        self.assertAlmostEqual(quote.implied_price, 0.01)
        self.assertEqual(quote.owner_identity, "client|maker")
        self.assertEqual(quote.remaining_uses, 6)

    def test_expected_contents_are_echoed_verbatim(self) -> None:
        raw = _make_offer()
        quote = normalize_offer(raw)

        self.assertEqual(quote.offered, raw["offered"])
        self.assertEqual(quote.wanted, raw["wanted"])

    def test_large_use_counts_keep_integer_precision(self) -> None:
        quote = normalize_offer(
            _make_offer(uses="123456789012345678901234567890", usesSpent="1")
        )

        self.assertEqual(quote.remaining_uses, 123456789012345678901234567889)

    def test_missing_uses_spent_defaults_to_zero(self) -> None:
        raw = _make_offer()
        del raw["usesSpent"]

        self.assertEqual(normalize_offer(raw).remaining_uses, 10)

    def test_invalid_offers_raise(self) -> None:
        cases = {
            "spent_exceeds_uses": _make_offer(usesSpent="11"),
            "zero_give": _make_offer(wanted=[_leg("GALA", "0")]),
            "non_numeric_get": _make_offer(offered=[_leg("SILK", "lots")]),
            "no_offered_leg": _make_offer(offered=[]),
            "fractional_uses": _make_offer(uses="2.5"),
            "missing_id": _make_offer(swapRequestId=""),
        }
        for name, raw in cases.items():
            with self.subTest(case=name):
                with self.assertRaises(MalformedOffer):
                    normalize_offer(raw)

    def test_pick_best_offer_takes_the_head(self) -> None:
        first = _make_offer(swapRequestId="first")
        second = _make_offer(swapRequestId="second")

        self.assertEqual(pick_best_offer([first, second]).offer_id, "first")
        self.assertIsNone(pick_best_offer([]))
        self.assertIsNone(pick_best_offer(None))


if __name__ == "__main__":
    unittest.main()
