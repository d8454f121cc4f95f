from __future__ import annotations

import json
import logging
import unittest

from galaswap_arb.bot_runtime.logging import JsonFormatter
from galaswap_arb.common.logging import log_event, sanitize_text, sanitize_value


class SanitizeTests(unittest.TestCase):
    def test_url_query_strings_are_dropped(self) -> None:
        self.assertEqual(
            sanitize_text("GET https://api.example.com/v1/tokens?api_key=abc123."),
            "GET https://api.example.com/v1/tokens.",
        )

    def test_private_key_assignments_are_masked(self) -> None:
        self.assertEqual(sanitize_text("PRIVATE_KEY=0xdeadbeef rest"), "PRIVATE_KEY=*** rest")

    def test_secret_fields_in_nested_values_are_masked(self) -> None:
        self.assertEqual(
            sanitize_value({"wallet": "client|bot", "private_key": "0xdead", "nested": [{"privateKey": "x"}]}),
            {"wallet": "client|bot", "private_key": "***", "nested": [{"privateKey": "***"}]},
        )


class LogEventTests(unittest.TestCase):
    def test_fields_reach_the_json_line_redacted(self) -> None:
        logger = logging.getLogger("test.log_event")
        with self.assertLogs(logger, level="INFO") as captured:
            log_event(
                logger,
                level="info",
                event="pair_checked",
                message="Check GALA>SILK",
                pair="GALA>SILK",
                private_key="0xdead",
            )

        record = captured.records[0]
        payload = json.loads(JsonFormatter().format(record))
        self.assertEqual(payload["event"], "pair_checked")
        self.assertEqual(payload["pair"], "GALA>SILK")
        self.assertEqual(payload["private_key"], "***")
        self.assertEqual(payload["message"], "Check GALA>SILK")


if __name__ == "__main__":
    unittest.main()
