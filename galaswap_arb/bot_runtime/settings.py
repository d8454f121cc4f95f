from __future__ import annotations

import os
from dataclasses import dataclass

from galaswap_arb.trading.client import DEFAULT_API_BASE_URL
from galaswap_arb.trading.types import to_bool, to_float

DEFAULT_PAIRS = "GALA>SILK,GALA>GUSDC"


@dataclass(slots=True, frozen=True)
class AppSettings:
    api_base_url: str
    wallet_address: str
    private_key: str
    signer_public_key: str
    pairs: str
    dry_run: bool
    request_timeout_seconds: float
    watch_interval_seconds: float
    log_level: str

    @classmethod
    def from_env(cls) -> "AppSettings":
        return cls(
            api_base_url=os.getenv("GALASWAP_API_BASE", DEFAULT_API_BASE_URL).strip() or DEFAULT_API_BASE_URL,
            wallet_address=os.getenv("WALLET_ADDRESS", "").strip(),
            private_key=os.getenv("PRIVATE_KEY", "").strip(),
            signer_public_key=os.getenv("SIGNER_PUBLIC_KEY", "").strip(),
            pairs=os.getenv("PAIRS", DEFAULT_PAIRS),
            dry_run=to_bool(os.getenv("DRY_RUN"), True),
            request_timeout_seconds=max(1.0, to_float(os.getenv("REQUEST_TIMEOUT_SECONDS"), 15.0)),
            watch_interval_seconds=max(0.0, to_float(os.getenv("WATCH_INTERVAL_SECONDS"), 0.0)),
            log_level=os.getenv("LOG_LEVEL", "INFO").strip() or "INFO",
        )

    def require_credentials(self) -> None:
        missing = [
            name
            for name, value in (("WALLET_ADDRESS", self.wallet_address), ("PRIVATE_KEY", self.private_key))
            if not value
        ]
        if missing:
            raise ValueError(f"Please set {' and '.join(missing)} in .env")
