from __future__ import annotations

import asyncio
import json
import logging
import math
from dataclasses import dataclass
from typing import Any

import aiohttp

from galaswap_arb.common import log_event

from .authorization import build_swap_dto
from .errors import RemoteUnavailable
from .quotes import pick_best_offer
from .token_class import format_token_class
from .types import SignedAuthorization, SwapQuote, TokenClass

DEFAULT_API_BASE_URL = "https://api-galaswap.gala.com"

TOKENS_PATH = "/v1/tokens"
FETCH_SWAPS_PATH = "/v1/FetchAvailableTokenSwaps"
FILL_FEE_PATH = "/v1/BatchFillTokenSwap/fee"
FILL_PATH = "/v1/BatchFillTokenSwap"
PUBLIC_KEY_PATH = "/galachain/api/asset/public-key-contract/GetPublicKey"

WALLET_HEADER = "X-Wallet-Address"


@dataclass(slots=True, frozen=True)
class PublicKeyLookup:
    source: str
    public_key: str


def _preview(body: Any, limit: int = 300) -> str:
    text = body if isinstance(body, str) else json.dumps(body, ensure_ascii=False, default=str)
    return text[:limit]


def build_price_map(payload: Any) -> dict[str, float]:
    tokens = payload.get("tokens") if isinstance(payload, dict) else None
    prices: dict[str, float] = {}
    for token in tokens or []:
        if not isinstance(token, dict):
            continue
        key = format_token_class(
            TokenClass(
                collection=str(token.get("collection", "")),
                category=str(token.get("category", "")),
                type=str(token.get("type", "")),
                additional_key=str(token.get("additionalKey", "")),
            )
        )
        current_prices = token.get("currentPrices")
        raw_usd = current_prices.get("usd") if isinstance(current_prices, dict) else None
        try:
            usd = float(raw_usd)
        except (TypeError, ValueError):
            continue
        if math.isfinite(usd) and usd > 0:
            prices[key] = usd
    return prices


def total_fee_from_response(payload: Any) -> float:
    fees = payload.get("fees") if isinstance(payload, dict) else None
    total = 0.0
    for entry in fees or []:
        if not isinstance(entry, dict):
            continue
        raw_fee = entry.get("feeInGala") or entry.get("fee") or 0
        try:
            fee = float(raw_fee)
        except (TypeError, ValueError):
            continue
        if not math.isfinite(fee):
            raise RemoteUnavailable(f"Fee estimate is not a finite number: {raw_fee!r}", endpoint=FILL_FEE_PATH)
        total += fee
    return total


def parse_public_key_response(payload: Any) -> PublicKeyLookup:
    if isinstance(payload, str) and payload.strip():
        return PublicKeyLookup(source="string", public_key=payload.strip())

    if isinstance(payload, dict):
        direct = payload.get("publicKey")
        if isinstance(direct, str) and direct.strip():
            return PublicKeyLookup(source="publicKey", public_key=direct.strip())

        data = payload.get("Data")
        nested = data.get("publicKey") if isinstance(data, dict) else None
        if isinstance(nested, str) and nested.strip():
            return PublicKeyLookup(source="Data.publicKey", public_key=nested.strip())

    raise RemoteUnavailable(f"Could not get signerPublicKey from response: {_preview(payload)}")


def extract_transaction_id(payload: Any) -> str | None:
    if not isinstance(payload, dict):
        return None

    data = payload.get("Data")
    if isinstance(data, dict) and data.get("txid"):
        return str(data["txid"])
    if payload.get("txid"):
        return str(payload["txid"])
    if isinstance(data, str) and data:
        return data
    return None


class GalaSwapClient:
    def __init__(
        self,
        *,
        logger: logging.Logger,
        api_base_url: str = DEFAULT_API_BASE_URL,
        wallet_address: str,
        timeout_seconds: float = 15.0,
    ) -> None:
        self._logger = logger
        self._api_base_url = api_base_url.rstrip("/")
        self._wallet_address = wallet_address
        self._timeout_seconds = timeout_seconds
        self._session: aiohttp.ClientSession | None = None

    async def connect(self) -> None:
        if self._session is None:
            timeout = aiohttp.ClientTimeout(total=self._timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def _request(
        self,
        method: str,
        path: str,
        *,
        body: dict[str, Any] | None = None,
        with_wallet: bool = False,
    ) -> Any:
        if self._session is None:
            await self.connect()
        if self._session is None:
            raise RuntimeError("GalaSwap HTTP session is not initialized.")

        url = f"{self._api_base_url}{path}"
        headers = {"Content-Type": "application/json"}
        if with_wallet:
            headers[WALLET_HEADER] = self._wallet_address

        try:
            async with self._session.request(method, url, json=body, headers=headers) as response:
                status = response.status
                text = await response.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as error:
            log_event(
                self._logger,
                level="warning",
                event="galaswap_request_failed",
                message="GalaSwap request failed",
                method=method,
                endpoint=path,
                error=str(error),
            )
            raise RemoteUnavailable(f"{method} {url} failed: {error}", endpoint=path) from error

        try:
            data: Any = json.loads(text)
        except json.JSONDecodeError:
            data = {"_raw": text}

        if status >= 400:
            raise RemoteUnavailable(
                f"{method} {url} => {status}: {_preview(data)}",
                status=status,
                endpoint=path,
            )
        return data

    async def fetch_prices(self) -> dict[str, float]:
        return build_price_map(await self._request("GET", TOKENS_PATH))

    async def fetch_offer(self, offered: TokenClass, wanted: TokenClass) -> SwapQuote | None:
        data = await self._request(
            "POST",
            FETCH_SWAPS_PATH,
            body={
                "offeredTokenClass": offered.to_dict(),
                "wantedTokenClass": wanted.to_dict(),
            },
        )
        results = data.get("results") if isinstance(data, dict) else None
        return pick_best_offer(results)

    async def estimate_fee(self, quote: SwapQuote, uses: int) -> float:
        data = await self._request(
            "POST",
            FILL_FEE_PATH,
            body={"swapDtos": [build_swap_dto(quote, uses)]},
            with_wallet=True,
        )
        return total_fee_from_response(data)

    async def fetch_signer_public_key(self, wallet_address: str) -> str:
        data = await self._request("POST", PUBLIC_KEY_PATH, body={"user": wallet_address})
        lookup = parse_public_key_response(data)
        log_event(
            self._logger,
            level="info",
            event="signer_public_key_resolved",
            message="Resolved signer public key from the ledger",
            source=lookup.source,
        )
        return lookup.public_key

    async def submit(self, signed: SignedAuthorization) -> dict[str, Any]:
        data = await self._request("POST", FILL_PATH, body=signed.to_dto(), with_wallet=True)
        return data if isinstance(data, dict) else {"Data": data}
