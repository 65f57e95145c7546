"""Etherscan gas oracle client.

Fetches the three gas price tiers from
``https://api.etherscan.io/api?module=gastracker&action=gasoracle`` and renders
them as the short status line shown on Discord::

    🚀 12 | 🐦 10 | 🐌 7

Each tier is parsed and rounded on its own. No averaging is done.
"""
from __future__ import annotations

import asyncio
import logging
import math
import re
from dataclasses import dataclass

import aiohttp
from pydantic import BaseModel, Field, ValidationError

from ..core.errors import DecodeError, PriceParseError, TransportError
from ..settings import ORACLE_URL

log = logging.getLogger(__name__)


# ───────── response schema ──────────────────────────────────
class OracleResult(BaseModel):
    last_block:        str = Field("", alias="LastBlock")
    safe_gas_price:    str = Field("", alias="SafeGasPrice")
    propose_gas_price: str = Field("", alias="ProposeGasPrice")
    fast_gas_price:    str = Field("", alias="FastGasPrice")
    suggest_base_fee:  str = Field("", alias="suggestBaseFee")
    gas_used_ratio:    str = Field("", alias="gasUsedRatio")


class OracleResponse(BaseModel):
    status:  str = ""
    message: str = ""
    result:  OracleResult = Field(default_factory=OracleResult)


class _Envelope(BaseModel):
    message: str = ""


# ───────── snapshot ─────────────────────────────────────────
# plain decimal, optional sign and exponent; no whitespace, underscores or words
_DECIMAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def _round_price(raw: str, tier: str) -> int:
    if not _DECIMAL.fullmatch(raw):
        raise PriceParseError(f"invalid {tier} amount format: {raw!r}")
    value = float(raw)
    if not math.isfinite(value):
        raise PriceParseError(f"invalid {tier} amount format: {raw!r}")
    # round() matches "%.0f": nearest integer, ties to even
    return round(value)


@dataclass(frozen=True)
class GasSnapshot:
    """Rounded gas prices (gwei) taken from one oracle response."""

    fast: int
    mid: int
    slow: int

    @classmethod
    def from_result(cls, result: OracleResult) -> "GasSnapshot":
        slow = _round_price(result.safe_gas_price, "slow")
        mid = _round_price(result.propose_gas_price, "mid")
        fast = _round_price(result.fast_gas_price, "fast")
        return cls(fast=fast, mid=mid, slow=slow)


def format_status(snapshot: GasSnapshot) -> str:
    return f"🚀 {snapshot.fast} | 🐦 {snapshot.mid} | 🐌 {snapshot.slow}"


def _upstream_message(body: bytes) -> str:
    try:
        return _Envelope.model_validate_json(body).message
    except ValidationError:
        return ""


def decode_response(body: bytes) -> OracleResponse:
    """Parse and validate a raw oracle body against the schema."""
    try:
        return OracleResponse.model_validate_json(body)
    except ValidationError as e:
        upstream = _upstream_message(body)
        detail = f" (upstream said {upstream!r})" if upstream else ""
        reason = e.errors()[0]["msg"] if e.error_count() else "invalid body"
        raise DecodeError(f"failed to decode json{detail}: {reason}") from e


# ───────── client ───────────────────────────────────────────
class GasOracle:
    """Query the gas oracle over a caller-owned :class:`aiohttp.ClientSession`."""

    def __init__(self, api_key: str, session: aiohttp.ClientSession, url: str = ORACLE_URL):
        self._api_key = api_key
        self._session = session
        self._url = url

    async def _get_body(self) -> bytes:
        try:
            async with self._session.get(self._url + self._api_key) as r:
                body = await r.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(f"failed to fetch: {e!r}") from e

        log.debug("⛽ oracle replied %s (%d bytes)", r.status, len(body))
        return body

    async def fetch_snapshot(self) -> GasSnapshot:
        body = await self._get_body()
        return GasSnapshot.from_result(decode_response(body).result)

    async def fetch(self) -> str:
        """Fetch once and return the formatted status line."""
        return format_status(await self.fetch_snapshot())
