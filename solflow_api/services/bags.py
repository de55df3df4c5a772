"""Client for the Bags.fm public API (token launches and bonding curves)."""

import logging
import math
from typing import Any, Dict, Optional

import httpx

from ..errors import RemoteServiceError

logger = logging.getLogger(__name__)


class BagsClient:
    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["x-api-key"] = api_key
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"), headers=headers, timeout=timeout, transport=transport
        )

    async def __aenter__(self) -> "BagsClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self._client.aclose()

    async def _get(self, path: str, failure: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as e:
            logger.warning("Bags request %s failed: %s", path, e)
            raise RemoteServiceError(failure, status_code=500) from e
        if not response.is_success:
            logger.warning("Bags request %s returned %s", path, response.status_code)
            raise RemoteServiceError(failure, status_code=500)
        try:
            data = response.json()
        except ValueError as e:
            raise RemoteServiceError(failure, status_code=500) from e
        if not isinstance(data, dict):
            logger.warning("Bags request %s answered with %s", path, type(data).__name__)
            raise RemoteServiceError(failure, status_code=500)
        return data

    async def get_token(self, token_address: str) -> Dict[str, Any]:
        return await self._get(f"/tokens/{token_address}", "Failed to fetch token info from Bags")

    async def get_trending(self, limit: int) -> Dict[str, Any]:
        return await self._get("/tokens/trending", "Failed to fetch trending tokens", params={"limit": limit})

    async def get_quote(self, token_address: str, amount: float) -> Dict[str, Any]:
        return await self._get(
            f"/tokens/{token_address}/quote", "Failed to get price quote", params={"amount": amount}
        )


# ============================================================================
# Response reshaping
# ============================================================================

def _progress(data: Dict[str, Any]) -> float:
    """`bondingCurveProgress` as a number; Bags sometimes sends it as a string."""
    value = data.get("bondingCurveProgress")
    if value is None:
        return 0
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            number = math.nan
        if math.isfinite(number):
            return number
    raise RemoteServiceError("Unexpected response from Bags", status_code=500)


def bonding_curve_status(token_address: str, data: Dict[str, Any]) -> Dict[str, Any]:
    progress = _progress(data)
    return {
        "tokenAddress": token_address,
        "isMigrated": bool(data.get("migrated", False)),
        "marketCap": data.get("marketCap") or 0,
        "bondingCurveProgress": progress,
        "liquidityPool": data.get("liquidityPool"),
        "canMigrate": progress >= 100,
        "holders": data.get("holders") or 0,
        "volume24h": data.get("volume24h") or 0,
    }


def token_info(token_address: str, data: Dict[str, Any]) -> Dict[str, Any]:
    keys = (
        "name", "symbol", "description", "image", "creator", "marketCap", "price",
        "volume24h", "bondingCurveProgress", "migrated", "createdAt",
    )
    info = {"address": token_address, **{k: data.get(k) for k in keys}}
    if info["bondingCurveProgress"] is not None:
        info["bondingCurveProgress"] = _progress(data)
    return info


def migration_status(token_address: str, data: Dict[str, Any]) -> Dict[str, Any]:
    progress = _progress(data)
    migrated = bool(data.get("migrated", False))
    if migrated:
        message = "Token already migrated to liquidity pool"
    elif progress >= 100:
        message = "Token is ready for migration!"
    else:
        message = f"{100 - progress:.2f}% remaining to complete bonding curve"
    return {
        "tokenAddress": token_address,
        "ready": progress >= 100 and not migrated,
        "alreadyMigrated": migrated,
        "progress": progress,
        "remainingProgress": max(0, 100 - progress),
        "marketCap": data.get("marketCap"),
        "estimatedLiquidityPool": data.get("estimatedLiquidityPool"),
        "message": message,
    }
