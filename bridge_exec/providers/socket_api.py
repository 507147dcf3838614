"""Async client for the Socket v2 API surface used by route execution."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from ..config import settings
from ..core.route.models import Allowance, ApprovalTxPayload
from .base import BridgeAPI


class SocketAPIError(Exception):
    """Socket answered 2xx but flagged the request as unsuccessful."""

    def __init__(self, message: str, body: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.body = body or {}


class SocketProvider(BridgeAPI):
    """Thin client for https://api.socket.tech endpoints."""

    name = "socket"

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: Optional[int] = None,
    ) -> None:
        self.api_key = api_key or settings.socket_api_key
        self.base_url = (base_url or settings.socket_base_url).rstrip("/")
        self.timeout_s = timeout_s or settings.request_timeout_seconds

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
        }
        if self.api_key:
            headers["API-KEY"] = self.api_key
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        merged_headers = {**self._headers(), **(headers or {})}
        async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout_s) as client:
            resp = await client.request(method, path, headers=merged_headers, **kwargs)
            resp.raise_for_status()
            return resp

    async def _get_result(self, path: str, params: Dict[str, Any]) -> Any:
        cleaned_params: Dict[str, Any] = {k: v for k, v in params.items() if v is not None}
        resp = await self._request("GET", path, params=cleaned_params)
        body = resp.json()
        if not body.get("success", False):
            raise SocketAPIError(f"Socket request to {path} was not successful", body)
        return body.get("result")

    async def fetch_allowance(
        self,
        chain_id: int,
        owner: str,
        allowance_target: str,
        token_address: str,
    ) -> Allowance:
        result = await self._get_result(
            "/v2/approval/check-allowance",
            {
                "chainID": chain_id,
                "owner": owner,
                "allowanceTarget": allowance_target,
                "tokenAddress": token_address,
            },
        )
        return Allowance.model_validate(result)

    async def fetch_approval_calldata(
        self,
        chain_id: int,
        allowance_target: str,
        amount: str,
        owner: str,
        token_address: str,
    ) -> ApprovalTxPayload:
        result = await self._get_result(
            "/v2/approval/build-tx",
            {
                "chainID": chain_id,
                "owner": owner,
                "allowanceTarget": allowance_target,
                "tokenAddress": token_address,
                "amount": amount,
            },
        )
        return ApprovalTxPayload.model_validate(result)

    async def update_active_route(
        self,
        active_route_id: int,
        user_tx_index: int,
        tx_hash: str,
    ) -> str:
        result = await self._get_result(
            "/v2/route/prepare",
            {
                "activeRouteId": active_route_id,
                "userTxIndex": user_tx_index,
                "txHash": tx_hash,
            },
        )
        return result

    async def health(self) -> Dict[str, Any]:
        """Health check for the Socket API."""

        resp = await self._request("GET", "/v2/health")
        return resp.json()

    async def get_bridging_status(
        self,
        transaction_hash: str,
        from_chain_id: int,
        to_chain_id: int,
        bridge_name: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Status of a bridging transaction on both the source and destination chain."""

        return await self._get_result(
            "/v2/bridge-status",
            {
                "transactionHash": transaction_hash,
                "fromChainId": from_chain_id,
                "toChainId": to_chain_id,
                "bridgeName": bridge_name,
            },
        )

    async def get_transaction_receipt(self, transaction_hash: str, chain_id: int) -> Dict[str, Any]:
        """Receipt of a transaction on the given chain."""

        return await self._get_result(
            "/v2/tx-receipt",
            {"transactionHash": transaction_hash, "chainId": chain_id},
        )
