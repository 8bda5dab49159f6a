"""
JSON-RPC Transport for Ontology nodes.

Uses an httpx AsyncClient to post JSON-RPC 2.0 requests. Ontology nodes
answer with ``{"error": <code>, "desc": ..., "result": ...}`` where a zero
error code means success.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Optional, Protocol

import httpx

from ..errors import TransportError
from .status import ConfirmationOutcome

DEFAULT_RPC_URL = "http://localhost:20336"
DEFAULT_TIMEOUT = 30.0

# Ontology RPC error codes
RPC_SUCCESS = 0
RPC_UNKNOWN_TRANSACTION = 44001


class Transport(Protocol):
    async def submit(self, serialized_tx: str) -> int:
        """Post a signed transaction; a negative result means rejection."""
        ...

    async def current_height(self) -> int:
        ...

    async def block_tx_hashes(self, height: int) -> list[str]:
        ...

    async def confirm(self, tx_hash: str) -> ConfirmationOutcome:
        ...


class RpcError(TransportError):
    def __init__(self, method: str, code: int, desc: str) -> None:
        super().__init__(f"RPC {method} failed: {code} {desc}")
        self.method = method
        self.code = code
        self.desc = desc


class OntologyRpcTransport:
    def __init__(
        self,
        url: str = DEFAULT_RPC_URL,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.url = url
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._ids = itertools.count(1)
        self.log = logging.getLogger("ontbench.rpc")

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _call(self, method: str, params: list) -> dict[str, Any]:
        """
        Make a JSON-RPC call and return the decoded response envelope.

        Raises:
            TransportError: On connection failure, HTTP error status or a
                malformed response
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": next(self._ids),
        }
        try:
            response = await self._client.post(self.url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as exc:
            raise TransportError(f"RPC {method} to {self.url} failed: {exc}") from exc
        except ValueError as exc:
            raise TransportError(f"RPC {method} returned invalid JSON") from exc
        if not isinstance(data, dict):
            raise TransportError(f"RPC {method} returned unexpected payload")
        self.log.debug("%s -> error=%s", method, data.get("error"))
        return data

    async def _result(self, method: str, params: list) -> Any:
        data = await self._call(method, params)
        code = data.get("error", RPC_SUCCESS)
        if code != RPC_SUCCESS:
            raise RpcError(method, code, str(data.get("desc", "")))
        return data.get("result")

    async def submit(self, serialized_tx: str) -> int:
        data = await self._call("sendrawtransaction", [serialized_tx])
        code = data.get("error", RPC_SUCCESS)
        if code != RPC_SUCCESS:
            self.log.warning("sendrawtransaction rejected: %s %s", code, data.get("desc"))
            return -abs(int(code))
        return 0

    async def current_height(self) -> int:
        count = await self._result("getblockcount", [])
        return int(count) - 1

    async def block_tx_hashes(self, height: int) -> list[str]:
        block = await self._result("getblock", [height, 1])
        if not block:
            return []
        return [tx["Hash"] for tx in block.get("Transactions") or []]

    async def confirm(self, tx_hash: str) -> ConfirmationOutcome:
        data = await self._call("getsmartcodeevent", [tx_hash])
        code = data.get("error", RPC_SUCCESS)
        if code == RPC_UNKNOWN_TRANSACTION:
            return ConfirmationOutcome.UNKNOWN
        if code != RPC_SUCCESS:
            raise RpcError("getsmartcodeevent", code, str(data.get("desc", "")))
        event = data.get("result")
        if not isinstance(event, dict) or "State" not in event:
            return ConfirmationOutcome.UNKNOWN
        if event["State"] == 1:
            return ConfirmationOutcome.CONFIRMED
        return ConfirmationOutcome.FAILED
