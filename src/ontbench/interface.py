"""
Blockchain backend contract expected by the benchmarking harness.
"""

from __future__ import annotations

import abc
from typing import Any, Optional, Sequence

from .chain.status import ConfirmationOutcome, TxStatus


class BlockchainInterface(abc.ABC):
    async def init(self) -> None:
        """Prepare the backend before a benchmark round."""

    async def get_context(self, name: str, args: Any = None) -> Any:
        """Acquire a per-client context."""
        return None

    async def release_context(self, context: Any) -> None:
        """Release a context returned by :meth:`get_context`."""

    @abc.abstractmethod
    async def install_smart_contract(self, descriptors: Optional[Sequence[Any]] = None) -> Any:
        ...

    @abc.abstractmethod
    async def invoke_smart_contract(
        self,
        context: Any,
        contract_id: str,
        contract_ver: str,
        args: Any,
        timeout: Optional[float] = None,
    ) -> TxStatus | list[TxStatus]:
        ...

    @abc.abstractmethod
    async def get_height(self) -> int:
        ...

    @abc.abstractmethod
    async def get_block_tx_hashes(self, height: int) -> list[str]:
        ...

    @abc.abstractmethod
    async def insure_tx(self, tx_hash: str) -> ConfirmationOutcome:
        ...
