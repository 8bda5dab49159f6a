"""
Ontology Adapter - Ontology backend for the benchmarking harness.

The wallet is unlocked once, at construction; an adapter never exists
with an undecrypted key. Deployment fills the contract registry, which
invocation then consults to bind arguments against the contract's ABI.

Every submission returns a ``TxStatus``. A node rejecting a transaction
marks that status failed; it is not raised.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Mapping, Optional, Sequence

from .chain.abi import AbiInfo, bind_arguments
from .chain.poller import wait_for_next_block
from .chain.rpc import OntologyRpcTransport, Transport
from .chain.status import ConfirmationOutcome, TxStatus
from .chain.submit import submit_raw, submit_transaction
from .chain.tx import Transaction, make_deploy_transaction, make_invoke_transaction, sign_transaction
from .config import AdapterConfig, ContractDescriptor, load_adapter_config
from .interface import BlockchainInterface
from .keys.wallet import Account, unlock_wallet
from .registry import ContractRegistry


class OntologyAdapter(BlockchainInterface):
    def __init__(
        self,
        config: AdapterConfig,
        transport: Optional[Transport] = None,
        registry: Optional[ContractRegistry] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Args:
            config: Adapter configuration
            transport: Network transport (default: JSON-RPC to ``config.rpc_url``)
            registry: Contract registry (default: a new, empty registry)
            sleep: Sleep coroutine used between height polls

        Raises:
            WalletDecryptionFailed: If the wallet cannot be unlocked
        """
        self.config = config
        self.account: Account
        self.account, self._private_key = unlock_wallet(config.wallet_path, config.password)
        self.registry = registry or ContractRegistry(allow_redeploy=config.allow_redeploy)
        self._owns_transport = transport is None
        self.transport: Transport = transport or OntologyRpcTransport(config.rpc_url)
        self._sleep = sleep
        self.log = logging.getLogger("ontbench.adapter")
        self.log.info("Using account %s", self.account.address)

    @classmethod
    def from_config_file(cls, path: Path, **kwargs: Any) -> "OntologyAdapter":
        return cls(load_adapter_config(path), **kwargs)

    @property
    def address(self) -> str:
        return self.account.address

    async def aclose(self) -> None:
        if self._owns_transport:
            await self.transport.aclose()  # type: ignore[attr-defined]

    async def __aenter__(self) -> "OntologyAdapter":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ============ Contracts ============

    async def deploy(self, descriptors: Optional[Sequence[ContractDescriptor]] = None) -> list[TxStatus]:
        """
        Deploy contracts, register them, then wait for one new block.

        Contracts are submitted in the given order (default: the configured
        contracts). A contract is registered only if its submission was
        accepted.

        Returns:
            One TxStatus per descriptor
        """
        if descriptors is None:
            descriptors = self.config.contracts
        statuses = []
        for item in descriptors:
            self.registry.check_available(item.name)
            code = item.read_code()
            abi = AbiInfo.from_path(item.abi)
            tx = make_deploy_transaction(
                code,
                item.name,
                item.version,
                item.author,
                item.email,
                item.description,
                item.need_storage,
                self.account.address,
                gas=self.config.gas,
            )
            tx = sign_transaction(tx, self._private_key)
            self.log.info("deploy %s %s", item.name, tx.tx_hash)
            status = await submit_transaction(self.transport, tx)
            if status.failed:
                self.log.error("deploy of %s rejected (%s)", item.name, status.result)
            else:
                self.registry.register(item.name, abi, code)
            statuses.append(status)
        await self.wait_for_next_block()
        return statuses

    async def invoke(self, contract_name: str, args: Mapping[str, Any]) -> TxStatus:
        """
        Invoke a deployed contract function.

        Args:
            contract_name: Name the contract was deployed under
            args: ``{"func": name, "args": [positional values]}``

        Raises:
            ContractNotDeployed: If no contract was deployed under that name
            InvokeFunctionUndefined: If ``func`` is missing or unknown
            ArgumentCountMismatch: If the argument count is wrong
        """
        return await submit_transaction(self.transport, self._signed_invoke(contract_name, args))

    def _signed_invoke(self, contract_name: str, args: Mapping[str, Any]) -> Transaction:
        entry = self.registry.require(contract_name)
        func = bind_arguments(entry.abi, args)
        tx = make_invoke_transaction(func, entry.address, self.account.address, gas=self.config.gas)
        tx = sign_transaction(tx, self._private_key)
        self.log.info("invoke %s.%s %s", contract_name, func.name, tx.tx_hash)
        return tx

    async def transfer(self, tx_hash: str, tx_data: str) -> TxStatus:
        """Submit a transaction serialized elsewhere (e.g. an ONT/ONG transfer)."""
        self.log.info("transfer %s", tx_hash)
        return await submit_raw(self.transport, tx_hash, tx_data)

    # ============ Chain queries ============

    async def current_height(self) -> int:
        return await self.transport.current_height()

    async def transaction_hashes_at_height(self, height: int) -> list[str]:
        return await self.transport.block_tx_hashes(height)

    async def confirmation_status(self, tx_hash: str) -> ConfirmationOutcome:
        return await self.transport.confirm(tx_hash)

    async def wait_for_next_block(self, timeout: Optional[float] = None) -> int:
        return await wait_for_next_block(
            self.current_height,
            interval=self.config.poll_interval,
            timeout=timeout if timeout is not None else self.config.poll_timeout,
            sleep=self._sleep,
        )

    # ============ Harness surface ============

    async def install_smart_contract(
        self, descriptors: Optional[Sequence[ContractDescriptor]] = None
    ) -> list[TxStatus]:
        return await self.deploy(descriptors)

    async def invoke_smart_contract(
        self,
        context: Any,
        contract_id: str,
        contract_ver: str,
        args: Any,
        timeout: Optional[float] = None,
    ) -> TxStatus | list[TxStatus]:
        if isinstance(args, Mapping):
            return await self.invoke(contract_id, args)
        # Bind and sign the whole batch first so a bad call submits nothing.
        txs = [self._signed_invoke(contract_id, a) for a in args]
        return list(await asyncio.gather(*(submit_transaction(self.transport, tx) for tx in txs)))

    async def get_height(self) -> int:
        return await self.current_height()

    async def get_block_tx_hashes(self, height: int) -> list[str]:
        return await self.transaction_hashes_at_height(height)

    async def insure_tx(self, tx_hash: str) -> ConfirmationOutcome:
        return await self.confirmation_status(tx_hash)

    async def wait_a_block(self, timeout: Optional[float] = None) -> int:
        return await self.wait_for_next_block(timeout)
