"""End-to-end tests for the Ontology adapter against an in-memory transport."""

from __future__ import annotations

import dataclasses
import json
from pathlib import Path

import pytest
import pytest_asyncio
import rfc8785

from ontbench.adapter import OntologyAdapter
from ontbench.chain.status import ConfirmationOutcome, TxState
from ontbench.config import load_adapter_config
from ontbench.errors import (
    ArgumentCountMismatch,
    ContractAlreadyDeployed,
    ContractNotDeployed,
    InvokeFunctionUndefined,
    PollTimeout,
    WalletDecryptionFailed,
)
from ontbench.keys.crypto import verify
from ontbench.utils import hash160, sha256d

ALICE = "aa" * 20
BOB = "bb" * 20


class RecordingSleep:
    def __init__(self) -> None:
        self.intervals: list[float] = []

    async def __call__(self, interval: float) -> None:
        self.intervals.append(interval)


def _decode(serialized: str) -> dict:
    return json.loads(bytes.fromhex(serialized))


def _display_hash(body: dict) -> str:
    unsigned = {k: v for k, v in body.items() if k != "sigs"}
    return sha256d(rfc8785.dumps(unsigned))[::-1].hex()


@pytest.fixture()
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture()
def make_adapter(benchmark_config: Path, fake_transport, sleep: RecordingSleep):
    def factory(**transport_kwargs) -> OntologyAdapter:
        config = load_adapter_config(benchmark_config)
        return OntologyAdapter(config, transport=fake_transport(**transport_kwargs), sleep=sleep)

    return factory


class TestConstruction:
    def test_unlocks_first_account(self, make_adapter, wallet_file) -> None:
        _, _, address = wallet_file
        adapter = make_adapter()
        assert adapter.address == address

    def test_from_config_file(self, benchmark_config: Path, fake_transport, wallet_file) -> None:
        _, _, address = wallet_file
        adapter = OntologyAdapter.from_config_file(benchmark_config, transport=fake_transport())
        assert adapter.address == address
        assert adapter.config.rpc_url == "http://node.test:20336"

    def test_wrong_password_is_fatal(self, benchmark_config: Path, fake_transport) -> None:
        config = dataclasses.replace(load_adapter_config(benchmark_config), password="wrong")
        with pytest.raises(WalletDecryptionFailed):
            OntologyAdapter(config, transport=fake_transport())

    @pytest.mark.asyncio
    async def test_harness_lifecycle_is_noop(self, make_adapter) -> None:
        adapter = make_adapter()
        await adapter.init()
        context = await adapter.get_context("client")
        assert context is None
        await adapter.release_context(context)
        assert adapter.transport.submitted == []

    @pytest.mark.asyncio
    async def test_injected_transport_not_closed(self, make_adapter) -> None:
        adapter = make_adapter()
        async with adapter:
            pass
        assert adapter.transport.closed is False


class TestDeploy:
    @pytest.mark.asyncio
    async def test_deploy_token_end_to_end(self, make_adapter, sleep: RecordingSleep, contract_dir: Path) -> None:
        adapter = make_adapter(heights=[10, 11])
        statuses = await adapter.deploy()

        assert [s.state for s in statuses] == [TxState.CREATED]
        assert "Token" in adapter.registry
        entry = adapter.registry.require("Token")
        assert entry.code == bytes.fromhex((contract_dir / "token.avm").read_text().strip())
        assert entry.abi.get_function("transfer") is not None

        (serialized,) = adapter.transport.submitted
        body = _decode(serialized)
        assert body["txType"] == "deploy"
        assert body["payload"]["name"] == "Token"
        assert body["payload"]["version"] == "1.0"
        assert body["payload"]["needStorage"] is True
        assert body["gasPrice"] == 0
        assert body["gasLimit"] == 20_000_000
        assert body["payer"] == adapter.address
        assert _display_hash(body) == statuses[0].tx_hash

        # Height moved from 10 to 11 on the first poll.
        assert adapter.transport.height_calls == 2
        assert sleep.intervals == []

    @pytest.mark.asyncio
    async def test_deploy_waits_for_block(self, make_adapter, sleep: RecordingSleep) -> None:
        adapter = make_adapter(heights=[10, 10, 10, 11])
        await adapter.install_smart_contract()
        assert sleep.intervals == [0.01, 0.01]

    @pytest.mark.asyncio
    async def test_rejected_deploy_is_not_registered(self, make_adapter) -> None:
        adapter = make_adapter(submit_result=-1)
        (status,) = await adapter.deploy()
        assert status.failed
        assert "Token" not in adapter.registry

    @pytest.mark.asyncio
    async def test_redeploy_rejected_when_disabled(self, make_adapter) -> None:
        adapter = make_adapter(heights=[1, 2, 3])
        adapter.registry.allow_redeploy = False
        await adapter.deploy()
        with pytest.raises(ContractAlreadyDeployed):
            await adapter.deploy()
        assert len(adapter.transport.submitted) == 1

    @pytest.mark.asyncio
    async def test_poll_timeout(self, benchmark_config: Path, fake_transport) -> None:
        config = dataclasses.replace(load_adapter_config(benchmark_config), poll_timeout=0.05)
        adapter = OntologyAdapter(config, transport=fake_transport(heights=[5]))
        with pytest.raises(PollTimeout):
            await adapter.wait_a_block()


class TestInvoke:
    @pytest_asyncio.fixture()
    async def deployed(self, make_adapter) -> OntologyAdapter:
        adapter = make_adapter()
        await adapter.deploy()
        adapter.transport.submitted.clear()
        return adapter

    @pytest.mark.asyncio
    async def test_invoke_binds_and_signs(self, deployed: OntologyAdapter, contract_dir: Path) -> None:
        status = await deployed.invoke("Token", {"func": "transfer", "args": [ALICE, BOB, 5]})
        assert not status.failed

        body = _decode(deployed.transport.submitted[0])
        code = bytes.fromhex((contract_dir / "token.avm").read_text().strip())
        assert body["txType"] == "invoke"
        assert body["payload"]["contract"] == hash160(code).hex()
        assert body["payload"]["method"] == "transfer"
        assert [p["value"] for p in body["payload"]["params"]] == [ALICE, BOB, "5"]
        assert _display_hash(body) == status.tx_hash

        sig = body["sigs"][0]
        digest = bytes.fromhex(status.tx_hash)[::-1]
        verify(digest, bytes.fromhex(sig["sigData"]), bytes.fromhex(sig["pubKey"]))

    @pytest.mark.asyncio
    async def test_rejected_invoke_keeps_hash(self, deployed: OntologyAdapter) -> None:
        deployed.transport.submit_result = -43001
        status = await deployed.invoke("Token", {"func": "balanceOf", "args": [ALICE]})
        assert status.failed
        assert status.tx_hash == _display_hash(_decode(deployed.transport.submitted[0]))

    @pytest.mark.asyncio
    async def test_unknown_contract(self, deployed: OntologyAdapter) -> None:
        with pytest.raises(ContractNotDeployed):
            await deployed.invoke("Vote", {"func": "transfer", "args": [ALICE, BOB, 5]})
        assert deployed.transport.submitted == []

    @pytest.mark.asyncio
    async def test_before_deploy(self, make_adapter) -> None:
        adapter = make_adapter()
        with pytest.raises(ContractNotDeployed):
            await adapter.invoke("Token", {"func": "name", "args": []})

    @pytest.mark.asyncio
    @pytest.mark.parametrize("args", [{"args": [ALICE]}, {"func": "mint", "args": [ALICE]}])
    async def test_undefined_function(self, deployed: OntologyAdapter, args: dict) -> None:
        with pytest.raises(InvokeFunctionUndefined):
            await deployed.invoke("Token", args)
        assert deployed.transport.submitted == []

    @pytest.mark.asyncio
    async def test_argument_count(self, deployed: OntologyAdapter) -> None:
        with pytest.raises(ArgumentCountMismatch):
            await deployed.invoke("Token", {"func": "transfer", "args": [ALICE]})

    @pytest.mark.asyncio
    async def test_batch_invoke(self, deployed: OntologyAdapter) -> None:
        calls = [{"func": "balanceOf", "args": [ALICE]}, {"func": "balanceOf", "args": [BOB]}]
        statuses = await deployed.invoke_smart_contract(None, "Token", "1.0", calls)
        assert len(statuses) == 2
        assert len({s.tx_hash for s in statuses}) == 2
        assert len(deployed.transport.submitted) == 2

    @pytest.mark.asyncio
    async def test_batch_with_bad_call_submits_nothing(self, deployed: OntologyAdapter) -> None:
        calls = [{"func": "name", "args": []}, {"func": "nope", "args": []}, {"func": "name", "args": []}]
        with pytest.raises(InvokeFunctionUndefined):
            await deployed.invoke_smart_contract(None, "Token", "1.0", calls)
        assert deployed.transport.submitted == []

    @pytest.mark.asyncio
    async def test_batch_on_unknown_contract_submits_nothing(self, deployed: OntologyAdapter) -> None:
        with pytest.raises(ContractNotDeployed):
            await deployed.invoke_smart_contract(None, "Vote", "1.0", [{"func": "name", "args": []}])
        assert deployed.transport.submitted == []

    @pytest.mark.asyncio
    async def test_single_invoke_via_harness(self, deployed: OntologyAdapter) -> None:
        status = await deployed.invoke_smart_contract(None, "Token", "1.0", {"func": "name", "args": []})
        assert status.state is TxState.CREATED


class TestTransferAndQueries:
    @pytest.mark.asyncio
    async def test_transfer_passthrough(self, make_adapter) -> None:
        adapter = make_adapter()
        status = await adapter.transfer("cd" * 32, "00d1c0ffee")
        assert status.tx_hash == "cd" * 32
        assert adapter.transport.submitted == ["00d1c0ffee"]

    @pytest.mark.asyncio
    async def test_rejected_transfer(self, make_adapter) -> None:
        adapter = make_adapter(submit_result=-1)
        status = await adapter.transfer("cd" * 32, "00d1c0ffee")
        assert status.failed

    @pytest.mark.asyncio
    async def test_queries_delegate(self, make_adapter) -> None:
        adapter = make_adapter(
            heights=[42],
            blocks={42: ["01" * 32]},
            outcomes={"01" * 32: ConfirmationOutcome.CONFIRMED},
        )
        assert await adapter.get_height() == 42
        assert await adapter.get_block_tx_hashes(42) == ["01" * 32]
        assert await adapter.insure_tx("01" * 32) is ConfirmationOutcome.CONFIRMED
        assert await adapter.confirmation_status("02" * 32) is ConfirmationOutcome.UNKNOWN
