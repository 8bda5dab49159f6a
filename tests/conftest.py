"""Shared fixtures: fast wallets, contract files, configs and a fake transport."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import pytest

from ontbench.chain.status import ConfirmationOutcome
from ontbench.keys.crypto import ScryptParams
from ontbench.keys.wallet import create_wallet

PASSWORD = "benchmark-password"

# Low-cost scrypt so the suite stays fast.
FAST_SCRYPT = ScryptParams(n=1024, r=8, p=1, dk_len=64)

TOKEN_CODE_HEX = "0122c56b6a00527ac46a51527ac46a00c3076465706c6f79"

TOKEN_ABI = {
    "hash": "0x8c0f1ac2f2c0d8b8e1ab3c2a0a3a8f67d2f4a1b0",
    "entrypoint": "Main",
    "functions": [
        {"name": "Main", "parameters": [{"name": "operation", "type": "String"}, {"name": "args", "type": "Array"}], "returntype": "Any"},
        {
            "name": "transfer",
            "parameters": [
                {"name": "from_acct", "type": "ByteArray"},
                {"name": "to_acct", "type": "ByteArray"},
                {"name": "amount", "type": "Integer"},
            ],
            "returntype": "Boolean",
        },
        {"name": "balanceOf", "parameters": [{"name": "account", "type": "ByteArray"}], "returntype": "Integer"},
        {"name": "name", "parameters": [], "returntype": "String"},
    ],
}


class FakeTransport:
    """In-memory transport recording submissions and replaying heights."""

    def __init__(
        self,
        heights: Optional[list[int]] = None,
        submit_result: int = 0,
        blocks: Optional[dict[int, list[str]]] = None,
        outcomes: Optional[dict[str, ConfirmationOutcome]] = None,
    ) -> None:
        self.heights = list(heights or [10, 11])
        self.submit_result = submit_result
        self.blocks = blocks or {}
        self.outcomes = outcomes or {}
        self.submitted: list[str] = []
        self.height_calls = 0
        self.closed = False

    async def submit(self, serialized_tx: str) -> int:
        self.submitted.append(serialized_tx)
        return self.submit_result

    async def current_height(self) -> int:
        self.height_calls += 1
        if len(self.heights) > 1:
            return self.heights.pop(0)
        return self.heights[0]

    async def block_tx_hashes(self, height: int) -> list[str]:
        return list(self.blocks.get(height, []))

    async def confirm(self, tx_hash: str) -> ConfirmationOutcome:
        return self.outcomes.get(tx_hash, ConfirmationOutcome.UNKNOWN)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    # setenv first so teardown also removes values a .env file loaded.
    for name in ("ONTBENCH_RPC_URL", "ONTBENCH_WALLET_PASSWORD", "ONTBENCH_CONFIG"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)


@pytest.fixture()
def wallet_file(tmp_path: Path) -> tuple[Path, bytes, str]:
    """Write a one-account wallet. Returns (path, private_key, address)."""
    wallet, private_key = create_wallet(PASSWORD, label="bench", scrypt=FAST_SCRYPT)
    path = tmp_path / "wallet.dat"
    wallet.write(path)
    return path, private_key, wallet.default_account.address


@pytest.fixture()
def contract_dir(tmp_path: Path) -> Path:
    root = tmp_path / "contracts"
    root.mkdir()
    (root / "token.avm").write_text(TOKEN_CODE_HEX + "\n", encoding="utf-8")
    (root / "token.abi.json").write_text(json.dumps(TOKEN_ABI), encoding="utf-8")
    return root


@pytest.fixture()
def network_config(tmp_path: Path, wallet_file: tuple[Path, bytes, str], contract_dir: Path) -> Path:
    payload = {
        "ontology": {
            "url": "http://node.test:20336",
            "wallet": "wallet.dat",
            "password": PASSWORD,
            "pollInterval": 0.01,
            "contract": [
                {
                    "name": "Token",
                    "version": "1.0",
                    "author": "bench",
                    "email": "bench@example.com",
                    "description": "benchmark token",
                    "needStorage": True,
                    "path": "contracts/token.avm",
                    "abi": "contracts/token.abi.json",
                }
            ],
        }
    }
    path = tmp_path / "ontology.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


@pytest.fixture()
def benchmark_config(tmp_path: Path, network_config: Path) -> Path:
    path = tmp_path / "benchmark.json"
    path.write_text(
        json.dumps({"blockchain": {"type": "ontology", "config": network_config.name}}),
        encoding="utf-8",
    )
    return path


@pytest.fixture()
def password() -> str:
    return PASSWORD


@pytest.fixture()
def fake_transport() -> type[FakeTransport]:
    return FakeTransport


@pytest.fixture()
def token_abi() -> dict:
    return json.loads(json.dumps(TOKEN_ABI))
