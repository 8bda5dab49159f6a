"""
Configuration - Benchmark and network configuration files.

A benchmark configuration points at a network configuration:

    {"blockchain": {"type": "ontology", "config": "ontology.json"}}

The network configuration carries the wallet, its password, node URL and
the contracts to deploy. Relative paths are resolved against the directory
of the file that names them. ``ONTBENCH_RPC_URL`` and
``ONTBENCH_WALLET_PASSWORD`` (from the environment or a ``.env`` file)
override the file values.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from .chain.poller import DEFAULT_POLL_INTERVAL
from .chain.rpc import DEFAULT_RPC_URL
from .chain.tx import DEFAULT_GAS_LIMIT, DEFAULT_GAS_PRICE, GasConfig
from .errors import ConfigError
from .formats.schemas import (
    BENCHMARK_SCHEMA,
    NETWORK_SCHEMA,
    SchemaRegistry,
    SchemaValidationError,
    load_json,
)

ENV_RPC_URL = "ONTBENCH_RPC_URL"
ENV_WALLET_PASSWORD = "ONTBENCH_WALLET_PASSWORD"


@dataclass(frozen=True)
class ContractDescriptor:
    name: str
    version: str
    path: Path
    abi: Path
    author: str = ""
    email: str = ""
    description: str = ""
    need_storage: bool = False

    @classmethod
    def from_dict(cls, payload: dict[str, Any], base_dir: Path) -> "ContractDescriptor":
        return cls(
            name=payload["name"],
            version=payload["version"],
            path=_resolve(payload["path"], base_dir),
            abi=_resolve(payload["abi"], base_dir),
            author=payload.get("author", ""),
            email=payload.get("email", ""),
            description=payload.get("description", ""),
            need_storage=payload.get("needStorage", False),
        )

    def read_code(self) -> bytes:
        """Read compiled bytecode (hex text, as emitted by the compiler)."""
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read bytecode for {self.name}: {exc}") from exc
        try:
            return bytes.fromhex(text.strip().removeprefix("0x"))
        except ValueError as exc:
            raise ConfigError(f"Bytecode for {self.name} is not valid hex: {self.path}") from exc


@dataclass(frozen=True)
class AdapterConfig:
    wallet_path: Path
    password: str
    rpc_url: str = DEFAULT_RPC_URL
    contracts: tuple[ContractDescriptor, ...] = ()
    gas: GasConfig = field(default_factory=GasConfig)
    poll_interval: float = DEFAULT_POLL_INTERVAL
    poll_timeout: Optional[float] = None
    allow_redeploy: bool = True


def _resolve(value: str, base_dir: Path) -> Path:
    path = Path(value).expanduser()
    return path if path.is_absolute() else (base_dir / path).resolve()


def _load(path: Path, schema: str, registry: SchemaRegistry) -> dict[str, Any]:
    try:
        payload = load_json(path)
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Cannot read configuration {path}: {exc}") from exc
    try:
        registry.validate_instance(payload, schema)
    except SchemaValidationError as exc:
        raise ConfigError(f"{path}: {exc}") from exc
    return payload


def load_network_config(
    path: Path,
    registry: Optional[SchemaRegistry] = None,
    env_file: Optional[Path] = None,
) -> AdapterConfig:
    """
    Load an Ontology network configuration file.

    Raises:
        ConfigError: If the file is missing, invalid, or no wallet
            password is available
    """
    registry = registry or SchemaRegistry.default()
    path = Path(path)
    section = _load(path, NETWORK_SCHEMA, registry)["ontology"]
    base_dir = path.resolve().parent

    env_file = env_file or Path.cwd() / ".env"
    if env_file.exists():
        load_dotenv(env_file, override=False)

    password = os.environ.get(ENV_WALLET_PASSWORD, section.get("password"))
    if password is None:
        raise ConfigError(
            f"No wallet password. Set 'password' in {path} or {ENV_WALLET_PASSWORD}."
        )

    return AdapterConfig(
        wallet_path=_resolve(section["wallet"], base_dir),
        password=password,
        rpc_url=os.environ.get(ENV_RPC_URL, section.get("url", DEFAULT_RPC_URL)),
        contracts=tuple(
            ContractDescriptor.from_dict(c, base_dir) for c in section["contract"]
        ),
        gas=GasConfig(
            gas_price=section.get("gasPrice", DEFAULT_GAS_PRICE),
            gas_limit=section.get("gasLimit", DEFAULT_GAS_LIMIT),
        ),
        poll_interval=section.get("pollInterval", DEFAULT_POLL_INTERVAL),
        poll_timeout=section.get("pollTimeout"),
        allow_redeploy=section.get("allowRedeploy", True),
    )


def load_adapter_config(
    path: Path,
    registry: Optional[SchemaRegistry] = None,
    env_file: Optional[Path] = None,
) -> AdapterConfig:
    """
    Load configuration from a benchmark file or a network file directly.

    A file with a top-level ``blockchain`` member is treated as a
    benchmark configuration and followed to its network configuration.
    """
    registry = registry or SchemaRegistry.default()
    path = Path(path)
    try:
        payload = load_json(path)
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Cannot read configuration {path}: {exc}") from exc
    if isinstance(payload, dict) and "blockchain" in payload:
        bench = _load(path, BENCHMARK_SCHEMA, registry)
        network_path = _resolve(bench["blockchain"]["config"], path.resolve().parent)
        return load_network_config(network_path, registry=registry, env_file=env_file)
    return load_network_config(path, registry=registry, env_file=env_file)
