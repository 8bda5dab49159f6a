"""
ABI Loader and Binder - Parse contract ABI descriptions and bind call arguments.

ABI files are JSON documents (as exported by SmartX / the Ontology compiler)
listing the contract's functions and their ordered, typed parameters.
Binding never mutates the loaded ABI; each call produces a fresh
``BoundFunction``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from ..errors import (
    ArgumentCountMismatch,
    ConfigError,
    InvalidArgument,
    InvokeFunctionUndefined,
)
from ..formats.schemas import ABI_SCHEMA, SchemaRegistry, SchemaValidationError, load_json


@dataclass(frozen=True)
class AbiParameter:
    name: str
    type: str


@dataclass(frozen=True)
class AbiFunction:
    name: str
    parameters: tuple[AbiParameter, ...] = ()
    return_type: str = ""


@dataclass(frozen=True)
class AbiInfo:
    hash: str = ""
    entrypoint: str = ""
    functions: tuple[AbiFunction, ...] = ()

    @classmethod
    def from_dict(cls, payload: dict[str, Any], registry: SchemaRegistry | None = None) -> "AbiInfo":
        # SmartX exports wrap the description in an "abi" member.
        if "functions" not in payload and isinstance(payload.get("abi"), dict):
            payload = payload["abi"]
        registry = registry or SchemaRegistry.default()
        try:
            registry.validate_instance(payload, ABI_SCHEMA)
        except SchemaValidationError as exc:
            raise ConfigError(str(exc)) from exc
        functions = tuple(
            AbiFunction(
                name=f["name"],
                parameters=tuple(
                    AbiParameter(name=p["name"], type=p["type"])
                    for p in f.get("parameters", [])
                ),
                return_type=f.get("returntype", ""),
            )
            for f in payload["functions"]
        )
        return cls(
            hash=payload.get("hash", ""),
            entrypoint=payload.get("entrypoint", ""),
            functions=functions,
        )

    @classmethod
    def from_path(cls, path: Path, registry: SchemaRegistry | None = None) -> "AbiInfo":
        try:
            payload = load_json(path)
        except (OSError, ValueError) as exc:
            raise ConfigError(f"Cannot read ABI file {path}: {exc}") from exc
        return cls.from_dict(payload, registry=registry)

    def get_function(self, name: str) -> Optional[AbiFunction]:
        for func in self.functions:
            if func.name == name:
                return func
        return None


@dataclass(frozen=True)
class BoundParameter:
    name: str
    type: str
    value: Any


@dataclass(frozen=True)
class BoundFunction:
    name: str
    parameters: tuple[BoundParameter, ...] = field(default_factory=tuple)


def _coerce(param: AbiParameter, value: Any) -> Any:
    kind = param.type.lower()
    if kind == "integer":
        if isinstance(value, bool):
            raise InvalidArgument(f"{param.name}: expected Integer, got bool")
        if isinstance(value, float) and not value.is_integer():
            raise InvalidArgument(f"{param.name}: expected Integer, got {value!r}")
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise InvalidArgument(f"{param.name}: expected Integer, got {value!r}") from exc
    if kind == "boolean":
        if isinstance(value, bool):
            return value
        if value in ("true", "false"):
            return value == "true"
        raise InvalidArgument(f"{param.name}: expected Boolean, got {value!r}")
    if kind in ("string", "address"):
        if not isinstance(value, str):
            raise InvalidArgument(f"{param.name}: expected {param.type}, got {value!r}")
        return value
    if kind == "bytearray":
        if not isinstance(value, str):
            raise InvalidArgument(f"{param.name}: expected hex ByteArray, got {value!r}")
        try:
            bytes.fromhex(value)
        except ValueError as exc:
            raise InvalidArgument(f"{param.name}: expected hex ByteArray, got {value!r}") from exc
        return value.lower()
    if kind == "array":
        if not isinstance(value, (list, tuple)):
            raise InvalidArgument(f"{param.name}: expected Array, got {value!r}")
        return list(value)
    return value


def bind_arguments(abi: AbiInfo, args: Mapping[str, Any]) -> BoundFunction:
    """
    Bind a harness call ``{"func": name, "args": [...]}`` to an ABI function.

    Args:
        abi: ABI of the target contract
        args: Call arguments with ``func`` and positional ``args``

    Returns:
        BoundFunction with one bound parameter per declared parameter

    Raises:
        InvokeFunctionUndefined: If ``func`` is missing or not in the ABI
        ArgumentCountMismatch: If the argument count differs from the
            declared parameter count
        InvalidArgument: If a value does not fit its declared type
    """
    func_name = args.get("func")
    if func_name is None:
        raise InvokeFunctionUndefined("invoke arguments do not name a contract function")
    func = abi.get_function(func_name)
    if func is None:
        raise InvokeFunctionUndefined(f"function {func_name!r} is not defined in the contract ABI")

    values: Sequence[Any] = args.get("args") or []
    if len(values) != len(func.parameters):
        raise ArgumentCountMismatch(func.name, len(func.parameters), len(values))

    bound = tuple(
        BoundParameter(name=p.name, type=p.type, value=_coerce(p, v))
        for p, v in zip(func.parameters, values)
    )
    return BoundFunction(name=func.name, parameters=bound)
