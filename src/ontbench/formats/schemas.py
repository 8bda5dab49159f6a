"""
JSON Schema validation for the files ontbench reads.

Schemas ship with the package under ``formats/v1``. A registry compiles
each schema once and reuses the validator for every later document.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import jsonschema

SCHEMA_DIR = Path(__file__).resolve().parent / "v1"

WALLET_SCHEMA = "wallet.schema.json"
ABI_SCHEMA = "abi.schema.json"
NETWORK_SCHEMA = "network.schema.json"
BENCHMARK_SCHEMA = "benchmark.schema.json"


class SchemaValidationError(ValueError):
    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []

    def __str__(self) -> str:
        if not self.errors:
            return super().__str__()
        return f"{super().__str__()} {'; '.join(self.errors)}"


class SchemaRegistry:
    _default: Optional["SchemaRegistry"] = None

    def __init__(self, schema_root: Path = SCHEMA_DIR) -> None:
        self.schema_root = schema_root
        self._validators: dict[str, jsonschema.Validator] = {}

    @classmethod
    def default(cls) -> "SchemaRegistry":
        """Registry over the packaged schemas, shared by all loaders."""
        if cls._default is None:
            cls._default = cls()
        return cls._default

    def validator(self, schema_name: str) -> jsonschema.Validator:
        cached = self._validators.get(schema_name)
        if cached is not None:
            return cached
        schema = load_json(self.schema_root / schema_name)
        validator_cls = jsonschema.validators.validator_for(schema)
        validator_cls.check_schema(schema)
        compiled = validator_cls(schema, format_checker=validator_cls.FORMAT_CHECKER)
        self._validators[schema_name] = compiled
        return compiled

    def validate_instance(self, instance: Any, schema_name: str) -> None:
        """
        Raises:
            SchemaValidationError: Listing every violation as ``<json path>: <message>``
        """
        problems = sorted(
            f"{err.json_path}: {err.message}"
            for err in self.validator(schema_name).iter_errors(instance)
        )
        if problems:
            raise SchemaValidationError(f"{schema_name} validation failed:", errors=problems)


def load_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def write_json(path: Path, payload: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, sort_keys=True) + "\n", encoding="utf-8")
