"""
Contract Registry - Deployed contract name -> (ABI, bytecode).

Populated by deployment and consulted by invocation. Entries are never
removed; a redeploy under an existing name replaces the entry unless the
registry was created with ``allow_redeploy=False``.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Iterator, Optional

from .chain.abi import AbiInfo
from .errors import ContractAlreadyDeployed, ContractNotDeployed
from .keys.crypto import address_from_code


@dataclass(frozen=True)
class RegistryEntry:
    name: str
    abi: AbiInfo
    code: bytes

    @property
    def address(self) -> bytes:
        return address_from_code(self.code)


class ContractRegistry:
    def __init__(self, allow_redeploy: bool = True) -> None:
        self.allow_redeploy = allow_redeploy
        self._entries: dict[str, RegistryEntry] = {}
        self._lock = threading.RLock()
        self.log = logging.getLogger("ontbench.registry")

    def register(self, name: str, abi: AbiInfo, code: bytes) -> RegistryEntry:
        entry = RegistryEntry(name=name, abi=abi, code=code)
        with self._lock:
            if name in self._entries:
                if not self.allow_redeploy:
                    raise ContractAlreadyDeployed(name)
                self.log.warning("Replacing registry entry for contract %s", name)
            self._entries[name] = entry
        return entry

    def lookup(self, name: str) -> Optional[RegistryEntry]:
        with self._lock:
            return self._entries.get(name)

    def require(self, name: str) -> RegistryEntry:
        entry = self.lookup(name)
        if entry is None:
            raise ContractNotDeployed(name)
        return entry

    def check_available(self, name: str) -> None:
        """Raise if ``name`` may not be (re)deployed."""
        if not self.allow_redeploy and name in self:
            raise ContractAlreadyDeployed(name)

    def names(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[RegistryEntry]:
        with self._lock:
            return iter(list(self._entries.values()))
