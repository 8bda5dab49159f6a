"""
Transaction Builder - Build and sign deploy / invoke transactions.

Transactions are encoded with RFC 8785 canonical JSON. The identifying hash
is SHA-256d over the unsigned encoding, so signing never changes it; the
network displays it byte-reversed (see ``Transaction.tx_hash``).
"""

from __future__ import annotations

import dataclasses
import enum
import secrets
from dataclasses import dataclass
from typing import Any, Optional

import rfc8785

from ..keys.crypto import SignatureError, public_key_bytes, sign, verify
from ..utils import address_from_base58, sha256d
from .abi import BoundFunction

TX_VERSION = 0
DEFAULT_GAS_PRICE = 0
DEFAULT_GAS_LIMIT = 20_000_000


class TxKind(str, enum.Enum):
    DEPLOY = "deploy"
    INVOKE = "invoke"


@dataclass(frozen=True)
class GasConfig:
    gas_price: int = DEFAULT_GAS_PRICE
    gas_limit: int = DEFAULT_GAS_LIMIT


@dataclass(frozen=True)
class TxSignature:
    public_key: bytes
    signature: bytes

    def to_dict(self) -> dict[str, str]:
        return {"pubKey": self.public_key.hex(), "sigData": self.signature.hex()}


@dataclass(frozen=True)
class Transaction:
    kind: TxKind
    payer: str
    payload: dict[str, Any]
    gas_price: int = DEFAULT_GAS_PRICE
    gas_limit: int = DEFAULT_GAS_LIMIT
    nonce: int = 0
    version: int = TX_VERSION
    sigs: tuple[TxSignature, ...] = ()

    def unsigned_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "txType": self.kind.value,
            "nonce": self.nonce,
            "gasPrice": self.gas_price,
            "gasLimit": self.gas_limit,
            "payer": self.payer,
            "payload": self.payload,
        }

    def encode_unsigned(self) -> bytes:
        return rfc8785.dumps(self.unsigned_dict())

    def hash(self) -> bytes:
        return sha256d(self.encode_unsigned())

    @property
    def tx_hash(self) -> str:
        """Display hash: byte-reversed hex of :meth:`hash`."""
        return self.hash()[::-1].hex()

    @property
    def is_signed(self) -> bool:
        return bool(self.sigs)

    def serialize(self) -> str:
        """Hex encoding of the signed transaction, as posted to the node."""
        if not self.is_signed:
            raise SignatureError("Refusing to serialize an unsigned transaction.")
        body = self.unsigned_dict()
        body["sigs"] = [s.to_dict() for s in self.sigs]
        return rfc8785.dumps(body).hex()

    def verify_signatures(self) -> None:
        if not self.is_signed:
            raise SignatureError("Transaction is not signed.")
        digest = self.hash()
        for sig in self.sigs:
            verify(digest, sig.signature, sig.public_key)


def _new_nonce() -> int:
    return secrets.randbelow(2**32)


def _wire_value(value: Any) -> Any:
    # Integers travel as decimal strings; rfc8785 rejects ints beyond 2**53.
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, list):
        return [_wire_value(v) for v in value]
    return value


def make_deploy_transaction(
    code: bytes,
    name: str,
    version: str,
    author: str,
    email: str,
    description: str,
    need_storage: bool,
    payer: str,
    gas: Optional[GasConfig] = None,
    nonce: Optional[int] = None,
) -> Transaction:
    """
    Build an unsigned contract deployment transaction.

    Args:
        code: Compiled contract bytecode
        name, version, author, email, description: Contract metadata
        need_storage: Whether the contract uses persistent storage
        payer: Base58 address paying for gas
        gas: Gas price / limit (default: 0 / 20,000,000)
        nonce: Transaction nonce (default: random uint32)

    Returns:
        Unsigned Transaction
    """
    address_from_base58(payer)
    gas = gas or GasConfig()
    return Transaction(
        kind=TxKind.DEPLOY,
        payer=payer,
        payload={
            "code": code.hex(),
            "needStorage": bool(need_storage),
            "name": name,
            "version": version,
            "author": author,
            "email": email,
            "description": description,
        },
        gas_price=gas.gas_price,
        gas_limit=gas.gas_limit,
        nonce=_new_nonce() if nonce is None else nonce,
    )


def make_invoke_transaction(
    func: BoundFunction,
    contract_address: bytes,
    payer: str,
    gas: Optional[GasConfig] = None,
    nonce: Optional[int] = None,
) -> Transaction:
    """Build an unsigned contract invocation transaction."""
    address_from_base58(payer)
    gas = gas or GasConfig()
    return Transaction(
        kind=TxKind.INVOKE,
        payer=payer,
        payload={
            "contract": contract_address.hex(),
            "method": func.name,
            "params": [
                {"name": p.name, "type": p.type, "value": _wire_value(p.value)}
                for p in func.parameters
            ],
        },
        gas_price=gas.gas_price,
        gas_limit=gas.gas_limit,
        nonce=_new_nonce() if nonce is None else nonce,
    )


def sign_transaction(tx: Transaction, private_key: bytes) -> Transaction:
    """
    Sign a transaction with an account private key.

    Returns a new Transaction; ``tx`` and the key are left untouched.

    Raises:
        SignatureError: If ``tx`` already carries a signature
    """
    if tx.is_signed:
        raise SignatureError("Transaction is already signed.")
    signature = sign(tx.hash(), private_key)
    return dataclasses.replace(
        tx, sigs=(TxSignature(public_key_bytes(private_key), signature),)
    )
