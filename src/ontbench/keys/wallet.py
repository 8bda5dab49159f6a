"""
Wallet Loader - Parse an Ontology wallet file and unlock its account.

Wallet files are JSON documents carrying wallet-level scrypt settings and
one or more accounts, each with a base64 salt and a base64 AES-256-GCM
encrypted private key. Only the first account is ever used.

The decrypted private key lives in memory only; nothing here writes it
back to disk in clear.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from ..errors import ConfigError, WalletDecryptionFailed
from ..formats.schemas import (
    WALLET_SCHEMA,
    SchemaRegistry,
    SchemaValidationError,
    load_json,
    write_json,
)
from ..utils import b64decode, b64encode
from .crypto import (
    CryptoError,
    ScryptParams,
    address_from_private_key,
    decrypt_private_key,
    encrypt_private_key,
    generate_private_key,
    generate_salt,
    public_key_bytes,
)


@dataclass(frozen=True)
class Account:
    """
    A wallet account as stored on disk.

    Attributes:
        address: Base58 account address
        key: Base64 encrypted private key
        salt: Base64 scrypt salt
        scrypt: Wallet-level key derivation parameters
    """
    address: str
    key: str
    salt: str
    scrypt: ScryptParams
    label: str = ""
    public_key: str = ""

    @classmethod
    def from_dict(cls, payload: dict[str, Any], scrypt: ScryptParams) -> "Account":
        return cls(
            address=payload["address"],
            key=payload["key"],
            salt=payload["salt"],
            scrypt=scrypt,
            label=payload.get("label", ""),
            public_key=payload.get("publicKey", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "algorithm": "ECDSA",
            "enc-alg": "aes-256-gcm",
            "isDefault": True,
            "key": self.key,
            "label": self.label,
            "parameters": {"curve": "P-256"},
            "publicKey": self.public_key,
            "salt": self.salt,
            "signatureScheme": "SHA256withECDSA",
        }


@dataclass(frozen=True)
class Wallet:
    scrypt: ScryptParams
    accounts: list[Account] = field(default_factory=list)
    name: str = ""

    @classmethod
    def from_dict(cls, payload: dict[str, Any], registry: SchemaRegistry | None = None) -> "Wallet":
        registry = registry or SchemaRegistry.default()
        try:
            registry.validate_instance(payload, WALLET_SCHEMA)
        except SchemaValidationError as exc:
            raise ConfigError(str(exc)) from exc
        raw = payload["scrypt"]
        scrypt = ScryptParams(
            n=raw["n"],
            r=raw["r"],
            p=raw["p"],
            dk_len=raw.get("dkLen", 64),
        )
        accounts = [Account.from_dict(a, scrypt) for a in payload["accounts"]]
        return cls(scrypt=scrypt, accounts=accounts, name=payload.get("name", ""))

    @classmethod
    def from_path(cls, path: Path, registry: SchemaRegistry | None = None) -> "Wallet":
        try:
            payload = load_json(path)
        except (OSError, ValueError) as exc:
            raise ConfigError(f"Cannot read wallet file {path}: {exc}") from exc
        return cls.from_dict(payload, registry=registry)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": "1.0",
            "scrypt": self.scrypt.to_dict(),
            "accounts": [a.to_dict() for a in self.accounts],
        }

    def write(self, path: Path) -> None:
        write_json(path, self.to_dict())

    @property
    def default_account(self) -> Account:
        if not self.accounts:
            raise WalletDecryptionFailed()
        return self.accounts[0]


def decrypt_account(account: Account, passphrase: str) -> bytes:
    """
    Decrypt an account's private key.

    Args:
        account: Account loaded from a wallet file
        passphrase: Wallet password

    Returns:
        Raw 32-byte private key

    Raises:
        WalletDecryptionFailed: On any failure (wrong passphrase, corrupt
            key material, malformed scrypt parameters, address mismatch)
    """
    try:
        salt = b64decode(account.salt)
        ciphertext = b64decode(account.key)
        private_key = decrypt_private_key(
            ciphertext, passphrase, account.address, salt, account.scrypt
        )
        if address_from_private_key(private_key) != account.address:
            raise CryptoError("Decrypted key does not match account address.")
    except (CryptoError, ValueError) as exc:
        raise WalletDecryptionFailed() from exc
    return private_key


def unlock_wallet(
    path: Path,
    passphrase: str,
    registry: Optional[SchemaRegistry] = None,
) -> tuple[Account, bytes]:
    """Load a wallet file and decrypt its first account."""
    wallet = Wallet.from_path(path, registry=registry)
    account = wallet.default_account
    return account, decrypt_account(account, passphrase)


def create_wallet(
    passphrase: str,
    label: str = "default",
    scrypt: Optional[ScryptParams] = None,
    private_key: Optional[bytes] = None,
) -> tuple[Wallet, bytes]:
    """
    Create a single-account wallet.

    Returns:
        Tuple of (wallet, private_key)
    """
    scrypt = scrypt or ScryptParams()
    private_key = private_key or generate_private_key()
    address = address_from_private_key(private_key)
    salt = generate_salt()
    ciphertext = encrypt_private_key(private_key, passphrase, address, salt, scrypt)
    account = Account(
        address=address,
        key=b64encode(ciphertext),
        salt=b64encode(salt),
        scrypt=scrypt,
        label=label,
        public_key=public_key_bytes(private_key).hex(),
    )
    return Wallet(scrypt=scrypt, accounts=[account], name="ontbench"), private_key
