"""
Ontbench Cryptographic Primitives.

Provides:
- scrypt + AES-256-GCM encryption of account private keys
- ECDSA P-256 / SHA-256 transaction signing and verification
- Account address derivation from a public key
- Contract address derivation from deployed bytecode
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from cryptography.exceptions import InvalidSignature, InvalidTag
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from ..utils import address_to_base58, hash160, nfc

# NeoVM CHECKSIG opcode, appended to the pushed public key to form
# the account verification program.
OP_CHECKSIG = 0xAC


class CryptoError(ValueError):
    pass


class SignatureError(CryptoError):
    pass


@dataclass(frozen=True)
class ScryptParams:
    n: int = 16384
    r: int = 8
    p: int = 8
    dk_len: int = 64

    def to_dict(self) -> dict[str, int]:
        return {"n": self.n, "r": self.r, "p": self.p, "dkLen": self.dk_len}


def derive_key(passphrase: str, salt: bytes, params: ScryptParams) -> bytes:
    if params.dk_len < 64:
        raise CryptoError("scrypt dkLen must be at least 64 bytes.")
    try:
        kdf = Scrypt(salt=salt, length=params.dk_len, n=params.n, r=params.r, p=params.p)
        return kdf.derive(nfc(passphrase).encode("utf-8"))
    except (ValueError, TypeError) as exc:
        raise CryptoError(f"Invalid scrypt parameters: {exc}") from exc


def encrypt_private_key(
    private_key: bytes,
    passphrase: str,
    address: str,
    salt: bytes,
    params: ScryptParams,
) -> bytes:
    derived = derive_key(passphrase, salt, params)
    nonce, key = derived[:12], derived[32:64]
    return AESGCM(key).encrypt(nonce, private_key, address.encode("utf-8"))


def decrypt_private_key(
    ciphertext: bytes,
    passphrase: str,
    address: str,
    salt: bytes,
    params: ScryptParams,
) -> bytes:
    """Decrypt an account key; the account address is bound as associated data."""
    derived = derive_key(passphrase, salt, params)
    nonce, key = derived[:12], derived[32:64]
    try:
        plaintext = AESGCM(key).decrypt(nonce, ciphertext, address.encode("utf-8"))
    except InvalidTag as exc:
        raise CryptoError("Decryption failed: invalid tag or corrupted data") from exc
    if len(plaintext) != 32:
        raise CryptoError("Decrypted private key must be 32 bytes.")
    return plaintext


def generate_private_key() -> bytes:
    key = ec.generate_private_key(ec.SECP256R1())
    return key.private_numbers().private_value.to_bytes(32, "big")


def generate_salt() -> bytes:
    return os.urandom(16)


def _load_private_key(private_key: bytes) -> ec.EllipticCurvePrivateKey:
    try:
        return ec.derive_private_key(int.from_bytes(private_key, "big"), ec.SECP256R1())
    except ValueError as exc:
        raise CryptoError("Invalid P-256 private key.") from exc


def public_key_bytes(private_key: bytes) -> bytes:
    """Compressed SEC1 public key (33 bytes)."""
    return _load_private_key(private_key).public_key().public_bytes(
        encoding=serialization.Encoding.X962,
        format=serialization.PublicFormat.CompressedPoint,
    )


def address_from_public_key(public_key: bytes) -> str:
    program = bytes([len(public_key)]) + public_key + bytes([OP_CHECKSIG])
    return address_to_base58(hash160(program))


def address_from_private_key(private_key: bytes) -> str:
    return address_from_public_key(public_key_bytes(private_key))


def address_from_code(code: bytes) -> bytes:
    """Contract address (20 bytes) of deployed bytecode."""
    return hash160(code)


def sign(message: bytes, private_key: bytes) -> bytes:
    """ECDSA P-256 signature over SHA-256(message), DER encoded."""
    return _load_private_key(private_key).sign(message, ec.ECDSA(hashes.SHA256()))


def verify(message: bytes, signature: bytes, public_key: bytes) -> None:
    """
    Verify a signature produced by :func:`sign`.

    Raises:
        SignatureError: If the public key or signature is invalid.
    """
    try:
        key = ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256R1(), public_key)
    except ValueError as exc:
        raise SignatureError("Invalid public key.") from exc
    try:
        key.verify(signature, message, ec.ECDSA(hashes.SHA256()))
    except InvalidSignature as exc:
        raise SignatureError("Invalid signature.") from exc
