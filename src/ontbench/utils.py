from __future__ import annotations

import base64
import hashlib
import time
import unicodedata

import base58
from Crypto.Hash import RIPEMD160

ADDRESS_VERSION = 0x17


def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def sha256d(data: bytes) -> bytes:
    return sha256(sha256(data))


def hash160(data: bytes) -> bytes:
    h = RIPEMD160.new()
    h.update(sha256(data))
    return h.digest()


def b64decode(value: str) -> bytes:
    return base64.b64decode(value, validate=True)


def b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def nfc(value: str) -> str:
    return unicodedata.normalize("NFC", value)


def address_to_base58(address: bytes) -> str:
    return base58.b58encode_check(bytes([ADDRESS_VERSION]) + address).decode("ascii")


def address_from_base58(value: str) -> bytes:
    payload = base58.b58decode_check(value)
    if len(payload) != 21 or payload[0] != ADDRESS_VERSION:
        raise ValueError(f"Not an account address: {value}")
    return payload[1:]


def now_ms() -> int:
    return int(time.time() * 1000)
