"""
StrKey address encoding for Stellar account identities.

Account keys travel as raw 32-byte ed25519 keys inside older claimed-offer
entries and as strkey strings (``G...`` accounts, ``M...`` muxed accounts)
everywhere else. This module converts between the two.
"""

from __future__ import annotations

import base64
import binascii
import struct

VERSION_ED25519_PUBLIC_KEY = 6 << 3  # "G"
VERSION_MUXED_ACCOUNT = 12 << 3  # "M"

ED25519_KEY_LENGTH = 32
MUXED_PAYLOAD_LENGTH = ED25519_KEY_LENGTH + 8


def _checksum(payload: bytes) -> bytes:
    # CRC16-XModem, little-endian
    return struct.pack("<H", binascii.crc_hqx(payload, 0))


def _encode(version: int, data: bytes) -> str:
    payload = bytes([version]) + data
    return base64.b32encode(payload + _checksum(payload)).decode("ascii").rstrip("=")


def _decode(version: int, encoded: str) -> bytes:
    if not isinstance(encoded, str) or not encoded:
        raise ValueError("strkey must be a non-empty string")
    padded = encoded + "=" * (-len(encoded) % 8)
    try:
        raw = base64.b32decode(padded)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid strkey encoding: {encoded!r}") from e
    if len(raw) < 3:
        raise ValueError(f"strkey too short: {encoded!r}")
    payload, checksum = raw[:-2], raw[-2:]
    if payload[0] != version:
        raise ValueError(f"Unexpected strkey version byte {payload[0]} for {encoded!r}")
    if _checksum(payload) != checksum:
        raise ValueError(f"strkey checksum mismatch for {encoded!r}")
    return payload[1:]


def encode_ed25519_public_key(key: bytes) -> str:
    """Return the ``G...`` address for a raw 32-byte ed25519 public key."""
    if len(key) != ED25519_KEY_LENGTH:
        raise ValueError(f"ed25519 key must be {ED25519_KEY_LENGTH} bytes, got {len(key)}")
    return _encode(VERSION_ED25519_PUBLIC_KEY, key)


def decode_ed25519_public_key(address: str) -> bytes:
    """Return the raw ed25519 key behind a ``G...`` address."""
    key = _decode(VERSION_ED25519_PUBLIC_KEY, address)
    if len(key) != ED25519_KEY_LENGTH:
        raise ValueError(f"Invalid ed25519 public key length in {address!r}")
    return key


def encode_muxed_account(key: bytes, muxed_id: int) -> str:
    """Return the ``M...`` address for an ed25519 key and a 64-bit sub-account id."""
    if len(key) != ED25519_KEY_LENGTH:
        raise ValueError(f"ed25519 key must be {ED25519_KEY_LENGTH} bytes, got {len(key)}")
    return _encode(VERSION_MUXED_ACCOUNT, key + struct.pack(">Q", muxed_id))


def decode_muxed_account(address: str) -> tuple[bytes, int]:
    """Return ``(ed25519_key, muxed_id)`` for an ``M...`` address."""
    data = _decode(VERSION_MUXED_ACCOUNT, address)
    if len(data) != MUXED_PAYLOAD_LENGTH:
        raise ValueError(f"Invalid muxed account payload length in {address!r}")
    (muxed_id,) = struct.unpack(">Q", data[ED25519_KEY_LENGTH:])
    return data[:ED25519_KEY_LENGTH], muxed_id


def account_address(address: str) -> str:
    """Resolve any account strkey (``G...`` or ``M...``) to its ``G...`` address."""
    if address.startswith("M"):
        key, _ = decode_muxed_account(address)
        return encode_ed25519_public_key(key)
    decode_ed25519_public_key(address)
    return address
