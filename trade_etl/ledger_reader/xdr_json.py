"""
Helpers for Stellar XDR values in their JSON form.

Stellar RPC (``xdrFormat: "json"``) serves envelopes and results as JSON
renderings of the XDR types: structs are objects with snake_case fields,
unions are single-key objects ``{"arm": value}`` (or the bare string ``"arm"``
for void arms), enums are snake_case strings, and 64-bit integers may be
strings. Everything here is purely structural.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from trade_etl.core import strkey
from trade_etl.core.exceptions import DecodeShapeError

ASSET_TYPE_NATIVE = "native"
ASSET_TYPE_CREDIT_ALPHANUM4 = "credit_alphanum4"
ASSET_TYPE_CREDIT_ALPHANUM12 = "credit_alphanum12"


class OperationType(str, Enum):
    """Operation body arms, in XDR declaration order."""

    CREATE_ACCOUNT = "create_account"
    PAYMENT = "payment"
    PATH_PAYMENT_STRICT_RECEIVE = "path_payment_strict_receive"
    MANAGE_SELL_OFFER = "manage_sell_offer"
    CREATE_PASSIVE_SELL_OFFER = "create_passive_sell_offer"
    SET_OPTIONS = "set_options"
    CHANGE_TRUST = "change_trust"
    ALLOW_TRUST = "allow_trust"
    ACCOUNT_MERGE = "account_merge"
    INFLATION = "inflation"
    MANAGE_DATA = "manage_data"
    BUMP_SEQUENCE = "bump_sequence"
    MANAGE_BUY_OFFER = "manage_buy_offer"
    PATH_PAYMENT_STRICT_SEND = "path_payment_strict_send"
    CREATE_CLAIMABLE_BALANCE = "create_claimable_balance"
    CLAIM_CLAIMABLE_BALANCE = "claim_claimable_balance"
    BEGIN_SPONSORING_FUTURE_RESERVES = "begin_sponsoring_future_reserves"
    END_SPONSORING_FUTURE_RESERVES = "end_sponsoring_future_reserves"
    REVOKE_SPONSORSHIP = "revoke_sponsorship"
    CLAWBACK = "clawback"
    CLAWBACK_CLAIMABLE_BALANCE = "clawback_claimable_balance"
    SET_TRUST_LINE_FLAGS = "set_trust_line_flags"
    LIQUIDITY_POOL_DEPOSIT = "liquidity_pool_deposit"
    LIQUIDITY_POOL_WITHDRAW = "liquidity_pool_withdraw"
    INVOKE_HOST_FUNCTION = "invoke_host_function"
    EXTEND_FOOTPRINT_TTL = "extend_footprint_ttl"
    RESTORE_FOOTPRINT = "restore_footprint"

    def __str__(self) -> str:
        return self.value


def union_arm(value: Any, type_name: str) -> tuple[str, Any]:
    """
    Split a JSON-rendered XDR union into ``(arm, body)``.

    Void arms are bare strings and yield ``(arm, None)``.
    """
    if isinstance(value, str):
        return value, None
    if isinstance(value, dict) and len(value) == 1:
        ((arm, body),) = value.items()
        return arm, body
    raise DecodeShapeError(f"Expected a {type_name} union, got {type(value).__name__}: {value!r}")


def require_field(obj: Any, name: str, type_name: str) -> Any:
    """Return a struct field or raise DecodeShapeError naming the struct."""
    if not isinstance(obj, dict) or name not in obj:
        raise DecodeShapeError(f"{type_name} is missing field {name!r}")
    return obj[name]


def int64(value: Any) -> int:
    """Coerce a JSON int64 (number or decimal string) to int."""
    if isinstance(value, bool):
        raise DecodeShapeError(f"Expected an int64, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise DecodeShapeError(f"Expected an int64, got {value!r}") from e


@dataclass(frozen=True)
class AccountId:
    """Typed account identity: an ed25519 public key."""

    ed25519: bytes

    @classmethod
    def from_address(cls, address: str) -> "AccountId":
        try:
            return cls(ed25519=strkey.decode_ed25519_public_key(address))
        except ValueError as e:
            raise DecodeShapeError(f"Invalid account id {address!r}: {e}") from e

    @classmethod
    def from_ed25519_hex(cls, raw: str) -> "AccountId":
        """Rebuild an identity from a bare hex-encoded ed25519 key."""
        try:
            key = bytes.fromhex(raw)
        except (TypeError, ValueError) as e:
            raise DecodeShapeError(f"Invalid ed25519 key {raw!r}") from e
        if len(key) != strkey.ED25519_KEY_LENGTH:
            raise DecodeShapeError(f"ed25519 key must be 32 bytes, got {len(key)}")
        return cls(ed25519=key)

    @property
    def address(self) -> str:
        return strkey.encode_ed25519_public_key(self.ed25519)


@dataclass(frozen=True)
class Asset:
    """An XDR Asset as a (type, code, issuer) triple; native has empty code and issuer."""

    asset_type: str
    code: str = ""
    issuer: str = ""

    @classmethod
    def native(cls) -> "Asset":
        return cls(ASSET_TYPE_NATIVE)

    @classmethod
    def from_json(cls, value: Any) -> "Asset":
        arm, body = union_arm(value, "Asset")
        if arm == ASSET_TYPE_NATIVE:
            return cls.native()
        if arm in (ASSET_TYPE_CREDIT_ALPHANUM4, ASSET_TYPE_CREDIT_ALPHANUM12):
            code = str(require_field(body, "asset_code", arm)).rstrip("\x00")
            issuer = require_field(body, "issuer", arm)
            AccountId.from_address(issuer)
            return cls(arm, code, issuer)
        raise DecodeShapeError(f"Unknown asset type {arm!r}")

    def extract(self) -> tuple[str, str, str]:
        return self.asset_type, self.code, self.issuer


def operation_type(operation: Any) -> OperationType:
    """Return the type of a JSON-rendered XDR Operation from its body arm."""
    arm, _ = union_arm(require_field(operation, "body", "Operation"), "OperationBody")
    try:
        return OperationType(arm)
    except ValueError as e:
        raise DecodeShapeError(f"Unknown operation type {arm!r}") from e
