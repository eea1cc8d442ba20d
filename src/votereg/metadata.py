"""
Transaction metadata for vote registration.

Metadata is a map from non-negative integer labels to values built from
ints, bytestrings, text, lists and maps. Vote registrations use two labels:
61284 carries the vote public key and the stake verification key, 61285 the
signature over the former.
"""

from __future__ import annotations

from typing import Any, Union

from votereg.constants import (
    METADATA_MAX_BYTES_LENGTH,
    METADATA_MAX_LABEL,
    METADATA_MAX_TEXT_LENGTH,
    SIGNATURE_SIZE,
    VERIFICATION_KEY_SIZE,
    VOTE_REGISTRATION_LABEL,
    VOTE_SIGNATURE_LABEL,
)
from votereg.errors import MetadataError

TxMetadataValue = Union[int, bytes, str, list["TxMetadataValue"], dict[Any, "TxMetadataValue"]]
TxMetadata = dict[int, TxMetadataValue]

INT_MIN = -(2**64)
INT_MAX = 2**64 - 1


def validate_metadata_value(value: Any, path: str = "") -> None:
    """
    Check a metadata value against the ledger's metadata rules.

    Raises:
        MetadataError: If the value, or anything nested in it, is invalid
    """
    if isinstance(value, bool):
        raise MetadataError(f"{path or 'value'}: booleans are not metadata values")
    if isinstance(value, int):
        if not INT_MIN <= value <= INT_MAX:
            raise MetadataError(f"{path or 'value'}: integer {value} out of range")
    elif isinstance(value, bytes):
        if len(value) > METADATA_MAX_BYTES_LENGTH:
            raise MetadataError(
                f"{path or 'value'}: bytestring of {len(value)} bytes exceeds "
                f"{METADATA_MAX_BYTES_LENGTH}"
            )
    elif isinstance(value, str):
        if len(value.encode("utf-8")) > METADATA_MAX_TEXT_LENGTH:
            raise MetadataError(
                f"{path or 'value'}: text exceeds {METADATA_MAX_TEXT_LENGTH} UTF-8 bytes"
            )
    elif isinstance(value, list):
        for i, item in enumerate(value):
            validate_metadata_value(item, f"{path}[{i}]")
    elif isinstance(value, dict):
        for k, v in value.items():
            validate_metadata_value(k, f"{path}.key({k!r})")
            validate_metadata_value(v, f"{path}.{k!r}")
    else:
        raise MetadataError(f"{path or 'value'}: unsupported type {type(value).__name__}")


def validate_metadata(metadata: TxMetadata) -> None:
    """Validate labels and values of a metadata map."""
    for label, value in metadata.items():
        if isinstance(label, bool) or not isinstance(label, int):
            raise MetadataError(f"Metadata label must be an integer, got {label!r}")
        if not 0 <= label <= METADATA_MAX_LABEL:
            raise MetadataError(f"Metadata label {label} out of range")
        validate_metadata_value(value, str(label))


def vote_registration_metadata(
    vote_public_key: bytes,
    stake_verification_key: bytes,
    signature: bytes | None = None,
) -> TxMetadata:
    """
    Build the vote registration metadata payload.

    When ``signature`` is None a zeroed placeholder of the final size is used,
    so the payload can be used for fee estimation before signing.
    """
    if len(vote_public_key) != VERIFICATION_KEY_SIZE:
        raise MetadataError(
            f"Vote public key must be {VERIFICATION_KEY_SIZE} bytes, got {len(vote_public_key)}"
        )
    if len(stake_verification_key) != VERIFICATION_KEY_SIZE:
        raise MetadataError(
            f"Stake verification key must be {VERIFICATION_KEY_SIZE} bytes, "
            f"got {len(stake_verification_key)}"
        )
    if signature is None:
        signature = bytes(SIGNATURE_SIZE)
    elif len(signature) != SIGNATURE_SIZE:
        raise MetadataError(f"Signature must be {SIGNATURE_SIZE} bytes, got {len(signature)}")

    return {
        VOTE_REGISTRATION_LABEL: {1: vote_public_key, 2: stake_verification_key},
        VOTE_SIGNATURE_LABEL: {1: signature},
    }


def _value_from_json(value: Any) -> TxMetadataValue:
    if isinstance(value, bool) or value is None or isinstance(value, float):
        raise MetadataError(f"Unsupported JSON metadata value: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        if value.startswith("0x"):
            try:
                return bytes.fromhex(value[2:])
            except ValueError as e:
                raise MetadataError(f"Invalid hex bytestring: {value!r}") from e
        return value
    if isinstance(value, list):
        return [_value_from_json(item) for item in value]
    if isinstance(value, dict):
        return {_key_from_json(k): _value_from_json(v) for k, v in value.items()}
    raise MetadataError(f"Unsupported JSON metadata value: {value!r}")


def _key_from_json(key: str) -> TxMetadataValue:
    try:
        return int(key)
    except ValueError:
        return _value_from_json(key)


def metadata_from_json(data: dict[str, Any]) -> TxMetadata:
    """
    Convert cardano-cli "no schema" JSON metadata into a metadata map.

    Top-level keys are labels. Strings starting with ``0x`` become bytes and
    map keys that parse as integers become ints.
    """
    if not isinstance(data, dict):
        raise MetadataError("Metadata JSON must be an object keyed by label")

    metadata: TxMetadata = {}
    for label, value in data.items():
        try:
            label_int = int(label)
        except ValueError as e:
            raise MetadataError(f"Metadata label must be an integer, got {label!r}") from e
        metadata[label_int] = _value_from_json(value)

    validate_metadata(metadata)
    return metadata
