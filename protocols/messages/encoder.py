"""
ECIES Envelope Encoder/Decoder

Serializes EncryptionEnvelope for transport or storage.

Binary format (all lengths in bytes):
    version (1) || key_len (1) || ephemeral_public_key (key_len)
    || iv_len (1) || mac_len (1) || mac (mac_len)
    || ciphertext (rest; first iv_len bytes are the IV)

Dict / JSON format (hex-encoded fields):
    {"version": 1, "ephemeral_public_key": ..., "iv": ..., "ciphertext": ..., "mac": ...}
    where "ciphertext" is the body without the IV.

Author: SecureECIES Project
Date: October 2025
"""

import json
from typing import Any, Dict, Optional

from config.ecies_config import ECIES_CONSTANTS
from interfaces.ecies_interfaces import CurveProvider
from protocols.core.exceptions import InvalidKeyError, TruncatedInputError
from protocols.core.primitives import normalize_key_bytes
from protocols.core.types import EncryptionEnvelope

_REQUIRED_FIELDS = ("ephemeral_public_key", "iv", "ciphertext", "mac")


class EnvelopeEncoder:
    """
    Encoder/decoder for EncryptionEnvelope.

    If a curve provider is given, decoded ephemeral public keys are checked
    to be valid points on that curve.

    Usage:
        encoder = EnvelopeEncoder(curve)
        data = encoder.to_bytes(envelope)
        envelope = encoder.from_bytes(data)
    """

    def __init__(self, curve: Optional[CurveProvider] = None, version: int = ECIES_CONSTANTS.ENVELOPE_VERSION):
        self.curve = curve
        self.version = version

    # ------------------------------------------------------------------
    # Binary
    # ------------------------------------------------------------------

    def to_bytes(self, envelope: EncryptionEnvelope) -> bytes:
        key = normalize_key_bytes(envelope.ephemeral_public_key, field="ephemeral public key")
        if len(key) > 255 or len(envelope.mac) > 255 or envelope.iv_size > 255:
            raise ValueError("Envelope field too long for binary encoding")

        return (
            bytes([self.version, len(key)])
            + key
            + bytes([envelope.iv_size, len(envelope.mac)])
            + envelope.mac
            + envelope.ciphertext
        )

    def from_bytes(self, data: bytes) -> EncryptionEnvelope:
        """
        Parse binary envelope.

        Raises:
            TruncatedInputError: Data shorter than the declared fields
            ValueError: Unknown version
            InvalidKeyError: Ephemeral key not on the curve (if curve set)
        """
        data = bytes(data)
        offset = 0

        def take(n: int) -> bytes:
            nonlocal offset
            if offset + n > len(data):
                raise TruncatedInputError(
                    f"Envelope truncated: need {offset + n} bytes, got {len(data)}"
                )
            chunk = data[offset:offset + n]
            offset += n
            return chunk

        version = take(1)[0]
        if version != self.version:
            raise ValueError(f"Unsupported envelope version: {version}")

        key_len = take(1)[0]
        ephemeral_public_key = take(key_len).hex()
        iv_size = take(1)[0]
        mac_len = take(1)[0]
        mac = take(mac_len)
        ciphertext = data[offset:]

        if len(ciphertext) < iv_size:
            raise TruncatedInputError(f"Envelope ciphertext shorter than IV ({iv_size} bytes)")

        self._check_key(ephemeral_public_key)
        return EncryptionEnvelope(
            ciphertext=ciphertext,
            mac=mac,
            ephemeral_public_key=ephemeral_public_key,
            iv_size=iv_size,
        )

    # ------------------------------------------------------------------
    # Dict / JSON
    # ------------------------------------------------------------------

    def to_dict(self, envelope: EncryptionEnvelope) -> Dict[str, Any]:
        return {
            "version": self.version,
            "ephemeral_public_key": normalize_key_bytes(envelope.ephemeral_public_key).hex(),
            "iv": envelope.iv.hex(),
            "ciphertext": envelope.body.hex(),
            "mac": envelope.mac.hex(),
        }

    def from_dict(self, data: Dict[str, Any]) -> EncryptionEnvelope:
        """
        Raises:
            ValueError: Missing fields, non-hex values or unknown version
        """
        missing = [f for f in _REQUIRED_FIELDS if f not in data]
        if missing:
            raise ValueError(f"Envelope missing fields: {missing}")

        version = data.get("version", self.version)
        if version != self.version:
            raise ValueError(f"Unsupported envelope version: {version}")

        try:
            iv = bytes.fromhex(data["iv"])
            body = bytes.fromhex(data["ciphertext"])
            mac = bytes.fromhex(data["mac"])
        except (TypeError, ValueError) as e:
            raise ValueError(f"Envelope field is not valid hex: {e}") from e

        ephemeral_public_key = normalize_key_bytes(
            data["ephemeral_public_key"], field="ephemeral public key"
        ).hex()
        self._check_key(ephemeral_public_key)

        return EncryptionEnvelope(
            ciphertext=iv + body,
            mac=mac,
            ephemeral_public_key=ephemeral_public_key,
            iv_size=len(iv),
        )

    def to_json(self, envelope: EncryptionEnvelope) -> str:
        return json.dumps(self.to_dict(envelope))

    def from_json(self, text: str) -> EncryptionEnvelope:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Envelope is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ValueError("Envelope JSON must be an object")
        return self.from_dict(data)

    def _check_key(self, ephemeral_public_key: str) -> None:
        if self.curve is not None and not self.curve.validate_public_key(ephemeral_public_key):
            raise InvalidKeyError(f"Ephemeral public key is not a valid {self.curve.name} point")
