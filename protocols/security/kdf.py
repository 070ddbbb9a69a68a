"""
Key Derivation Functions

Map a variable-length ECDH shared secret to a fixed-length symmetric key.

- HkdfSha256Kdf: RFC 5869 HKDF-SHA256 with a context label (default)
- Sha256TruncateKdf: SHA-256 of the secret truncated to the key length,
  optionally prefixed by a domain-separation label

Author: SecureECIES Project
Date: October 2025
"""

from typing import Optional

from config.ecies_config import ECIES_CONSTANTS
from interfaces.ecies_interfaces import KeyDerivationFunction
from protocols.core.crypto import derive_key_hkdf, derive_key_sha256_truncate
from protocols.core.types import KdfAlgorithm


class HkdfSha256Kdf(KeyDerivationFunction):
    """
    HKDF-SHA256 key derivation.

    Args:
        key_length: Output length in bytes (default 16, AES-128)
        info: Context label binding the key to this protocol
        salt: Optional salt (None = zero-length salt)
    """

    def __init__(
        self,
        key_length: int = ECIES_CONSTANTS.AES_KEY_SIZE,
        info: bytes = ECIES_CONSTANTS.KDF_INFO,
        salt: Optional[bytes] = None,
    ):
        if key_length < 1 or key_length > 255 * 32:
            raise ValueError(f"Invalid key length: {key_length}")
        self._key_length = key_length
        self.info = info
        self.salt = salt

    @property
    def key_length(self) -> int:
        return self._key_length

    def derive_key(self, shared_secret: bytes) -> bytes:
        return derive_key_hkdf(shared_secret, self._key_length, self.info, self.salt)


class Sha256TruncateKdf(KeyDerivationFunction):
    """
    SHA-256(label || secret)[:key_length].

    With label=None the output is the plain hash-and-truncate derivation.
    """

    def __init__(
        self,
        key_length: int = ECIES_CONSTANTS.AES_KEY_SIZE,
        label: Optional[bytes] = None,
    ):
        if key_length < 1 or key_length > 32:
            raise ValueError(f"Invalid key length: {key_length} (must be 1-32)")
        self._key_length = key_length
        self.label = label

    @property
    def key_length(self) -> int:
        return self._key_length

    def derive_key(self, shared_secret: bytes) -> bytes:
        return derive_key_sha256_truncate(shared_secret, self._key_length, self.label)


def get_kdf(name: str = ECIES_CONSTANTS.DEFAULT_KDF, key_length: int = ECIES_CONSTANTS.AES_KEY_SIZE) -> KeyDerivationFunction:
    """
    Factory for key derivation functions by name.

    Raises:
        ValueError: If the KDF is not supported
    """
    try:
        algorithm = KdfAlgorithm(name)
    except ValueError:
        supported = [k.value for k in KdfAlgorithm]
        raise ValueError(f"Unsupported KDF: {name}. Supported: {supported}")

    if algorithm is KdfAlgorithm.SHA256_TRUNCATE:
        return Sha256TruncateKdf(key_length=key_length)
    return HkdfSha256Kdf(key_length=key_length)
