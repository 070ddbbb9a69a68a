"""
ECIES Abstract Interfaces

Capability contracts injected into the ECIES orchestrator. Any curve, KDF or
cipher implementing these can be swapped without touching orchestration
logic.

Implementations:
- CurveProvider: EllipticCurveProvider (secp256k1, P-256, P-384)
- KeyDerivationFunction: HkdfSha256Kdf, Sha256TruncateKdf
- SymmetricCipher: AesCbcHmacCipher, AesGcmCipher
- Logger: StructuredLogger

Author: SecureECIES Project
Date: October 2025
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Union

from protocols.core.types import CipherResult, KeyPair

KeyMaterial = Union[str, bytes]


class CurveProvider(ABC):
    """
    Key pair generation and ECDH on a named curve.

    Implementations must delegate scalar multiplication to a constant-time
    backend and must never log key material.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Curve name (e.g. "secp256k1")."""

    @abstractmethod
    def generate_key_pair(self) -> KeyPair:
        """
        Generate a fresh key pair.

        Returns:
            KeyPair with hex-encoded public point and private scalar
        """
        pass

    @abstractmethod
    def derive_shared_secret(self, private_key: KeyMaterial, peer_public_key: KeyMaterial) -> bytes:
        """
        Compute the ECDH shared secret.

        Args:
            private_key: Own private scalar (hex or bytes)
            peer_public_key: Peer's encoded point (hex or bytes)

        Returns:
            bytes: Shared secret

        Raises:
            InvalidKeyError: If either key does not decode on this curve
        """
        pass

    @abstractmethod
    def public_key_from_private(self, private_key: KeyMaterial) -> str:
        """Recompute the hex public key for a private scalar."""
        pass

    @abstractmethod
    def validate_public_key(self, public_key: KeyMaterial) -> bool:
        """True if public_key decodes to a valid point on this curve."""
        pass


class KeyDerivationFunction(ABC):
    """
    Deterministic one-way map from a shared secret to a symmetric key.

    Same input must always give the same key, otherwise decrypt cannot
    succeed.
    """

    @property
    @abstractmethod
    def key_length(self) -> int:
        """Length of derived keys in bytes."""

    @abstractmethod
    def derive_key(self, shared_secret: bytes) -> bytes:
        """
        Derive a symmetric key.

        Raises:
            ValueError: If shared_secret is empty
        """
        pass


class SymmetricCipher(ABC):
    """
    Authenticated symmetric encryption under a derived key.

    The IV/nonce is generated per call and prefixed to the ciphertext.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Cipher suite name."""

    @property
    @abstractmethod
    def iv_size(self) -> int:
        """Length of the IV/nonce prefix in bytes."""

    @property
    @abstractmethod
    def mac_size(self) -> int:
        """Length of the authentication tag in bytes."""

    @abstractmethod
    def encrypt(self, plaintext: bytes, key: bytes) -> CipherResult:
        """Encrypt and authenticate plaintext."""
        pass

    @abstractmethod
    def decrypt(self, ciphertext: bytes, mac: bytes, key: bytes) -> bytes:
        """
        Verify and decrypt.

        Raises:
            TruncatedInputError: Ciphertext length invalid
            AuthenticationError: MAC mismatch
            PaddingError: Padding inconsistent after successful MAC check
        """
        pass


class Logger(ABC):
    """Structured logger: message plus a context dictionary."""

    @abstractmethod
    def log(self, level: str, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        pass

    def debug(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.log("debug", message, context)

    def info(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.log("info", message, context)

    def warn(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.log("warn", message, context)

    def error(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.log("error", message, context)
