"""
ECIES (Elliptic Curve Integrated Encryption Scheme) Implementation.

Composes an injected CurveProvider, KeyDerivationFunction and SymmetricCipher
into one encrypt/decrypt operation. The orchestrator owns no primitive
itself, only the sequencing and error propagation.

Standards Reference:
- SEC 1 v2.0 Section 5.1 (Elliptic Curve Integrated Encryption Scheme)
- IEEE 1363a-2004 (ECIES)

Security Properties:
- Forward secrecy and unlinkability: fresh ephemeral key pair per message
- Authenticated encryption: MAC (or GCM tag) checked before any plaintext
  is produced
- Fresh random IV per message, carried in the envelope

Default suite: secp256k1 / HKDF-SHA256 / AES-128-CBC + HMAC-SHA256

Author: SecureECIES Project
Date: October 2025
"""

from typing import Optional, Union

from config.ecies_config import ECIESSettings
from interfaces.ecies_interfaces import (
    CurveProvider,
    KeyDerivationFunction,
    KeyMaterial,
    Logger,
    SymmetricCipher,
)
from protocols.core.crypto import transient_secret
from protocols.core.exceptions import ECIESError
from protocols.core.types import EncryptionEnvelope, KeyPair
from protocols.messages.encoder import EnvelopeEncoder
from utils.logger import ECIESLogger, LogLevel

from .ciphers import AesCbcHmacCipher, get_cipher
from .curves import Secp256k1Curve, get_curve_provider
from .kdf import HkdfSha256Kdf, get_kdf

Plaintext = Union[str, bytes, bytearray]


class ECIES:
    """
    ECIES orchestrator.

    Usage:
        ecies = ECIES()
        receiver = ecies.generate_key_pair()
        envelope = ecies.encrypt("Hello, ECIES!", receiver.public_key)
        text = ecies.decrypt(
            envelope.ciphertext,
            envelope.mac,
            envelope.ephemeral_public_key,
            receiver.private_key,
            encoding="utf-8",
        )

    Args:
        curve: CurveProvider (default secp256k1)
        cipher: SymmetricCipher (default AES-128-CBC + HMAC-SHA256)
        kdf: KeyDerivationFunction (default HKDF-SHA256)
        logger: Logger for diagnostic events; never receives key material
            or plaintext
    """

    def __init__(
        self,
        curve: Optional[CurveProvider] = None,
        cipher: Optional[SymmetricCipher] = None,
        kdf: Optional[KeyDerivationFunction] = None,
        logger: Optional[Logger] = None,
    ):
        self.curve = curve or Secp256k1Curve()
        self.cipher = cipher or AesCbcHmacCipher()
        self.kdf = kdf or HkdfSha256Kdf()
        self.logger = logger or ECIESLogger.get_logger("ECIES", level=LogLevel.WARN)

        if self.kdf.key_length not in (16, 24, 32):
            raise ValueError(
                f"KDF key length {self.kdf.key_length} is not a valid AES key size"
            )

    @classmethod
    def from_settings(cls, settings: Optional[ECIESSettings] = None) -> "ECIES":
        """
        Build an orchestrator from ECIESSettings (default: environment).

        Each logging configuration gets its own cached logger, so the
        default "ECIES" logger of other instances is never reconfigured.
        """
        settings = settings or ECIESSettings.from_env()
        logger = ECIESLogger.get_logger(
            settings.logger_name,
            level=settings.log_level,
            fmt=settings.log_format,
            log_file=settings.log_file,
        )
        return cls(
            curve=get_curve_provider(settings.curve),
            cipher=get_cipher(settings.cipher),
            kdf=get_kdf(settings.kdf),
            logger=logger,
        )

    @property
    def suite(self) -> str:
        return f"{self.curve.name}/{type(self.kdf).__name__}/{self.cipher.name}"

    def generate_key_pair(self) -> KeyPair:
        return self.curve.generate_key_pair()

    def encrypt(self, plaintext: Plaintext, receiver_public_key: KeyMaterial) -> EncryptionEnvelope:
        """
        Encrypt plaintext for the holder of receiver_public_key.

        Encryption Flow:
        1. Generate ephemeral key pair
        2. ECDH between ephemeral private key and receiver public key
        3. Derive symmetric key from the shared secret
        4. Encrypt and authenticate with the symmetric cipher
        5. Return ciphertext, MAC and ephemeral public key

        Args:
            plaintext: str (UTF-8 encoded) or bytes
            receiver_public_key: Receiver's encoded point (hex or bytes)

        Returns:
            EncryptionEnvelope

        Raises:
            InvalidKeyError: If receiver_public_key is malformed or off-curve
        """
        data = plaintext.encode("utf-8") if isinstance(plaintext, str) else bytes(plaintext)

        try:
            # 1. Ephemeral key pair
            ephemeral = self.curve.generate_key_pair()

            # 2. ECDH
            shared = self.curve.derive_shared_secret(ephemeral.private_key, receiver_public_key)
            ephemeral_public_key = ephemeral.public_key
            del ephemeral

            # 3-4. KDF + symmetric encryption; secrets zeroed on exit
            with transient_secret(shared) as shared_secret:
                del shared
                with transient_secret(self.kdf.derive_key(bytes(shared_secret))) as symmetric_key:
                    result = self.cipher.encrypt(data, bytes(symmetric_key))
        except ECIESError as e:
            self.logger.warn(
                "ECIES encryption rejected",
                {"error": type(e).__name__, "suite": self.suite},
            )
            raise

        self.logger.debug(
            "ECIES message encrypted",
            {
                "suite": self.suite,
                "message_bytes": len(data),
                "ciphertext_bytes": len(result.ciphertext),
            },
        )

        # 5. Envelope
        return EncryptionEnvelope(
            ciphertext=result.ciphertext,
            mac=result.mac,
            ephemeral_public_key=ephemeral_public_key,
            iv_size=self.cipher.iv_size,
        )

    def decrypt(
        self,
        ciphertext: Union[bytes, str],
        mac: Union[bytes, str],
        ephemeral_public_key: KeyMaterial,
        receiver_private_key: KeyMaterial,
        encoding: Optional[str] = None,
    ) -> Union[bytes, str]:
        """
        Decrypt a message encrypted with encrypt().

        Decryption Flow:
        1. ECDH between receiver private key and ephemeral public key
        2. Derive symmetric key from the shared secret
        3. Verify MAC and decrypt with the symmetric cipher

        Args:
            ciphertext: IV-prefixed ciphertext (bytes or hex)
            mac: Authentication tag (bytes or hex)
            ephemeral_public_key: Sender's ephemeral point (hex or bytes)
            receiver_private_key: Receiver's private scalar (hex or bytes)
            encoding: If given, decode the plaintext to str

        Returns:
            Plaintext bytes, or str when encoding is given

        Raises:
            InvalidKeyError: Malformed ephemeral public key or private key
            TruncatedInputError: Ciphertext length invalid
            AuthenticationError: MAC mismatch (tampering or wrong key)
            PaddingError: Padding inconsistent after a valid MAC
        """
        try:
            # 1. ECDH
            shared = self.curve.derive_shared_secret(receiver_private_key, ephemeral_public_key)

            # 2-3. KDF + verified decryption; secrets zeroed on exit
            with transient_secret(shared) as shared_secret:
                del shared
                with transient_secret(self.kdf.derive_key(bytes(shared_secret))) as symmetric_key:
                    plaintext = self.cipher.decrypt(ciphertext, mac, bytes(symmetric_key))
        except ECIESError as e:
            # Single rejection point: one event, no partial results
            self.logger.warn(
                "ECIES decryption rejected",
                {"error": type(e).__name__, "suite": self.suite},
            )
            raise

        self.logger.debug(
            "ECIES message decrypted",
            {"suite": self.suite, "message_bytes": len(plaintext)},
        )

        # 4. Plaintext
        if encoding is not None:
            return plaintext.decode(encoding)
        return plaintext

    def decrypt_envelope(
        self,
        envelope: EncryptionEnvelope,
        receiver_private_key: KeyMaterial,
        encoding: Optional[str] = None,
    ) -> Union[bytes, str]:
        """Decrypt an EncryptionEnvelope."""
        return self.decrypt(
            envelope.ciphertext,
            envelope.mac,
            envelope.ephemeral_public_key,
            receiver_private_key,
            encoding=encoding,
        )


def ecies_encrypt(
    plaintext: Plaintext,
    recipient_public_key: KeyMaterial,
    ecies: Optional[ECIES] = None,
) -> bytes:
    """
    Encrypt to the self-contained binary envelope format.

    Example:
        >>> ecies = ECIES()
        >>> receiver = ecies.generate_key_pair()
        >>> data = ecies_encrypt(b"secret", receiver.public_key, ecies)
        >>> ecies_decrypt(data, receiver.private_key, ecies)
        b'secret'
    """
    ecies = ecies or ECIES()
    envelope = ecies.encrypt(plaintext, recipient_public_key)
    return EnvelopeEncoder(ecies.curve).to_bytes(envelope)


def ecies_decrypt(
    encrypted_data: bytes,
    recipient_private_key: KeyMaterial,
    ecies: Optional[ECIES] = None,
) -> bytes:
    """
    Decrypt data produced by ecies_encrypt.

    Raises:
        ValueError: Any ECIESError subclass, or an unknown envelope version
    """
    ecies = ecies or ECIES()
    envelope = EnvelopeEncoder(ecies.curve).from_bytes(encrypted_data)
    return ecies.decrypt_envelope(envelope, recipient_private_key)
