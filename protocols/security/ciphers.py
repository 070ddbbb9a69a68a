"""
Symmetric Ciphers for ECIES

Authenticated symmetric encryption under the derived key.

AesCbcHmacCipher (encrypt-then-MAC):
    ciphertext = iv (16 bytes) || AES-CBC(PKCS7(plaintext))
    mac        = HMAC-SHA256(key, ciphertext)

    Decryption order is fixed: length check, constant-time MAC check,
    CBC decryption, padding removal. No plaintext is released unless the
    MAC matches, so padding errors cannot be triggered by forged input.

AesGcmCipher:
    ciphertext = nonce (12 bytes) || AES-GCM body
    mac        = GCM tag (16 bytes)

Author: SecureECIES Project
Date: October 2025
"""

import os
from typing import Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from config.ecies_config import ECIES_CONSTANTS
from interfaces.ecies_interfaces import SymmetricCipher
from protocols.core.crypto import compute_hmac_sha256, verify_hmac_sha256
from protocols.core.exceptions import AuthenticationError, TruncatedInputError
from protocols.core.primitives import coerce_bytes, pkcs7_pad, pkcs7_unpad
from protocols.core.types import CipherAlgorithm, CipherResult

PlaintextInput = Union[str, bytes, bytearray]


def _to_bytes(plaintext: PlaintextInput) -> bytes:
    if isinstance(plaintext, str):
        return plaintext.encode("utf-8")
    return bytes(plaintext)


def _check_aes_key(key: bytes) -> bytes:
    key = bytes(key)
    if len(key) not in (16, 24, 32):
        raise ValueError(f"Invalid AES key length: {len(key)} bytes (expected 16, 24 or 32)")
    return key


class AesCbcHmacCipher(SymmetricCipher):
    """
    AES-CBC + HMAC-SHA256, encrypt-then-MAC, random IV per message.

    Usage:
        cipher = AesCbcHmacCipher()
        result = cipher.encrypt(b"secret", key)
        plaintext = cipher.decrypt(result.ciphertext, result.mac, key)
    """

    block_size = ECIES_CONSTANTS.AES_BLOCK_SIZE

    @property
    def name(self) -> str:
        return CipherAlgorithm.AES_128_CBC_HMAC_SHA256.value

    @property
    def iv_size(self) -> int:
        return ECIES_CONSTANTS.IV_SIZE

    @property
    def mac_size(self) -> int:
        return ECIES_CONSTANTS.HMAC_SIZE

    def encrypt(self, plaintext: PlaintextInput, key: bytes) -> CipherResult:
        key = _check_aes_key(key)
        iv = os.urandom(self.iv_size)

        encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
        body = encryptor.update(pkcs7_pad(_to_bytes(plaintext), self.block_size)) + encryptor.finalize()

        ciphertext = iv + body
        return CipherResult(ciphertext=ciphertext, mac=compute_hmac_sha256(key, ciphertext))

    def decrypt(self, ciphertext: bytes, mac: bytes, key: bytes) -> bytes:
        key = _check_aes_key(key)
        ciphertext = coerce_bytes(ciphertext, "ciphertext")
        mac = coerce_bytes(mac, "mac", AuthenticationError)

        # 1. Length: IV plus at least one block, block aligned
        if len(ciphertext) < self.iv_size + self.block_size or len(ciphertext) % self.block_size != 0:
            raise TruncatedInputError(
                f"Invalid ciphertext length: {len(ciphertext)} bytes "
                f"(must be a multiple of {self.block_size}, at least {self.iv_size + self.block_size})"
            )

        # 2. MAC, single constant-time check before any decryption
        if not verify_hmac_sha256(key, ciphertext, mac):
            raise AuthenticationError("MAC verification failed")

        # 3. CBC decryption
        iv, body = ciphertext[: self.iv_size], ciphertext[self.iv_size:]
        decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
        padded = decryptor.update(body) + decryptor.finalize()

        # 4. Padding
        return pkcs7_unpad(padded, self.block_size)


class AesGcmCipher(SymmetricCipher):
    """AES-GCM with a random 96-bit nonce; the GCM tag is the MAC."""

    @property
    def name(self) -> str:
        return CipherAlgorithm.AES_128_GCM.value

    @property
    def iv_size(self) -> int:
        return ECIES_CONSTANTS.GCM_NONCE_SIZE

    @property
    def mac_size(self) -> int:
        return ECIES_CONSTANTS.GCM_TAG_SIZE

    def encrypt(self, plaintext: PlaintextInput, key: bytes) -> CipherResult:
        aesgcm = AESGCM(_check_aes_key(key))
        nonce = os.urandom(self.iv_size)
        sealed = aesgcm.encrypt(nonce, _to_bytes(plaintext), None)  # body || tag
        return CipherResult(
            ciphertext=nonce + sealed[: -self.mac_size],
            mac=sealed[-self.mac_size:],
        )

    def decrypt(self, ciphertext: bytes, mac: bytes, key: bytes) -> bytes:
        aesgcm = AESGCM(_check_aes_key(key))
        ciphertext = coerce_bytes(ciphertext, "ciphertext")
        mac = coerce_bytes(mac, "mac", AuthenticationError)

        if len(ciphertext) < self.iv_size:
            raise TruncatedInputError(
                f"Invalid ciphertext length: {len(ciphertext)} bytes (nonce is {self.iv_size})"
            )
        if len(mac) != self.mac_size:
            raise AuthenticationError("MAC verification failed")

        nonce, body = ciphertext[: self.iv_size], ciphertext[self.iv_size:]
        try:
            return aesgcm.decrypt(nonce, body + mac, None)
        except InvalidTag as e:
            raise AuthenticationError("MAC verification failed") from e


def get_cipher(name: str = ECIES_CONSTANTS.DEFAULT_CIPHER) -> SymmetricCipher:
    """
    Factory for symmetric ciphers by name.

    Raises:
        ValueError: If the cipher is not supported
    """
    try:
        algorithm = CipherAlgorithm(name)
    except ValueError:
        supported = [c.value for c in CipherAlgorithm]
        raise ValueError(f"Unsupported cipher: {name}. Supported: {supported}")

    if algorithm is CipherAlgorithm.AES_128_GCM:
        return AesGcmCipher()
    return AesCbcHmacCipher()
