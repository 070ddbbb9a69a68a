"""
Test suite per l'orchestratore ECIES

Testa le proprietà end-to-end:
- Round-trip (vuoto, multi-blocco, diversi KB)
- Non determinismo (chiave effimera e IV nuovi a ogni cifratura)
- Rilevamento manomissioni su ciphertext, MAC e chiave effimera
- Rifiuto chiave privata errata e input malformati
- Suite alternative (P-256, AES-GCM, SHA-256 troncato)
- Uso concorrente da più thread
- Nessun materiale di chiave o plaintext nei log
"""

import json
import os
from concurrent.futures import ThreadPoolExecutor

import pytest

from config.ecies_config import ECIESSettings
from protocols.core.exceptions import (
    AuthenticationError,
    ECIESError,
    InvalidKeyError,
    TruncatedInputError,
)
from protocols.core.types import EncryptionEnvelope
from protocols.security.ciphers import AesGcmCipher
from protocols.security.curves import P256Curve
from protocols.security.ecies import ECIES, ecies_decrypt, ecies_encrypt
from protocols.security.kdf import HkdfSha256Kdf, Sha256TruncateKdf
from utils.logger import LogLevel, StructuredJsonFormatter


def _flip_bit(data: bytes, index: int) -> bytes:
    tampered = bytearray(data)
    tampered[index] ^= 0x01
    return bytes(tampered)


class CountingKdf(HkdfSha256Kdf):
    """KDF che conta le derivazioni (verifica la sequenza dell'orchestratore)."""

    def __init__(self):
        super().__init__()
        self.calls = 0

    def derive_key(self, shared_secret):
        self.calls += 1
        return super().derive_key(shared_secret)


class TestECIESRoundTrip:
    """Test cifratura/decifratura ECIES"""

    def test_generate_key_pair(self, ecies):
        key_pair = ecies.generate_key_pair()
        assert key_pair.public_key
        assert key_pair.private_key

    def test_hello_ecies(self, ecies, receiver):
        """Scenario di riferimento: 'Hello, ECIES!'"""
        envelope = ecies.encrypt("Hello, ECIES!", receiver.public_key)

        assert envelope.ciphertext
        assert envelope.mac
        assert envelope.ephemeral_public_key

        decrypted = ecies.decrypt(
            envelope.ciphertext,
            envelope.mac,
            envelope.ephemeral_public_key,
            receiver.private_key,
            encoding="utf-8",
        )
        assert decrypted == "Hello, ECIES!"

    def test_empty_message(self, ecies, receiver):
        envelope = ecies.encrypt("", receiver.public_key)
        assert ecies.decrypt_envelope(envelope, receiver.private_key, encoding="utf-8") == ""

    def test_bytes_plaintext_returns_bytes(self, ecies, receiver):
        envelope = ecies.encrypt(b"\x00\x01binary\xff", receiver.public_key)
        assert ecies.decrypt_envelope(envelope, receiver.private_key) == b"\x00\x01binary\xff"

    @pytest.mark.parametrize("size", [15, 16, 17, 1024, 4096, 10000])
    def test_multi_block_messages(self, ecies, receiver, size):
        plaintext = os.urandom(size)
        envelope = ecies.encrypt(plaintext, receiver.public_key)
        assert ecies.decrypt_envelope(envelope, receiver.private_key) == plaintext

    def test_multiple_distinct_messages(self, ecies, receiver):
        messages = ["First Message", "Second Message", "Third Message"]
        envelopes = [ecies.encrypt(m, receiver.public_key) for m in messages]
        decrypted = [ecies.decrypt_envelope(e, receiver.private_key, encoding="utf-8") for e in envelopes]
        assert decrypted == messages

    def test_unicode_message(self, ecies, receiver):
        message = "Привет, ECIES! 你好 🔐"
        envelope = ecies.encrypt(message, receiver.public_key)
        assert ecies.decrypt_envelope(envelope, receiver.private_key, encoding="utf-8") == message

    def test_envelope_iv_is_ciphertext_prefix(self, ecies, receiver):
        envelope = ecies.encrypt("iv", receiver.public_key)
        assert len(envelope.iv) == 16
        assert envelope.iv + envelope.body == envelope.ciphertext
        assert len(envelope.body) % 16 == 0

    def test_kdf_called_once_per_operation(self, curve, cbc_cipher, memory_logger):
        kdf = CountingKdf()
        ecies = ECIES(curve=curve, cipher=cbc_cipher, kdf=kdf, logger=memory_logger)
        receiver = ecies.generate_key_pair()

        envelope = ecies.encrypt("count", receiver.public_key)
        assert kdf.calls == 1
        ecies.decrypt_envelope(envelope, receiver.private_key)
        assert kdf.calls == 2


class TestECIESNonDeterminism:
    """Test unlinkability delle cifrature ripetute"""

    def test_same_plaintext_twice(self, ecies, receiver):
        e1 = ecies.encrypt("same", receiver.public_key)
        e2 = ecies.encrypt("same", receiver.public_key)

        assert e1.ephemeral_public_key != e2.ephemeral_public_key
        assert e1.ciphertext != e2.ciphertext
        assert e1.iv != e2.iv
        assert e1.mac != e2.mac


class TestECIESTampering:
    """Test rilevamento manomissioni"""

    def test_tampered_ciphertext(self, ecies, receiver):
        envelope = ecies.encrypt("Test message", receiver.public_key)
        for index in range(len(envelope.ciphertext)):
            with pytest.raises(AuthenticationError):
                ecies.decrypt(
                    _flip_bit(envelope.ciphertext, index),
                    envelope.mac,
                    envelope.ephemeral_public_key,
                    receiver.private_key,
                )

    def test_tampered_mac(self, ecies, receiver):
        envelope = ecies.encrypt("Test message", receiver.public_key)
        with pytest.raises(AuthenticationError):
            ecies.decrypt(
                envelope.ciphertext,
                _flip_bit(envelope.mac, len(envelope.mac) - 1),
                envelope.ephemeral_public_key,
                receiver.private_key,
            )

    def test_tampered_ephemeral_key_off_curve(self, ecies, receiver):
        """Chiave effimera sostituita con un punto fuori curva -> InvalidKeyError"""
        envelope = ecies.encrypt("Test message", receiver.public_key)
        with pytest.raises(InvalidKeyError):
            ecies.decrypt(envelope.ciphertext, envelope.mac, "04" + "00" * 64, receiver.private_key)

    def test_substituted_ephemeral_key_on_curve(self, ecies, receiver):
        """Chiave effimera valida ma diversa -> AuthenticationError"""
        envelope = ecies.encrypt("Test message", receiver.public_key)
        other = ecies.generate_key_pair().public_key
        with pytest.raises(AuthenticationError):
            ecies.decrypt(envelope.ciphertext, envelope.mac, other, receiver.private_key)

    def test_truncated_ciphertext(self, ecies, receiver):
        envelope = ecies.encrypt("Test message", receiver.public_key)
        with pytest.raises(TruncatedInputError):
            ecies.decrypt(
                envelope.ciphertext[:-1],
                envelope.mac,
                envelope.ephemeral_public_key,
                receiver.private_key,
            )

    def test_invalid_hex_ciphertext(self, ecies, receiver, log_stream):
        """Ciphertext hex non valido -> TruncatedInputError, un solo evento di rifiuto"""
        envelope = ecies.encrypt("Test message", receiver.public_key)
        with pytest.raises(TruncatedInputError):
            ecies.decrypt("abc", envelope.mac, envelope.ephemeral_public_key, receiver.private_key)
        assert log_stream.getvalue().count("ECIES decryption rejected") == 1

    def test_invalid_hex_mac(self, ecies, receiver):
        """MAC hex non valido -> AuthenticationError (sottoclasse di ECIESError)"""
        envelope = ecies.encrypt("Test message", receiver.public_key)
        with pytest.raises(AuthenticationError):
            ecies.decrypt(envelope.ciphertext.hex(), "zz", envelope.ephemeral_public_key, receiver.private_key)

    def test_hex_fields_accepted(self, ecies, receiver):
        envelope = ecies.encrypt("Test message", receiver.public_key)
        plaintext = ecies.decrypt(
            envelope.ciphertext.hex(),
            envelope.mac.hex(),
            envelope.ephemeral_public_key,
            receiver.private_key,
            encoding="utf-8",
        )
        assert plaintext == "Test message"


class TestECIESKeys:
    """Test chiavi errate e malformate"""

    def test_wrong_private_key(self, ecies, receiver):
        envelope = ecies.encrypt("Hello, ECIES!", receiver.public_key)
        wrong = ecies.generate_key_pair()
        with pytest.raises(AuthenticationError):
            ecies.decrypt_envelope(envelope, wrong.private_key)

    @pytest.mark.parametrize("bad_key", ["abcd", "not-a-key", "04" + "00" * 64, ""])
    def test_encrypt_malformed_public_key(self, ecies, bad_key):
        with pytest.raises(InvalidKeyError):
            ecies.encrypt("Hello", bad_key)

    def test_decrypt_malformed_private_key(self, ecies, receiver):
        envelope = ecies.encrypt("Hello", receiver.public_key)
        with pytest.raises(InvalidKeyError):
            ecies.decrypt_envelope(envelope, "00" * 32)

    def test_errors_share_base_class(self, ecies):
        with pytest.raises(ECIESError):
            ecies.encrypt("Hello", "abcd")

    def test_incompatible_kdf_length(self, curve, cbc_cipher, memory_logger):
        with pytest.raises(ValueError):
            ECIES(curve=curve, cipher=cbc_cipher, kdf=Sha256TruncateKdf(key_length=20), logger=memory_logger)


class TestECIESSuites:
    """Test strategie intercambiabili"""

    @pytest.mark.parametrize("curve_factory,cipher_factory,kdf_factory", [
        (P256Curve, AesGcmCipher, HkdfSha256Kdf),
        (P256Curve, None, Sha256TruncateKdf),
        (None, AesGcmCipher, Sha256TruncateKdf),
    ])
    def test_alternative_suites(self, memory_logger, curve_factory, cipher_factory, kdf_factory):
        ecies = ECIES(
            curve=curve_factory() if curve_factory else None,
            cipher=cipher_factory() if cipher_factory else None,
            kdf=kdf_factory(),
            logger=memory_logger,
        )
        receiver = ecies.generate_key_pair()
        envelope = ecies.encrypt("Hello, ECIES!", receiver.public_key)
        assert ecies.decrypt_envelope(envelope, receiver.private_key, encoding="utf-8") == "Hello, ECIES!"

    def test_gcm_envelope_iv_size(self, curve, memory_logger):
        ecies = ECIES(curve=curve, cipher=AesGcmCipher(), logger=memory_logger)
        receiver = ecies.generate_key_pair()
        envelope = ecies.encrypt("gcm", receiver.public_key)
        assert envelope.iv_size == 12
        assert len(envelope.iv) == 12

    def test_kdf_mismatch_fails_authentication(self, curve, cbc_cipher, memory_logger):
        """Mittente e destinatario con KDF diverse -> AuthenticationError"""
        sender = ECIES(curve=curve, cipher=cbc_cipher, kdf=HkdfSha256Kdf(), logger=memory_logger)
        recipient = ECIES(curve=curve, cipher=cbc_cipher, kdf=Sha256TruncateKdf(), logger=memory_logger)
        receiver = recipient.generate_key_pair()

        envelope = sender.encrypt("mismatch", receiver.public_key)
        with pytest.raises(AuthenticationError):
            recipient.decrypt_envelope(envelope, receiver.private_key)

    def test_from_settings(self):
        settings = ECIESSettings(curve="secp256r1", kdf="sha256-truncate", cipher="aes-128-gcm")
        ecies = ECIES.from_settings(settings)
        assert ecies.curve.name == "secp256r1"
        assert ecies.cipher.name == "aes-128-gcm"
        assert "Sha256TruncateKdf" in ecies.suite

        receiver = ecies.generate_key_pair()
        envelope = ecies.encrypt("settings", receiver.public_key)
        assert ecies.decrypt_envelope(envelope, receiver.private_key) == b"settings"

    def test_from_settings_logger_after_default_instance(self, tmp_path):
        """Un ECIES() precedente non impone formato, file o livello a from_settings"""
        default = ECIES()
        log_file = tmp_path / "ecies.log"
        configured = ECIES.from_settings(
            ECIESSettings(log_level="debug", log_format="json", log_file=str(log_file))
        )

        assert configured.logger is not default.logger
        assert default.logger.level is LogLevel.WARN
        assert configured.logger.level is LogLevel.DEBUG
        assert isinstance(configured.logger.transport.formatter, StructuredJsonFormatter)

        receiver = configured.generate_key_pair()
        configured.encrypt("to file", receiver.public_key)
        configured.logger.transport.flush()

        record = json.loads(log_file.read_text(encoding="utf-8").splitlines()[0])
        assert record["message"] == "ECIES message encrypted"
        assert record["level"] == "debug"

    def test_from_settings_does_not_change_other_instances(self):
        first = ECIES.from_settings(ECIESSettings(log_level="error"))
        second = ECIES.from_settings(ECIESSettings(log_level="debug"))

        assert first.logger.level is LogLevel.ERROR
        assert second.logger.level is LogLevel.DEBUG
        assert ECIES.from_settings(ECIESSettings(log_level="error")).logger is first.logger


class TestECIESWireHelpers:
    """Test ecies_encrypt / ecies_decrypt (formato binario autocontenuto)"""

    def test_roundtrip(self, ecies, receiver):
        data = ecies_encrypt(b"secret message", receiver.public_key, ecies)
        assert isinstance(data, bytes)
        assert ecies_decrypt(data, receiver.private_key, ecies) == b"secret message"

    def test_tampered_blob(self, ecies, receiver):
        data = ecies_encrypt(b"secret message", receiver.public_key, ecies)
        with pytest.raises(AuthenticationError):
            ecies_decrypt(_flip_bit(data, len(data) - 1), receiver.private_key, ecies)

    def test_wrong_key_raises_value_error(self, ecies, receiver):
        """Compatibilità con il contratto ValueError"""
        data = ecies_encrypt(b"secret", receiver.public_key, ecies)
        with pytest.raises(ValueError):
            ecies_decrypt(data, ecies.generate_key_pair().private_key, ecies)


class TestECIESConcurrency:
    """Test uso concorrente"""

    def test_parallel_roundtrips(self, ecies):
        receivers = [ecies.generate_key_pair() for _ in range(4)]

        def roundtrip(i):
            receiver = receivers[i % len(receivers)]
            message = f"message-{i}-" + "x" * i
            envelope = ecies.encrypt(message, receiver.public_key)
            return ecies.decrypt_envelope(envelope, receiver.private_key, encoding="utf-8") == message

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(roundtrip, range(64)))

        assert all(results)


class TestECIESLogging:
    """Test: i log non contengono chiavi o plaintext"""

    def test_no_secrets_in_logs(self, ecies, receiver, log_stream):
        message = "TOP-SECRET-PAYLOAD"
        envelope = ecies.encrypt(message, receiver.public_key)
        ecies.decrypt_envelope(envelope, receiver.private_key)

        wrong = ecies.generate_key_pair()
        with pytest.raises(AuthenticationError):
            ecies.decrypt_envelope(envelope, wrong.private_key)

        output = log_stream.getvalue()
        assert "ECIES message encrypted" in output
        assert "ECIES decryption rejected" in output
        assert "AuthenticationError" in output
        assert message not in output
        assert receiver.private_key not in output
        assert wrong.private_key not in output

    def test_single_rejection_event(self, ecies, receiver, log_stream):
        """Un solo evento di rifiuto per decifratura fallita"""
        envelope = ecies.encrypt("x", receiver.public_key)
        with pytest.raises(AuthenticationError):
            ecies.decrypt(envelope.ciphertext, b"\x00" * 32, envelope.ephemeral_public_key, receiver.private_key)
        assert log_stream.getvalue().count("rejected") == 1

    def test_encrypt_rejection_logged(self, ecies, log_stream):
        with pytest.raises(InvalidKeyError):
            ecies.encrypt("x", "abcd")
        assert "ECIES encryption rejected" in log_stream.getvalue()
        assert "InvalidKeyError" in log_stream.getvalue()


def test_envelope_is_immutable(ecies, receiver):
    envelope = ecies.encrypt("frozen", receiver.public_key)
    assert isinstance(envelope, EncryptionEnvelope)
    with pytest.raises(AttributeError):
        envelope.mac = b""
