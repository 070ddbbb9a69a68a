"""
Pytest Configuration and Shared Fixtures

Fornisce fixture condivise per tutti i test:
- Orchestratore ECIES con suite di default e logger in memoria
- Coppie di chiavi del destinatario
- Istanze di curva, KDF e cifrario
- Pulizia della cache dei logger dopo ogni test

Author: SecureECIES Project
Date: October 2025
"""

import io
import os
import sys
import uuid

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from protocols.security.ciphers import AesCbcHmacCipher, AesGcmCipher
from protocols.security.curves import Secp256k1Curve
from protocols.security.ecies import ECIES
from protocols.security.kdf import HkdfSha256Kdf
from utils.logger import ConsoleTransport, ECIESLogger, LogLevelFilter, StructuredLogger, TextFormatter


@pytest.fixture
def log_stream():
    """Buffer in memoria che raccoglie l'output del logger di test."""
    return io.StringIO()


@pytest.fixture
def memory_logger(log_stream):
    """
    StructuredLogger a livello debug che scrive su log_stream.
    Nome univoco per evitare condivisione di handler tra test.
    """
    logger = StructuredLogger(
        f"ECIES_TEST_{uuid.uuid4().hex[:8]}",
        formatter=TextFormatter(),
        transport=ConsoleTransport(stream=log_stream),
        level_filter=LogLevelFilter("debug"),
    )
    yield logger
    logger.close()


@pytest.fixture
def curve():
    return Secp256k1Curve()


@pytest.fixture
def kdf():
    return HkdfSha256Kdf()


@pytest.fixture
def cbc_cipher():
    return AesCbcHmacCipher()


@pytest.fixture
def gcm_cipher():
    return AesGcmCipher()


@pytest.fixture
def ecies(curve, kdf, cbc_cipher, memory_logger):
    """ECIES con suite di default (secp256k1 / HKDF / AES-CBC-HMAC)."""
    return ECIES(curve=curve, cipher=cbc_cipher, kdf=kdf, logger=memory_logger)


@pytest.fixture
def receiver(ecies):
    """Coppia di chiavi del destinatario."""
    return ecies.generate_key_pair()


@pytest.fixture
def symmetric_key():
    """Chiave AES-128 casuale."""
    return os.urandom(16)


@pytest.fixture(autouse=True)
def clear_logger_cache():
    """Svuota la cache di ECIESLogger dopo ogni test."""
    yield
    ECIESLogger.clear_cache()
