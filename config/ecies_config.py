"""
ECIES Configuration - Costanti e impostazioni centralizzate

Questo file centralizza le dimensioni crittografiche e la suite di default
(curva, KDF, cifrario) usate dall'orchestratore ECIES.
Modificando qui i valori, si applicano automaticamente a tutto il sistema.

Usage:
    from config.ecies_config import ECIES_CONSTANTS, ECIESSettings

    block_size = ECIES_CONSTANTS.AES_BLOCK_SIZE
    settings = ECIESSettings.from_env()
    ecies = ECIES.from_settings(settings)
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ECIESConstants:
    """
    Costanti centralizzate per la suite ECIES.

    Attributi:
        AES_BLOCK_SIZE: Dimensione blocco AES (bytes)
        AES_KEY_SIZE: Lunghezza chiave simmetrica derivata (bytes, 128 bit)
        IV_SIZE: Lunghezza IV per AES-CBC (bytes)
        HMAC_SIZE: Lunghezza tag HMAC-SHA256 (bytes)
        GCM_NONCE_SIZE: Lunghezza nonce AES-GCM (bytes)
        GCM_TAG_SIZE: Lunghezza tag AES-GCM (bytes)
        DEFAULT_CURVE: Curva di riferimento
        KDF_INFO: Etichetta di domain separation per HKDF
        ENVELOPE_VERSION: Versione del formato binario dell'envelope
    """
    # AES
    AES_BLOCK_SIZE: int = 16
    AES_KEY_SIZE: int = 16  # AES-128
    IV_SIZE: int = 16

    # MAC
    HMAC_SIZE: int = 32  # SHA-256 digest

    # AES-GCM
    GCM_NONCE_SIZE: int = 12
    GCM_TAG_SIZE: int = 16

    # Suite
    DEFAULT_CURVE: str = "secp256k1"
    DEFAULT_KDF: str = "hkdf-sha256"
    DEFAULT_CIPHER: str = "aes-128-cbc-hmac-sha256"
    KDF_INFO: bytes = b"SecureECIES-v1|AES-128-CBC|HMAC-SHA256"

    # Wire format
    ENVELOPE_VERSION: int = 1


# Istanza singleton globale
ECIES_CONSTANTS = ECIESConstants()


SUPPORTED_CURVES = frozenset({"secp256k1", "secp256r1", "secp384r1"})
SUPPORTED_KDFS = frozenset({"hkdf-sha256", "sha256-truncate"})
SUPPORTED_CIPHERS = frozenset({"aes-128-cbc-hmac-sha256", "aes-128-gcm"})
SUPPORTED_LOG_LEVELS = frozenset({"debug", "info", "warn", "error"})
SUPPORTED_LOG_FORMATS = frozenset({"text", "json"})


@dataclass(frozen=True)
class ECIESSettings:
    """
    Impostazioni runtime della suite ECIES.

    Nessun file di configurazione viene letto o scritto: i default possono
    essere sovrascritti solo tramite variabili d'ambiente (vedi from_env).
    """
    curve: str = ECIES_CONSTANTS.DEFAULT_CURVE
    kdf: str = ECIES_CONSTANTS.DEFAULT_KDF
    cipher: str = ECIES_CONSTANTS.DEFAULT_CIPHER
    log_level: str = "warn"
    log_format: str = "text"
    log_file: Optional[str] = None

    def __post_init__(self):
        _check_choice("curve", self.curve, SUPPORTED_CURVES)
        _check_choice("kdf", self.kdf, SUPPORTED_KDFS)
        _check_choice("cipher", self.cipher, SUPPORTED_CIPHERS)
        _check_choice("log_level", self.log_level, SUPPORTED_LOG_LEVELS)
        _check_choice("log_format", self.log_format, SUPPORTED_LOG_FORMATS)

    @property
    def logger_name(self) -> str:
        """Nome del logger dedicato a questa configurazione di logging."""
        return f"ECIES[{self.log_level}|{self.log_format}|{self.log_file or 'stdout'}]"

    @classmethod
    def from_env(cls, prefix: str = "ECIES_", environ=None) -> "ECIESSettings":
        """
        Costruisce le impostazioni leggendo le variabili d'ambiente.

        Variabili riconosciute (con prefix di default):
            ECIES_CURVE, ECIES_KDF, ECIES_CIPHER,
            ECIES_LOG_LEVEL, ECIES_LOG_FORMAT, ECIES_LOG_FILE

        Raises:
            ValueError: Se un valore non è supportato
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            curve=env.get(f"{prefix}CURVE", defaults.curve).lower(),
            kdf=env.get(f"{prefix}KDF", defaults.kdf).lower(),
            cipher=env.get(f"{prefix}CIPHER", defaults.cipher).lower(),
            log_level=env.get(f"{prefix}LOG_LEVEL", defaults.log_level).lower(),
            log_format=env.get(f"{prefix}LOG_FORMAT", defaults.log_format).lower(),
            log_file=env.get(f"{prefix}LOG_FILE") or None,
        )


def _check_choice(field_name: str, value: str, allowed: frozenset):
    if value not in allowed:
        raise ValueError(
            f"Valore non supportato per {field_name}: {value!r}. "
            f"Validi: {', '.join(sorted(allowed))}"
        )
