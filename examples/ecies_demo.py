"""
ECIES Demo - Esempio end-to-end

Genera le coppie di chiavi di mittente e destinatario, cifra un messaggio con
la chiave pubblica del destinatario e lo decifra con la sua chiave privata.

Nessun materiale di chiave viene stampato: i log riportano solo dimensioni e
impronte delle chiavi pubbliche.

Usage:
    python examples/ecies_demo.py
    ECIES_LOG_FORMAT=json python examples/ecies_demo.py
    ECIES_CIPHER=aes-128-gcm ECIES_CURVE=secp256r1 python examples/ecies_demo.py
"""

import os
import sys
from dataclasses import replace

# Add parent to path for local development
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.ecies_config import ECIESSettings
from protocols.messages.encoder import EnvelopeEncoder
from protocols.security.ecies import ECIES
from utils.logger import ECIESLogger


def main():
    settings = ECIESSettings.from_env()
    log = ECIESLogger.get_logger("ECIES_DEMO", level="info", fmt=settings.log_format)
    ecies = ECIES.from_settings(replace(settings, log_level="info"))

    sender = ecies.generate_key_pair()
    receiver = ecies.generate_key_pair()
    log.info("Key pairs generated", {
        "suite": ecies.suite,
        "sender_public_key": sender.public_key[:16] + "...",
        "receiver_public_key": receiver.public_key[:16] + "...",
    })

    message = "Hello, ECIES!"
    envelope = ecies.encrypt(message, receiver.public_key)
    log.info("Message encrypted", {
        "ciphertext_bytes": len(envelope.ciphertext),
        "mac_bytes": len(envelope.mac),
        "envelope": EnvelopeEncoder(ecies.curve).to_dict(envelope),
    })

    decrypted = ecies.decrypt_envelope(envelope, receiver.private_key, encoding="utf-8")

    if decrypted == message:
        log.info("Success! Decrypted message matches the original")
        return 0

    log.error("Decrypted message does NOT match the original")
    return 1


if __name__ == "__main__":
    sys.exit(main())
