"""
ECIES Protocol Messages

Serialization of EncryptionEnvelope (binary and JSON).

Author: SecureECIES Project
Date: October 2025
"""

from .encoder import EnvelopeEncoder

__all__ = [
    "EnvelopeEncoder",
]
