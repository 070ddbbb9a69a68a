"""
ECIES Interfaces Package

Contratti delle capability iniettate nell'orchestratore ECIES.
"""

from .ecies_interfaces import (
    CurveProvider,
    KeyDerivationFunction,
    Logger,
    SymmetricCipher,
)

__all__ = [
    "CurveProvider",
    "KeyDerivationFunction",
    "Logger",
    "SymmetricCipher",
]
