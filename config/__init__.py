"""
ECIES Configuration Package

Centralizza costanti crittografiche e impostazioni runtime della suite ECIES.
"""

from .ecies_config import (
    ECIES_CONSTANTS,
    ECIESConstants,
    ECIESSettings,
    SUPPORTED_CIPHERS,
    SUPPORTED_CURVES,
    SUPPORTED_KDFS,
)

__all__ = [
    'ECIES_CONSTANTS',
    'ECIESConstants',
    'ECIESSettings',
    'SUPPORTED_CIPHERS',
    'SUPPORTED_CURVES',
    'SUPPORTED_KDFS',
]
