"""
Elliptic Curve Providers

Key pair generation and ECDH over named curves, delegating point arithmetic
to the cryptography library (OpenSSL backend, constant-time scalar
multiplication).

Keys are exchanged as hex strings:
- public key: X9.62 uncompressed point (04 || x || y); compressed points are
  also accepted as input
- private key: big-endian scalar, zero-padded to the curve size

Standards Reference:
- SEC 1 v2.0 Section 3.3.1 - Elliptic Curve Diffie-Hellman Primitive
- SEC 2 v2.0 - secp256k1, secp256r1, secp384r1

Author: SecureECIES Project
Date: October 2025
"""

from cryptography.hazmat.primitives.asymmetric import ec

from interfaces.ecies_interfaces import CurveProvider, KeyMaterial
from protocols.core.crypto import compute_ecdh_shared_secret
from protocols.core.primitives import (
    decode_private_key,
    decode_public_key,
    encode_private_key_hex,
    encode_public_key_hex,
)
from protocols.core.types import CurveName, KeyPair, get_curve_parameters


class EllipticCurveProvider(CurveProvider):
    """
    CurveProvider backed by cryptography's EC implementation.

    Usage:
        curve = EllipticCurveProvider("secp256k1")
        alice = curve.generate_key_pair()
        bob = curve.generate_key_pair()
        s1 = curve.derive_shared_secret(alice.private_key, bob.public_key)
        s2 = curve.derive_shared_secret(bob.private_key, alice.public_key)
        assert s1 == s2
    """

    def __init__(self, curve_name="secp256k1"):
        self._params = get_curve_parameters(curve_name)
        self._curve_name = CurveName(curve_name)

    @property
    def name(self) -> str:
        return self._curve_name.value

    @property
    def scalar_size(self) -> int:
        return self._params.scalar_size

    @property
    def public_key_size(self) -> int:
        """Size of an uncompressed public key in bytes."""
        return self._params.uncompressed_size

    def generate_key_pair(self) -> KeyPair:
        private_key = ec.generate_private_key(self._params.curve_class())
        return KeyPair(
            public_key=encode_public_key_hex(private_key.public_key()),
            private_key=encode_private_key_hex(private_key),
        )

    def derive_shared_secret(self, private_key: KeyMaterial, peer_public_key: KeyMaterial) -> bytes:
        # Decode the peer point first: a malformed public key is the common
        # failure and must not depend on the private key.
        public = decode_public_key(self._curve_name, peer_public_key)
        private = decode_private_key(self._curve_name, private_key)
        return compute_ecdh_shared_secret(private, public)

    def public_key_from_private(self, private_key: KeyMaterial) -> str:
        private = decode_private_key(self._curve_name, private_key)
        return encode_public_key_hex(private.public_key())

    def validate_public_key(self, public_key: KeyMaterial) -> bool:
        """True if public_key decodes to a valid point on this curve."""
        try:
            decode_public_key(self._curve_name, public_key)
            return True
        except ValueError:
            return False

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r})"


class Secp256k1Curve(EllipticCurveProvider):
    """secp256k1, the reference curve."""

    def __init__(self):
        super().__init__(CurveName.SECP256K1)


class P256Curve(EllipticCurveProvider):
    """NIST P-256 (secp256r1)."""

    def __init__(self):
        super().__init__(CurveName.SECP256R1)


def get_curve_provider(name: str = "secp256k1") -> CurveProvider:
    """
    Factory for curve providers by name.

    Raises:
        ValueError: If the curve is not supported
    """
    try:
        curve_name = CurveName(name)
    except ValueError:
        supported = [c.value for c in CurveName]
        raise ValueError(f"Unsupported curve: {name}. Supported: {supported}")

    if curve_name is CurveName.SECP256K1:
        return Secp256k1Curve()
    if curve_name is CurveName.SECP256R1:
        return P256Curve()
    return EllipticCurveProvider(curve_name)
