"""
Test suite per Curve Providers e codifica delle chiavi

Testa:
- Generazione coppie di chiavi (formato hex, derivabilità della pubblica)
- ECDH simmetrico tra due parti
- Rifiuto di chiavi pubbliche/private malformate (InvalidKeyError)
- Punti compressi e curve alternative
"""

import pytest

from protocols.core.exceptions import InvalidKeyError
from protocols.core.primitives import (
    compress_public_key_hex,
    decode_private_key,
    normalize_key_bytes,
)
from protocols.core.types import CURVE_PARAMETERS, CurveName
from protocols.security.curves import (
    EllipticCurveProvider,
    P256Curve,
    Secp256k1Curve,
    get_curve_provider,
)


class TestKeyGeneration:
    """Test generazione coppie di chiavi"""

    def test_key_pair_format(self, curve):
        """Chiave pubblica non compressa (04 || x || y), privata 32 bytes"""
        key_pair = curve.generate_key_pair()

        assert len(key_pair.public_key) == 130
        assert key_pair.public_key.startswith("04")
        assert len(key_pair.private_key) == 64
        bytes.fromhex(key_pair.public_key)
        bytes.fromhex(key_pair.private_key)

    def test_public_key_derivable_from_private(self, curve):
        """La chiave pubblica è sempre ricalcolabile dalla privata"""
        key_pair = curve.generate_key_pair()
        assert curve.public_key_from_private(key_pair.private_key) == key_pair.public_key

    def test_key_pairs_are_unique(self, curve):
        """Ogni chiamata genera una coppia nuova"""
        pairs = {curve.generate_key_pair().private_key for _ in range(10)}
        assert len(pairs) == 10

    def test_repr_hides_private_key(self, curve):
        """repr(KeyPair) non espone la chiave privata"""
        key_pair = curve.generate_key_pair()
        assert key_pair.private_key not in repr(key_pair)
        assert "REDACTED" in repr(key_pair)

    def test_p384_key_sizes(self):
        """P-384: scalare 48 bytes, punto 97 bytes"""
        provider = EllipticCurveProvider("secp384r1")
        key_pair = provider.generate_key_pair()
        assert len(bytes.fromhex(key_pair.private_key)) == 48
        assert len(bytes.fromhex(key_pair.public_key)) == 97


class TestSharedSecret:
    """Test ECDH"""

    def test_shared_secret_agreement(self, curve):
        """Entrambe le parti derivano lo stesso segreto"""
        alice = curve.generate_key_pair()
        bob = curve.generate_key_pair()

        s1 = curve.derive_shared_secret(alice.private_key, bob.public_key)
        s2 = curve.derive_shared_secret(bob.private_key, alice.public_key)

        assert s1 == s2
        assert len(s1) == 32

    def test_different_peers_different_secrets(self, curve):
        alice = curve.generate_key_pair()
        bob = curve.generate_key_pair()
        carol = curve.generate_key_pair()

        assert curve.derive_shared_secret(alice.private_key, bob.public_key) != \
            curve.derive_shared_secret(alice.private_key, carol.public_key)

    def test_accepts_bytes_and_0x_prefix(self, curve):
        """Chiavi come bytes o hex con prefisso 0x"""
        alice = curve.generate_key_pair()
        bob = curve.generate_key_pair()

        expected = curve.derive_shared_secret(alice.private_key, bob.public_key)
        assert curve.derive_shared_secret(
            bytes.fromhex(alice.private_key), bytes.fromhex(bob.public_key)
        ) == expected
        assert curve.derive_shared_secret("0x" + alice.private_key, "0x" + bob.public_key) == expected

    def test_compressed_public_key_accepted(self, curve):
        """Punto compresso (02/03 || x) equivalente al non compresso"""
        alice = curve.generate_key_pair()
        bob = curve.generate_key_pair()

        compressed = compress_public_key_hex(CurveName.SECP256K1, bob.public_key)
        assert len(compressed) == 66
        assert compressed[:2] in ("02", "03")
        assert curve.derive_shared_secret(alice.private_key, compressed) == \
            curve.derive_shared_secret(alice.private_key, bob.public_key)

    def test_p256_agreement(self):
        provider = P256Curve()
        alice = provider.generate_key_pair()
        bob = provider.generate_key_pair()
        assert provider.derive_shared_secret(alice.private_key, bob.public_key) == \
            provider.derive_shared_secret(bob.private_key, alice.public_key)


class TestInvalidKeys:
    """Test rifiuto chiavi malformate"""

    @pytest.mark.parametrize("bad_key", [
        "abcd",                      # lunghezza errata
        "",                          # vuota
        "zz" * 65,                   # non hex
        "04" + "00" * 64,            # punto (0, 0) fuori curva
        "05" + "11" * 64,            # prefisso sconosciuto
        "00",                        # punto all'infinito
    ])
    def test_malformed_public_key(self, curve, bad_key):
        own = curve.generate_key_pair()
        with pytest.raises(InvalidKeyError):
            curve.derive_shared_secret(own.private_key, bad_key)

    def test_point_from_other_curve_rejected(self, curve):
        """Un punto P-256 non è un punto valido su secp256k1"""
        own = curve.generate_key_pair()
        foreign = P256Curve().generate_key_pair()
        with pytest.raises(InvalidKeyError):
            curve.derive_shared_secret(own.private_key, foreign.public_key)

    def test_wrong_type_rejected(self, curve):
        own = curve.generate_key_pair()
        with pytest.raises(InvalidKeyError):
            curve.derive_shared_secret(own.private_key, 12345)

    @pytest.mark.parametrize("bad_scalar", [
        "00" * 32,      # zero
        "ab" * 16,      # troppo corta
        "ab" * 33,      # troppo lunga
    ])
    def test_malformed_private_key(self, curve, bad_scalar):
        peer = curve.generate_key_pair()
        with pytest.raises(InvalidKeyError):
            curve.derive_shared_secret(bad_scalar, peer.public_key)

    def test_private_key_equal_to_order_rejected(self):
        """Scalare n fuori dall'intervallo [1, n-1]"""
        order = CURVE_PARAMETERS[CurveName.SECP256K1].order
        with pytest.raises(InvalidKeyError):
            decode_private_key("secp256k1", order.to_bytes(32, "big"))

    def test_invalid_key_error_is_value_error(self, curve):
        """Compatibilità: InvalidKeyError è anche ValueError"""
        own = curve.generate_key_pair()
        with pytest.raises(ValueError):
            curve.derive_shared_secret(own.private_key, "abcd")

    def test_validate_public_key(self, curve):
        assert curve.validate_public_key(curve.generate_key_pair().public_key)
        assert not curve.validate_public_key("04" + "00" * 64)


class TestCurveFactory:
    """Test factory get_curve_provider"""

    def test_known_curves(self):
        assert isinstance(get_curve_provider("secp256k1"), Secp256k1Curve)
        assert isinstance(get_curve_provider("secp256r1"), P256Curve)
        assert get_curve_provider("secp384r1").name == "secp384r1"

    def test_unknown_curve(self):
        with pytest.raises(ValueError, match="Unsupported curve"):
            get_curve_provider("curve25519")

    def test_normalize_key_bytes(self):
        assert normalize_key_bytes("0xABCD") == b"\xab\xcd"
        assert normalize_key_bytes(bytearray(b"\x01")) == b"\x01"
