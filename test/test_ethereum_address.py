import pytest

import ethereum_address as ea
import secp256k1_curve as curve
from errors import PointAtInfinity
from reference_curve import reference_uncompressed_hex

EXAMPLE_PRIVATE_KEY = 0x51bb0a7f49284110c62e4268baa3cfad4a81edcd6e6ec3b2a8ef97f1e3754491
EXAMPLE_ADDRESS = "0x7aa6D878Ac2d1271fCD010802f7e09fAcd8528bf"
KEY_ONE_ADDRESS = "0x7E5F4552091A69125d5DfCb7b8C2659029395Bdf"


class TestKeccak256:
    def test_empty_input(self):
        """Tests the Keccak-256 digest of the empty string (not SHA3-256)."""
        assert ea.keccak256(b'').hex() == "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"

    def test_digest_length(self):
        assert len(ea.keccak256(b'abc')) == 32


class TestChecksum:
    def test_known_vector(self):
        """Tests EIP-55 casing of a lowercase address."""
        result = ea.to_checksum_address("0xfb6916095ca1df60bb79ce92ce3ea74c37c5d359")
        assert result == "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359"

    def test_input_case_is_ignored(self):
        """Tests that the checksum only depends on the lowercase address."""
        result = ea.to_checksum_address("0xFB6916095CA1DF60BB79CE92CE3EA74C37C5D359")
        assert result == "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359"

    @pytest.mark.parametrize("address", [
        "fb6916095ca1df60bb79ce92ce3ea74c37c5d359",
        "0xfb6916095ca1df60bb79ce92ce3ea74c37c5d3",
        "0xzb6916095ca1df60bb79ce92ce3ea74c37c5d359",
        "0x" + "ab" * 19 + "  ",
        "0x" + "ab" * 19 + " a",
    ])
    def test_invalid_address(self, address):
        with pytest.raises(ValueError):
            ea.to_checksum_address(address)


class TestDeriveAddress:
    def test_from_reference_public_key(self):
        """Tests address derivation from a libsecp256k1 public key."""
        public_key_hex = reference_uncompressed_hex(EXAMPLE_PRIVATE_KEY)
        assert ea.derive_address_from_public_key_hex(public_key_hex) == EXAMPLE_ADDRESS

    def test_generator_point(self):
        """Tests the address of private key 1, whose public key is G."""
        assert ea.derive_address(curve.G) == KEY_ONE_ADDRESS
        assert ea.derive_address_from_public_key_hex(reference_uncompressed_hex(1)) == KEY_ONE_ADDRESS

    def test_identity_has_no_address(self):
        with pytest.raises(PointAtInfinity):
            ea.derive_address(curve.IDENTITY)

    def test_compressed_key_rejected(self):
        """Tests that only 65-byte uncompressed keys are accepted."""
        with pytest.raises(ValueError, match="uncompressed"):
            ea.derive_address_from_public_key_hex("02" + "ab" * 32)
