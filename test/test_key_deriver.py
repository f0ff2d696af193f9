import pytest

import secp256k1_curve as curve
from errors import PreconditionViolation, ScalarOutOfRange
from key_deriver import DerivationResult, KeyDeriver, derive_key
from reference_curve import reference_uncompressed_hex

KEY_ONE_ADDRESS = "0x7E5F4552091A69125d5DfCb7b8C2659029395Bdf"


@pytest.fixture
def key_definitions():
    """Provides a small batch of cheap-to-derive keys."""
    return [
        {"label": "one", "private_key": "01"},
        {"label": "two", "private_key": "02"},
        {"label": "three", "private_key": "0x03"},
    ]


@pytest.fixture
def profile_config():
    """Provides a deriver profile for testing."""
    return {
        "output_format": "both",
        "validate_range": "yes",
        "progress_interval": "5",
    }


class TestDeriveKey:
    def test_key_one(self):
        """Tests that private key 1 yields G and its well-known address."""
        result = derive_key("01", label="one")
        assert result == DerivationResult(
            label="one",
            private_key="01",
            public_key="04" + curve.G.x.to_hex() + curve.G.y.to_hex(),
            address=KEY_ONE_ADDRESS,
        )

    def test_matches_reference(self):
        result = derive_key("0x05")
        assert result.public_key == reference_uncompressed_hex(5)

    def test_out_of_range(self):
        with pytest.raises(ScalarOutOfRange):
            derive_key("00")

    def test_zero_key_without_range_check(self):
        """Tests that key 0 reaches the identity, which has no encoding."""
        with pytest.raises(PreconditionViolation):
            derive_key("00", validate_range=False)


class TestKeyDeriver:
    def test_initialization(self, key_definitions, profile_config):
        """Tests that the deriver reads its profile settings."""
        deriver = KeyDeriver(key_definitions, profile_config)
        assert deriver.output_format == "both"
        assert deriver.validate_range is True
        assert deriver.progress_interval == 5.0
        assert deriver.get_total_keys() == 3
        assert deriver.get_total_keys_derived() == 0
        assert deriver.next_label() == "one"
        assert not deriver.is_finished()

    def test_defaults(self, key_definitions):
        """Tests the settings used when the profile is empty."""
        deriver = KeyDeriver(key_definitions, {})
        assert deriver.output_format == "both"
        assert deriver.validate_range is True
        assert deriver.progress_interval == 10.0

    def test_validate_range_off(self, key_definitions):
        deriver = KeyDeriver(key_definitions, {"validate_range": "no"})
        assert deriver.validate_range is False

    def test_unknown_output_format(self, key_definitions):
        with pytest.raises(ValueError, match="Unknown output_format"):
            KeyDeriver(key_definitions, {"output_format": "qr"})

    def test_invalid_progress_interval(self, key_definitions):
        with pytest.raises(ValueError, match="Invalid progress_interval"):
            KeyDeriver(key_definitions, {"progress_interval": "often"})

    def test_step_through_batch(self, key_definitions, profile_config):
        """Tests that each step derives exactly one key, in order."""
        deriver = KeyDeriver(key_definitions, profile_config)

        first = deriver.step()
        assert first.label == "one"
        assert first.address == KEY_ONE_ADDRESS
        assert deriver.get_total_keys_derived() == 1

        second = deriver.step()
        third = deriver.step()
        assert second.public_key == reference_uncompressed_hex(2)
        assert third.public_key == reference_uncompressed_hex(3)

        assert deriver.is_finished()
        assert deriver.step() is None
        assert deriver.next_label() is None
        assert deriver.results == [first, second, third]

    def test_failed_key_is_consumed(self, profile_config):
        """Tests that a failing key is skipped on the next step."""
        keys = [
            {"label": "zero", "private_key": "00"},
            {"label": "bad-hex", "private_key": "xyz"},
            {"label": "one", "private_key": "01"},
        ]
        deriver = KeyDeriver(keys, profile_config)

        with pytest.raises(ScalarOutOfRange):
            deriver.step()
        with pytest.raises(ValueError):
            deriver.step()

        result = deriver.step()
        assert result.label == "one"
        assert deriver.get_total_keys_processed() == 3
        assert deriver.get_total_keys_derived() == 1

    def test_derive_all(self, key_definitions, profile_config):
        deriver = KeyDeriver(key_definitions, profile_config)
        results = deriver.derive_all()
        assert [r.label for r in results] == ["one", "two", "three"]

    @pytest.mark.parametrize("output_format, has_public_key, has_address", [
        ("both", True, True),
        ("address", False, True),
        ("public_key", True, False),
    ])
    def test_format_result(self, key_definitions, output_format, has_public_key, has_address):
        """Tests that output_format controls what is rendered."""
        deriver = KeyDeriver(key_definitions, {"output_format": output_format})
        text = deriver.format_result(deriver.step())
        assert text.startswith("[one]")
        assert ("Public Key:" in text) is has_public_key
        assert (KEY_ONE_ADDRESS in text) is has_address
