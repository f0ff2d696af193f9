"""
The derivation engine. Walks a batch of private keys, derives each public key
with the from-scratch curve arithmetic and turns it into an Ethereum address.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional

import bit_utils as bu
import ethereum_address as ea
import secp256k1_curve as curve

OUTPUT_FORMATS = ('address', 'public_key', 'both')
TRUE_VALUES = ('1', 'yes', 'true', 'on')
DEFAULT_PROGRESS_INTERVAL = 10  # seconds


@dataclass(frozen=True)
class DerivationResult:
    """Public key (uncompressed hex) and checksummed address for one private key."""
    label: str
    private_key: str
    public_key: str
    address: str


def derive_key(private_key: str, label: str = "", validate_range: bool = True) -> DerivationResult:
    """
    Derives the public key and address for a single hex private key.

    Raises:
        ParseError: If the private key is not valid hex.
        ScalarOutOfRange: If validate_range is set and the key is outside [1, n - 1].
        PreconditionViolation: If validate_range is off and the scalar is zero
            or otherwise reaches the point at infinity.
    """
    point = curve.private_key_to_public_key(private_key, validate_range=validate_range)
    public_key = curve.point_to_uncompressed_bytes(point)
    return DerivationResult(
        label=label,
        private_key=private_key,
        public_key=bu.encode_hex(public_key),
        address=ea.derive_address(point),
    )


class KeyDeriver:
    """
    Derives a batch of keys one at a time.

    Each call to step() consumes one pending key, so a caller can report
    progress between keys. Keys are independent; nothing is shared between
    derivations.
    """

    def __init__(self, key_definitions: List[Dict], profile_config: Dict):
        """
        Initializes the KeyDeriver.

        Args:
            key_definitions (List[Dict]): Entries with 'label' and 'private_key'.
            profile_config (Dict): The [Deriver] settings of the active profile.

        Raises:
            ValueError: If the profile names an unknown output_format or has a
                non-numeric progress_interval.
        """
        self.profile_config = profile_config
        self.output_format = profile_config.get('output_format', 'both').lower()
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Unknown output_format: {self.output_format}")
        self.validate_range = profile_config.get('validate_range', 'yes').lower() in TRUE_VALUES
        try:
            self.progress_interval = float(profile_config.get('progress_interval', DEFAULT_PROGRESS_INTERVAL))
        except ValueError:
            raise ValueError(f"Invalid progress_interval: {profile_config['progress_interval']}")

        self._pending: List[Dict] = list(key_definitions)
        self._total_keys = len(self._pending)
        self._next_index = 0
        self.results: List[DerivationResult] = []

    def step(self) -> Optional[DerivationResult]:
        """
        Derives the next pending key.

        The key is consumed even when derivation fails, so the next call
        moves on to the following key.

        Returns:
            Optional[DerivationResult]: The result, or None when the batch is finished.
        """
        if self.is_finished():
            return None

        entry = self._pending[self._next_index]
        self._next_index += 1

        result = derive_key(entry['private_key'], label=entry.get('label', ''),
                            validate_range=self.validate_range)
        self.results.append(result)
        return result

    def derive_all(self) -> List[DerivationResult]:
        """Runs step() until the batch is finished; errors propagate."""
        while not self.is_finished():
            self.step()
        return self.results

    def is_finished(self) -> bool:
        return self._next_index >= self._total_keys

    def get_total_keys(self) -> int:
        return self._total_keys

    def get_total_keys_derived(self) -> int:
        return len(self.results)

    def get_total_keys_processed(self) -> int:
        """Keys consumed by step(), including the ones that failed."""
        return self._next_index

    def next_label(self) -> Optional[str]:
        if self.is_finished():
            return None
        return self._pending[self._next_index].get('label', '')

    def format_result(self, result: DerivationResult) -> str:
        """Renders a result according to the profile's output_format."""
        lines = [f"[{result.label}]"]
        if self.output_format in ('public_key', 'both'):
            lines.append(f"  Public Key: {result.public_key}")
        if self.output_format in ('address', 'both'):
            lines.append(f"  Address:    {result.address}")
        return "\n".join(lines)
