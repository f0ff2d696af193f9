"""
Ethereum address derivation from a secp256k1 public key: Keccak-256 of the
raw X || Y coordinates, last 20 bytes, EIP-55 checksum casing.
"""
import string

from Crypto.Hash import keccak

import bit_utils as bu
from secp256k1_curve import EllipticCurvePoint, point_to_uncompressed_bytes

ADDRESS_BYTES = 20
ADDRESS_HEX_LENGTH = 2 + ADDRESS_BYTES * 2


def keccak256(data: bytes) -> bytes:
    """Original Keccak-256 (pre-standard SHA-3 padding), as used by Ethereum."""
    hasher = keccak.new(digest_bits=256)
    hasher.update(data)
    return hasher.digest()


def to_checksum_address(address: str) -> str:
    """
    Applies EIP-55 mixed-case checksum encoding to a hex address.

    A letter is upper-cased when the matching nibble of
    Keccak-256(lowercase address without '0x') is greater than 8.

    Args:
        address (str): '0x' followed by 40 hex digits, in any case.

    Returns:
        str: The checksummed address, with '0x' prefix.

    Raises:
        ValueError: If the address is not '0x' plus 40 hex digits.
    """
    if len(address) != ADDRESS_HEX_LENGTH or address[:2].lower() != '0x':
        raise ValueError(f"Expected '0x' followed by 40 hex digits, got {address!r}")

    lowered = address[2:].lower()
    if any(c not in string.hexdigits for c in lowered):
        raise ValueError(f"Address contains non-hex characters: {address!r}")
    digest = bu.encode_hex(keccak256(lowered.encode('ascii')))

    checksummed = ''.join(
        c.upper() if c.isalpha() and int(flag, 16) > 8 else c
        for c, flag in zip(lowered, digest)
    )
    return '0x' + checksummed


def derive_address(point: EllipticCurvePoint) -> str:
    """
    Derives the checksummed Ethereum address of a public key point.

    Raises:
        PointAtInfinity: If the point is IDENTITY.
    """
    coordinates = point_to_uncompressed_bytes(point)[1:]
    return _address_from_coordinates(coordinates)


def derive_address_from_public_key_hex(public_key_hex: str) -> str:
    """
    Derives the address from a 65-byte uncompressed public key in hex
    ('04' || X || Y), such as the output of another secp256k1 implementation.

    Raises:
        ValueError: If the key is not a 65-byte uncompressed encoding.
    """
    encoded = bu.decode_hex(public_key_hex)
    if len(encoded) != 65 or encoded[0] != 0x04:
        raise ValueError(f"Expected a 65-byte uncompressed public key, got {public_key_hex!r}")
    return _address_from_coordinates(encoded[1:])


def _address_from_coordinates(coordinates: bytes) -> str:
    raw_address = keccak256(coordinates)[-ADDRESS_BYTES:]
    return to_checksum_address('0x' + bu.encode_hex(raw_address))
