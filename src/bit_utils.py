"""
Byte, bit and hex conversions shared by the modular arithmetic and curve
engines. All buffers are fixed 32-byte big-endian words.
"""
from typing import List

import numpy as np

WORD_BYTES = 32
WORD_BITS = WORD_BYTES * 8


def bytes_to_bits(data: bytes) -> List[int]:
    """
    Decomposes a 32-byte big-endian buffer into its 256 bits.

    Args:
        data (bytes): Exactly 32 bytes.

    Returns:
        List[int]: 256 values of 0 or 1, most significant bit first.

    Raises:
        ValueError: If the buffer is not exactly 32 bytes long.
    """
    if len(data) != WORD_BYTES:
        raise ValueError(f"Expected {WORD_BYTES} bytes, got {len(data)}")

    return np.unpackbits(np.frombuffer(data, dtype=np.uint8)).tolist()


def int_to_word(value: int) -> bytes:
    """Converts a non-negative integer below 2^256 to a 32-byte big-endian word."""
    if value < 0 or value >> WORD_BITS:
        raise ValueError(f"Value does not fit in {WORD_BITS} bits: {value:#x}")
    return value.to_bytes(WORD_BYTES, 'big')


def encode_hex(data: bytes) -> str:
    """Lowercase hex encoding without a prefix."""
    return data.hex()


def decode_hex(text: str) -> bytes:
    """
    Decodes a hex string, with or without a leading '0x'.

    Raises:
        ValueError: On odd length or non-hex characters.
    """
    if text[:2].lower() == '0x':
        text = text[2:]
    return bytes.fromhex(text)
