"""
A 256-bit unsigned integer with modulus-parameterized arithmetic.

The value is never reduced implicitly: every operation takes the modulus as
an argument, reduces its operands against it and returns a new instance
holding a canonical residue in [0, p). Additions are carried out as if on a
fixed 256-bit register, so an overflowing sum is truncated and then
corrected, and multiplication/exponentiation are built from repeated modular
additions rather than from wide products.
"""
import string
from typing import Union

import bit_utils as bu
from errors import InvalidModulus, ParseError

MAX_VALUE = (1 << bu.WORD_BITS) - 1
MAX_HEX_DIGITS = bu.WORD_BYTES * 2

Operand = Union['FixedWidthModularInteger', int]


def _raw(operand: Operand) -> int:
    if isinstance(operand, FixedWidthModularInteger):
        return operand.value
    if isinstance(operand, int) and not isinstance(operand, bool) and 0 <= operand <= MAX_VALUE:
        return operand
    raise ValueError(f"Operand is not a 256-bit unsigned value: {operand!r}")


def _modulus(p: Operand) -> int:
    modulus = _raw(p)
    if modulus == 0:
        raise InvalidModulus("Modulus must be non-zero")
    return modulus


def _add_reduced(x1: int, x2: int, p: int) -> int:
    """
    Adds two residues already reduced mod p on a 256-bit register.

    If the sum wraps past MAX_VALUE the truncated result is short by
    MAX_VALUE - p + 1, which is added back. x1 + x2 - p < p, so the
    corrected sum cannot overflow again.
    """
    total = x1 + x2
    if total > MAX_VALUE:
        total = (total & MAX_VALUE) + (MAX_VALUE - p + 1)
    return total % p


def _mul_reduced(x1: int, x2: int, p: int) -> int:
    # The smaller factor drives the bit scan, the larger is the addend.
    if x1 < x2:
        seq, addend = x1, x2
    else:
        seq, addend = x2, x1

    bits = bu.bytes_to_bits(bu.int_to_word(seq))
    wrap = MAX_VALUE - p + 1

    base = 0
    started = False
    for index in range(bu.WORD_BITS):
        # Inlined _add_reduced: this loop dominates every curve operation.
        if started:
            base += base
            if base > MAX_VALUE:
                base = (base & MAX_VALUE) + wrap
            base %= p
        if bits[index]:
            started = True
            base += addend
            if base > MAX_VALUE:
                base = (base & MAX_VALUE) + wrap
            base %= p

    return base


def _exp_reduced(base_value: int, exponent: int, p: int) -> int:
    multiplier = base_value % p
    bits = bu.bytes_to_bits(bu.int_to_word(exponent))

    result = 1 % p
    started = False
    for index in range(bu.WORD_BITS):
        if started:
            result = _mul_reduced(result, result, p)
        if bits[index]:
            started = True
            result = _mul_reduced(result, multiplier, p)

    return result


class FixedWidthModularInteger:
    """
    Immutable 256-bit unsigned magnitude.

    Equality compares raw magnitudes, not congruence classes: 0x0d and 0x02
    are different values even though they agree mod 11.
    """

    __slots__ = ('_value',)

    def __init__(self, value: int = 0):
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"Expected int, got {type(value).__name__}")
        if not 0 <= value <= MAX_VALUE:
            raise ValueError(f"Value does not fit in 256 bits: {value:#x}")
        self._value = value

    @classmethod
    def from_hex(cls, text: str) -> 'FixedWidthModularInteger':
        """
        Parses a big-endian hex magnitude, with or without a '0x' prefix.

        Raises:
            ParseError: If the text is empty, not hex, or longer than 64 digits.
        """
        digits = text.strip()
        if digits[:2].lower() == '0x':
            digits = digits[2:]
        if not digits:
            raise ParseError(f"Empty hex value: {text!r}")
        if len(digits) > MAX_HEX_DIGITS:
            raise ParseError(f"Hex value longer than {MAX_HEX_DIGITS} digits: {text!r}")
        if any(c not in string.hexdigits for c in digits):
            raise ParseError(f"Invalid hex value: {text!r}")
        return cls(int(digits, 16))

    @classmethod
    def from_bytes(cls, data: bytes) -> 'FixedWidthModularInteger':
        """Reads up to 32 big-endian bytes."""
        if len(data) > bu.WORD_BYTES:
            raise ParseError(f"Expected at most {bu.WORD_BYTES} bytes, got {len(data)}")
        return cls(int.from_bytes(data, 'big'))

    @property
    def value(self) -> int:
        return self._value

    def to_bytes(self) -> bytes:
        """Fixed 32-byte big-endian serialization."""
        return bu.int_to_word(self._value)

    def to_hex(self) -> str:
        """64 lowercase hex digits, zero padded."""
        return bu.encode_hex(self.to_bytes())

    def is_zero(self) -> bool:
        return self._value == 0

    def add_mod(self, b: Operand, p: Operand) -> 'FixedWidthModularInteger':
        """(a mod p + b mod p) mod p, correcting any 256-bit overflow."""
        modulus = _modulus(p)
        return FixedWidthModularInteger(
            _add_reduced(self._value % modulus, _raw(b) % modulus, modulus))

    def sub_mod(self, b: Operand, p: Operand) -> 'FixedWidthModularInteger':
        """(a - b) mod p computed as a + (p - b mod p) so nothing underflows."""
        modulus = _modulus(p)
        return FixedWidthModularInteger(
            _add_reduced(self._value % modulus, (modulus - _raw(b) % modulus) % modulus, modulus))

    def mul_mod(self, b: Operand, p: Operand) -> 'FixedWidthModularInteger':
        """
        (a * b) mod p by double-and-add.

        Multiplication is repeated addition: scanning the smaller factor's
        bits from the most significant set bit down, each step doubles the
        accumulator and, on a 1 bit, adds the larger factor. 13 * 11 with
        11 = 0b1011 runs 13, 26, 65, 143.
        """
        modulus = _modulus(p)
        return FixedWidthModularInteger(
            _mul_reduced(self._value % modulus, _raw(b) % modulus, modulus))

    def exp_mod(self, exponent: Operand, p: Operand) -> 'FixedWidthModularInteger':
        """
        base^exponent mod p by square-and-multiply.

        Same bit scan as mul_mod with squaring in place of doubling. The
        exponent's raw bits are used; it is not reduced.
        """
        modulus = _modulus(p)
        return FixedWidthModularInteger(_exp_reduced(self._value, _raw(exponent), modulus))

    def div_mod(self, b: Operand, p: Operand) -> 'FixedWidthModularInteger':
        """
        (a / b) mod p via Fermat's little theorem: a * b^(p - 2) mod p.

        p must be prime; only p >= 2 is checked. For p > 2 a divisor
        congruent to zero yields zero.

        Raises:
            InvalidModulus: If p < 2.
        """
        modulus = _raw(p)
        if modulus < 2:
            raise InvalidModulus(f"Division requires a prime modulus >= 2, got {modulus:#x}")
        inverse = _exp_reduced(_raw(b), modulus - 2, modulus)
        return FixedWidthModularInteger(_mul_reduced(self._value % modulus, inverse, modulus))

    def __eq__(self, other) -> bool:
        if isinstance(other, FixedWidthModularInteger):
            return self._value == other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __int__(self) -> int:
        return self._value

    def __index__(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"FixedWidthModularInteger(0x{self.to_hex()})"

    def __str__(self) -> str:
        return self.to_hex()


ZERO = FixedWidthModularInteger(0)
