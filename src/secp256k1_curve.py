"""
secp256k1 point arithmetic built entirely on FixedWidthModularInteger.

Points are affine (x, y) pairs; the point at infinity is the separate
IDENTITY value rather than a magic coordinate pair. No operation here uses
an external curve library.
"""
from dataclasses import dataclass
from typing import Optional, Union

import bit_utils as bu
from errors import EqualXCoordinates, ParseError, PointAtInfinity, ScalarOutOfRange
from modular_integer import MAX_VALUE, FixedWidthModularInteger, ZERO

Scalar = Union[FixedWidthModularInteger, int, str]

# Curve y^2 = x^3 + 7 over F_p.
P = FixedWidthModularInteger.from_hex("FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F")
N = FixedWidthModularInteger.from_hex("FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141")
B = FixedWidthModularInteger(7)

UNCOMPRESSED_PREFIX = b'\x04'

_TWO = FixedWidthModularInteger(2)
_THREE = FixedWidthModularInteger(3)


@dataclass(frozen=True)
class AffinePoint:
    """A point (x, y) with both coordinates in [0, p)."""
    x: FixedWidthModularInteger
    y: FixedWidthModularInteger

    @classmethod
    def from_hex_coordinates(cls, x: str, y: str) -> 'AffinePoint':
        return cls(FixedWidthModularInteger.from_hex(x), FixedWidthModularInteger.from_hex(y))

    def to_bytes(self) -> bytes:
        """X || Y as two 32-byte big-endian coordinates."""
        return self.x.to_bytes() + self.y.to_bytes()

    def to_hex_string(self) -> str:
        return f"{self.x.to_hex()} {self.y.to_hex()}"


class Identity:
    """The point at infinity, neutral element of point addition."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "IDENTITY"


IDENTITY = Identity()

EllipticCurvePoint = Union[AffinePoint, Identity]

G = AffinePoint.from_hex_coordinates(
    "79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798",
    "483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8",
)


def is_identity(point: EllipticCurvePoint) -> bool:
    return isinstance(point, Identity)


def is_on_curve(point: EllipticCurvePoint) -> bool:
    """Checks y^2 = x^3 + 7 (mod p). The identity is considered on the curve."""
    if is_identity(point):
        return True
    if point.x.value >= P.value or point.y.value >= P.value:
        return False
    left = point.y.mul_mod(point.y, P)
    right = point.x.mul_mod(point.x, P).mul_mod(point.x, P).add_mod(B, P)
    return left == right


def negate_point(point: EllipticCurvePoint) -> EllipticCurvePoint:
    """Returns -P = (x, p - y)."""
    if is_identity(point):
        return IDENTITY
    return AffinePoint(point.x, ZERO.sub_mod(point.y, P))


def add_points(p1: EllipticCurvePoint, p2: EllipticCurvePoint) -> EllipticCurvePoint:
    """
    Adds two distinct points using the chord rule.

    Points sharing an x-coordinate are rejected rather than handled: equal
    points belong to double_point, and P + (-P) is not mapped to IDENTITY.

    Raises:
        EqualXCoordinates: If both operands are affine with x-coordinates
            congruent mod p.
    """
    if is_identity(p1):
        return p2
    if is_identity(p2):
        return p1
    if p1.x.value % P.value == p2.x.value % P.value:
        raise EqualXCoordinates(f"Cannot add points with equal x-coordinate {p1.x.to_hex()}")

    # slope = (y1 - y2) / (x1 - x2)
    y_diff = p1.y.sub_mod(p2.y, P)
    x_diff = p1.x.sub_mod(p2.x, P)
    slope = y_diff.div_mod(x_diff, P)

    x3 = slope.mul_mod(slope, P).sub_mod(p1.x, P).sub_mod(p2.x, P)
    y3 = p1.x.sub_mod(x3, P).mul_mod(slope, P).sub_mod(p1.y, P)

    return AffinePoint(x3, y3)


def double_point(point: EllipticCurvePoint) -> EllipticCurvePoint:
    """
    Computes 2P using the tangent rule.

    A point with y = 0 has a vertical tangent, so its double is IDENTITY.
    """
    if is_identity(point) or point.y.is_zero():
        return IDENTITY

    # slope = 3x^2 / 2y
    numerator = point.x.mul_mod(point.x, P).mul_mod(_THREE, P)
    denominator = point.y.mul_mod(_TWO, P)
    slope = numerator.div_mod(denominator, P)

    x3 = slope.mul_mod(slope, P).sub_mod(point.x, P).sub_mod(point.x, P)
    y3 = point.x.sub_mod(x3, P).mul_mod(slope, P).sub_mod(point.y, P)

    return AffinePoint(x3, y3)


def _as_scalar(k: Scalar) -> FixedWidthModularInteger:
    if isinstance(k, FixedWidthModularInteger):
        return k
    if isinstance(k, str):
        return FixedWidthModularInteger.from_hex(k)
    if not isinstance(k, int) or isinstance(k, bool):
        raise TypeError(f"Expected a hex string or int scalar, got {type(k).__name__}")
    if not 0 <= k <= MAX_VALUE:
        raise ParseError(f"Scalar does not fit in 256 bits: {k:#x}")
    return FixedWidthModularInteger(k)


def scalar_multiply(k: Scalar, point: Optional[EllipticCurvePoint] = None) -> EllipticCurvePoint:
    """
    Computes k * point (point defaults to G) by double-and-add.

    The scalar is used bit for bit: it is neither reduced mod n nor range
    checked. A scalar of zero gives IDENTITY.

    Raises:
        EqualXCoordinates: If an intermediate sum hits P + (-P), which
            happens for scalars that are multiples of the point's order
            plus or minus one.
    """
    if point is None:
        point = G

    bits = bu.bytes_to_bits(_as_scalar(k).to_bytes())

    result = IDENTITY
    started = False
    for index in range(bu.WORD_BITS):
        if started:
            result = double_point(result)
        if bits[index]:
            started = True
            result = add_points(result, point)

    return result


def validate_private_key(private_key: Scalar) -> FixedWidthModularInteger:
    """
    Parses a private key and checks that it lies in [1, n - 1].

    Raises:
        ParseError: If a hex string is malformed.
        ScalarOutOfRange: If the key is zero or not below n.
    """
    scalar = _as_scalar(private_key)
    if scalar.is_zero() or scalar.value >= N.value:
        raise ScalarOutOfRange(f"Private key must be in [1, n - 1], got {scalar.to_hex()}")
    return scalar


def private_key_to_public_key(private_key: Scalar, validate_range: bool = True) -> EllipticCurvePoint:
    """
    Derives the public key point k * G.

    Args:
        private_key: Hex string, int or FixedWidthModularInteger.
        validate_range (bool): Reject keys outside [1, n - 1]. When False the
            scalar is multiplied as given.
    """
    if validate_range:
        scalar = validate_private_key(private_key)
    else:
        scalar = _as_scalar(private_key)
    return scalar_multiply(scalar, G)


def point_to_uncompressed_bytes(point: EllipticCurvePoint) -> bytes:
    """
    SEC1 uncompressed encoding 0x04 || X || Y (65 bytes).

    Raises:
        PointAtInfinity: For IDENTITY, which has no affine coordinates.
    """
    if is_identity(point):
        raise PointAtInfinity("The point at infinity has no uncompressed encoding")
    return UNCOMPRESSED_PREFIX + point.to_bytes()
