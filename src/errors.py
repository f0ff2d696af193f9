"""
Exception types raised by the modular arithmetic and curve engines.

Every error derives from ValueError so callers that already guard input
handling with `except ValueError` keep working.
"""


class Secp256k1Error(ValueError):
    """Base class for all derivation errors."""


class ParseError(Secp256k1Error):
    """Raised for malformed or over-length hex/byte input."""


class PreconditionViolation(Secp256k1Error):
    """Raised when an operation is called with inputs it is not defined for."""


class InvalidModulus(PreconditionViolation):
    """Modulus of zero, or below two for division."""


class EqualXCoordinates(PreconditionViolation):
    """Point addition called with two points sharing an x-coordinate."""


class ScalarOutOfRange(PreconditionViolation):
    """Private key scalar outside [1, n-1]."""


class PointAtInfinity(PreconditionViolation):
    """The identity point has no affine coordinates to serialize."""
