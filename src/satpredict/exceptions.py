"""
Exception hierarchy for satpredict.

Every error raised on purpose by the package derives from
``SatPredictError``.  Record problems are also ``ValueError`` instances,
lookup failures ``LookupError``, unreadable sources ``OSError`` and
propagation failures ``ArithmeticError``, so callers can catch either the
package type or the builtin family.
"""

from __future__ import annotations


class SatPredictError(Exception):
    """Base class for all satpredict errors."""


class TLEError(SatPredictError, ValueError):
    """A two-line element record could not be turned into elements."""


class MalformedRecordError(TLEError):
    """A TLE line violates the fixed-column layout."""


class ChecksumError(TLEError):
    """A TLE line's checksum digit does not match its contents.

    Attributes:
        line_number: Which data line failed (1 or 2).
        expected: Checksum computed from columns 1-68.
        found: Checksum digit present in column 69.
    """

    def __init__(self, line_number: int, expected: int, found: int, line: str):
        self.line_number = line_number
        self.expected = expected
        self.found = found
        super().__init__(
            f"TLE line {line_number} checksum mismatch: computed {expected}, "
            f"found {found}: {line}"
        )


class NotFoundError(SatPredictError, LookupError):
    """A catalog number is not present in the searched source."""

    def __init__(self, catnum: int, source: str = "<lines>"):
        self.catnum = catnum
        self.source = source
        super().__init__(f"Catalog number {catnum} not found in {source}")


class SourceUnreadableError(SatPredictError, OSError):
    """A TLE source (file or stream) could not be opened or read."""


# Error codes follow the standard SGP4 convention.
SGP4_ERRORS = {
    1: "mean eccentricity is outside the range 0 <= e < 1",
    2: "mean motion has fallen below zero",
    3: "perturbed eccentricity is outside the range 0 <= e <= 1",
    4: "semilatus rectum has fallen below zero",
    6: "orbit has decayed below the surface of the Earth",
}


class NumericSingularityError(SatPredictError, ArithmeticError):
    """The propagator hit a degenerate case it cannot recover from.

    Attributes:
        code: SGP4 error code (see ``SGP4_ERRORS``).
        tsince: Minutes since epoch of the failed evaluation.
    """

    def __init__(self, code: int, tsince: float, catnum: int | None = None):
        self.code = code
        self.tsince = tsince
        self.catnum = catnum
        reason = SGP4_ERRORS.get(code, f"unknown error {code}")
        who = f"#{catnum} " if catnum is not None else ""
        super().__init__(f"Propagation of {who}failed at {tsince:.6f} min: {reason}")


class DecayedError(NumericSingularityError):
    """The orbit has decayed: the computed radius is inside the Earth."""
