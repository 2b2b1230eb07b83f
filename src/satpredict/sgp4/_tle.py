"""
TLE parsing, validation and formatting for the SGP4/SDP4 propagator.

Each data line is described by a table of ``(name, start, stop, convert)``
column entries. Lines are checked once for length, line number, the fixed
blank separator columns and the checksum; every field is then cut out of
its column range and converted. Any failure raises a ``TLEError`` subclass
and no partial element set is ever produced.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from math import floor, log10, pi
from typing import NamedTuple

from satpredict.constants import DEG2RAD, MINUTES_PER_DAY
from satpredict.exceptions import ChecksumError, MalformedRecordError
from satpredict.sgp4._types import OrbitalElementSet

_DIGITS = "0123456789"

# Conversion constants (matching reference sgp4 library exactly)
_TWOPI = 2.0 * pi
_XPDOTP = MINUTES_PER_DAY / _TWOPI  # 229.1831180523293

TLE_LINE_LENGTH = 69


class _Column(NamedTuple):
    name: str
    start: int
    stop: int
    convert: Callable[[str], object]


def _decimal_exponent(text: str) -> float:
    """Decode the ``+NNNNN-N`` field: signed mantissa with implied leading point, then exponent."""
    mantissa = float(text[0] + "." + text[1:6])
    return mantissa * 10.0 ** int(text[6:8])


def _implied_decimal(text: str) -> float:
    if not text.replace(" ", "0").isdigit():
        raise ValueError(f"expected digits, got {text!r}")
    return float("0." + text.replace(" ", "0"))


def _optional_int(text: str) -> int:
    return int(text) if text.strip() else 0


_LINE1_COLUMNS = (
    _Column("catnum", 2, 7, int),
    _Column("classification", 7, 8, lambda s: s.strip() or "U"),
    _Column("intldesg", 9, 17, str.rstrip),
    _Column("epochyr", 18, 20, int),
    _Column("epochdays", 20, 32, float),
    _Column("ndot", 33, 43, float),
    _Column("nddot", 44, 52, _decimal_exponent),
    _Column("bstar", 53, 61, _decimal_exponent),
    _Column("ephtype", 62, 63, _optional_int),
    _Column("elnum", 64, 68, _optional_int),
)

_LINE2_COLUMNS = (
    _Column("catnum", 2, 7, int),
    _Column("inclination", 8, 16, float),
    _Column("raan", 17, 25, float),
    _Column("eccentricity", 26, 33, _implied_decimal),
    _Column("argp", 34, 42, float),
    _Column("mean_anomaly", 43, 51, float),
    _Column("mean_motion", 52, 63, float),
    _Column("revnum", 63, 68, _optional_int),
)

# Columns that must hold a blank
_SEPARATORS = {
    1: (1, 8, 17, 32, 43, 52, 61, 63),
    2: (1, 7, 16, 25, 33, 42, 51),
}


def compute_checksum(line: str) -> int:
    """Compute the TLE checksum for a line.

    The checksum is the sum of all digit characters plus 1 for each
    minus sign, modulo 10, computed over the first 68 characters.

    Args:
        line: A TLE line string (at least 68 characters).

    Returns:
        The checksum digit (0-9).
    """
    return sum((int(c) if c in _DIGITS else c == "-") for c in line[:68]) % 10


def validate_tle_line(line: str, line_number: int) -> None:
    """Validate a TLE data line's layout and checksum.

    Args:
        line: A TLE line string.
        line_number: Expected line number (1 or 2).

    Raises:
        MalformedRecordError: If the line is too short, carries the wrong
            line number, or has a non-blank separator column.
        ChecksumError: If the checksum digit does not match.
    """
    line = line.rstrip()

    if len(line) < TLE_LINE_LENGTH:
        raise MalformedRecordError(
            f"TLE line {line_number} is too short ({len(line)} chars, expected 69): {line}"
        )

    if line[0] != str(line_number):
        raise MalformedRecordError(
            f"TLE line {line_number} does not start with '{line_number}': {line}"
        )

    for col in _SEPARATORS[line_number]:
        if line[col] != " ":
            raise MalformedRecordError(
                f"TLE line {line_number} has {line[col]!r} in blank column {col + 1}: {line}"
            )

    checksum_char = line[68]
    if checksum_char not in _DIGITS:
        raise MalformedRecordError(f"TLE line {line_number} has non-digit checksum: {line}")

    expected = compute_checksum(line)
    found = int(checksum_char)
    if expected != found:
        raise ChecksumError(line_number, expected, found, line)


def _extract(line: str, line_number: int, columns: tuple[_Column, ...]) -> dict:
    fields = {}
    for col in columns:
        text = line[col.start : col.stop]
        try:
            fields[col.name] = col.convert(text)
        except ValueError as e:
            raise MalformedRecordError(
                f"TLE line {line_number} field '{col.name}' (columns "
                f"{col.start + 1}-{col.stop}) is invalid: {text!r}"
            ) from e
    return fields


def parse_tle(line1: str, line2: str, name: str = "") -> OrbitalElementSet:
    """Parse a Two-Line Element set into orbital elements.

    Follows the fixed-column TLE format. Angular values are converted to
    radians (and normalized to ``[0, 2pi)``) and mean motion to rad/min
    for SGP4 internal use.

    Args:
        line1: First TLE line (69 characters including checksum).
        line2: Second TLE line (69 characters including checksum).
        name: Object name, usually the line preceding the data lines.

    Returns:
        Parsed orbital elements.

    Raises:
        MalformedRecordError: If a line violates the column layout, the
            catalog numbers of the two lines differ, or an element is out
            of its valid range.
        ChecksumError: If a line's checksum digit does not match.
    """
    validate_tle_line(line1, 1)
    validate_tle_line(line2, 2)

    f1 = _extract(line1.rstrip(), 1, _LINE1_COLUMNS)
    f2 = _extract(line2.rstrip(), 2, _LINE2_COLUMNS)

    if f1["catnum"] != f2["catnum"]:
        raise MalformedRecordError(
            f"Object numbers in lines 1 and 2 do not match: {f1['catnum']} != {f2['catnum']}"
        )
    if not 0.0 <= f2["inclination"] <= 180.0:
        raise MalformedRecordError(
            f"Inclination {f2['inclination']} deg is outside [0, 180] for #{f1['catnum']}"
        )
    if f2["mean_motion"] <= 0.0:
        raise MalformedRecordError(
            f"Mean motion {f2['mean_motion']} rev/day must be positive for #{f1['catnum']}"
        )

    two_digit_year = f1["epochyr"]
    year = two_digit_year + 2000 if two_digit_year < 57 else two_digit_year + 1900

    # Use the same split-JD approach as python-sgp4 Satrec.twoline2rv()
    epochdays = f1["epochdays"]
    days_int, fraction = divmod(epochdays, 1.0)
    jdsatepoch = year * 365 + (year - 1) // 4 + int(days_int) + 1721044.5
    jdsatepochF = round(fraction, 8)

    return OrbitalElementSet(
        name=name.strip(),
        catnum=f1["catnum"],
        classification=f1["classification"],
        intldesg=f1["intldesg"],
        epoch_year=year,
        epochdays=epochdays,
        jdsatepoch=jdsatepoch,
        jdsatepochF=jdsatepochF,
        ndot=f1["ndot"] / (_XPDOTP * MINUTES_PER_DAY),
        nddot=f1["nddot"] / (_XPDOTP * MINUTES_PER_DAY * MINUTES_PER_DAY),
        bstar=f1["bstar"],
        ephtype=f1["ephtype"],
        elnum=f1["elnum"],
        revnum=f2["revnum"],
        inclo=f2["inclination"] * DEG2RAD,
        nodeo=(f2["raan"] * DEG2RAD) % _TWOPI,
        ecco=f2["eccentricity"],
        argpo=(f2["argp"] * DEG2RAD) % _TWOPI,
        mo=(f2["mean_anomaly"] * DEG2RAD) % _TWOPI,
        no_kozai=f2["mean_motion"] / _XPDOTP,
    )


def parse_3le(lines: str | Sequence[str]) -> OrbitalElementSet:
    """Parse a name line plus two data lines.

    Accepts either a sequence of lines or one string holding them. A
    record without a name line (two lines) is accepted and gets an empty
    name; the ``"0 "`` prefix used by some catalogs on the name line is
    removed.

    Args:
        lines: The record, name line first.

    Returns:
        Parsed orbital elements.

    Raises:
        MalformedRecordError: If the record does not hold two or three
            non-empty lines, or a data line is malformed.
        ChecksumError: If a data line's checksum digit does not match.
    """
    if isinstance(lines, str):
        lines = lines.splitlines()
    lines = [line for line in lines if line.strip()]

    if len(lines) == 2:
        name = ""
        line1, line2 = lines
    elif len(lines) == 3:
        name, line1, line2 = lines
        if name.startswith("0 "):
            name = name[2:]
    else:
        raise MalformedRecordError(f"Expected a 3-line TLE record, got {len(lines)} lines")

    return parse_tle(line1, line2, name=name)


def _format_decimal_exponent(value: float) -> str:
    """Encode a value in the 8-column ``+NNNNN-N`` form."""
    if value == 0.0:
        return " 00000-0"
    sign = "-" if value < 0.0 else " "
    exponent = max(floor(log10(abs(value))) + 1, -9)
    digits = round(abs(value) * 10.0 ** (5 - exponent))
    if digits >= 100000:
        digits //= 10
        exponent += 1
    if exponent > 9:
        raise ValueError(f"Value {value} is too large for a TLE exponent field")
    return f"{sign}{digits:05d}{'-' if exponent < 0 else '+'}{abs(exponent):d}"


def _format_ndot(value: float) -> str:
    """Encode the first derivative in the 10-column ``+.NNNNNNNN`` form."""
    if abs(value) >= 1.0:
        raise ValueError(f"Mean motion derivative {value} does not fit the TLE field")
    text = f"{abs(value):.8f}"[1:]
    return ("-" if value < 0.0 else " ") + text


def format_tle(elements: OrbitalElementSet) -> tuple[str, str]:
    """Write orbital elements back out as two TLE data lines.

    Every field is rounded to the precision of its column and both
    checksum digits are recomputed, so the output always validates.

    Args:
        elements: Orbital elements, e.g. from ``parse_tle``.

    Returns:
        Tuple of ``(line1, line2)``, each 69 characters long.

    Raises:
        ValueError: If a value cannot be represented in its column.
    """
    if not 0 <= elements.catnum <= 99999:
        raise ValueError(f"Catalog number {elements.catnum} does not fit in 5 columns")

    line1 = (
        f"1 {elements.catnum:05d}{elements.classification[:1] or 'U'} "
        f"{elements.intldesg[:8]:<8s} "
        f"{elements.epoch_year % 100:02d}{elements.epochdays:012.8f} "
        f"{_format_ndot(elements.mean_motion_dot)} "
        f"{_format_decimal_exponent(elements.mean_motion_ddot)} "
        f"{_format_decimal_exponent(elements.bstar)} "
        f"{elements.ephtype % 10:d} {elements.elnum % 10000:4d}"
    )
    line2 = (
        f"2 {elements.catnum:05d} "
        f"{elements.inclination:8.4f} "
        f"{elements.raan:8.4f} "
        f"{round(elements.ecco * 1.0e7):07d} "
        f"{elements.argument_of_perigee:8.4f} "
        f"{elements.mean_anomaly:8.4f} "
        f"{elements.mean_motion:11.8f}"
        f"{elements.revnum % 100000:5d}"
    )

    return (
        line1 + str(compute_checksum(line1)),
        line2 + str(compute_checksum(line2)),
    )
