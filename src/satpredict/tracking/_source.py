"""Look up TLE records by catalog number in text files or streams.

TLE files hold records of a name line followed by the two data lines.
Records are matched on the catalog number in columns 3-7 of line 1.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from satpredict.coordinates.topocentric import ObserverLocation
from satpredict.exceptions import NotFoundError, SourceUnreadableError, TLEError
from satpredict.sgp4._constants import EarthGravity
from satpredict.sgp4._tle import parse_3le
from satpredict.sgp4._types import OrbitalElementSet
from satpredict.tracking._state import SatelliteState, initialize_at_epoch

logger = logging.getLogger(__name__)


def _line1_catnum(line: str) -> int | None:
    if not line.startswith("1 "):
        return None
    try:
        return int(line[2:7])
    except ValueError:
        return None


def find_tle(catnum: int, lines: Iterable[str], source: str = "<lines>") -> tuple[str, str, str]:
    """Find the record of a catalog number.

    Args:
        catnum: Catalog number to look for.
        lines: Text lines, e.g. an open file.
        source: Name of the source used in error messages.

    Returns:
        The raw ``(name, line1, line2)`` of the first matching record.  The
        name is empty when the record has no name line.

    Raises:
        NotFoundError: If no record carries *catnum*.
    """
    buffer = [line.rstrip("\r\n") for line in lines]

    for i, line in enumerate(buffer[:-1]):
        if _line1_catnum(line) != catnum:
            continue
        line2 = buffer[i + 1]
        if not line2.startswith("2 "):
            continue
        name = buffer[i - 1] if i > 0 and _line1_catnum(buffer[i - 1]) is None else ""
        if name.startswith("2 "):
            name = ""
        return name, line, line2

    raise NotFoundError(catnum, source)


def read_tle(catnum: int, path: str | Path) -> OrbitalElementSet:
    """Read and parse the record of a catalog number from a TLE file.

    Args:
        catnum: Catalog number to look for.
        path: Path of the TLE file.

    Returns:
        Parsed orbital elements.

    Raises:
        SourceUnreadableError: If the file cannot be opened or read.
        NotFoundError: If the file holds no record for *catnum*.
        TLEError: If the record is found but is malformed.
    """
    path = Path(path)
    try:
        with path.open("r", encoding="ascii", errors="replace") as fp:
            record = find_tle(catnum, fp, source=str(path))
    except OSError as e:
        logger.error("Failed to open %s: %s", path, e)
        raise SourceUnreadableError(f"Cannot read TLE source {path}: {e}") from e

    try:
        elements = parse_3le(record)
    except TLEError as e:
        logger.error("Rejected record #%d in %s: %s", catnum, path, e)
        raise

    logger.debug("Found #%d %r in %s", catnum, elements.name, path)
    return elements


def load_satellite(
    catnum: int,
    path: str | Path,
    observer: ObserverLocation | None = None,
    gravity: str | EarthGravity = "wgs72",
) -> SatelliteState:
    """Read a record from a TLE file and initialize its state at epoch.

    Args:
        catnum: Catalog number to look for.
        path: Path of the TLE file.
        observer: Optional ground observer for look angles.
        gravity: Gravity model name or constants.

    Returns:
        A state populated at ``tsince = 0``.
    """
    return initialize_at_epoch(read_tle(catnum, path), observer, gravity)
