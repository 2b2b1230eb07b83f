# /// script
# requires-python = ">=3.10"
# dependencies = ["typer>=0.9.0", "satpredict"]
#
# [tool.uv.sources]
# satpredict = { path = ".." }
# ///
"""Track one satellite from a TLE file and print its ground track.

Looks up a catalog number in a TLE file, propagates it from its epoch (or
from a given Julian date) at a fixed step and prints the sub-satellite
point, altitude and orbit class.  With an observer location the azimuth,
elevation and range are printed as well.

Requires satpredict to be installed (``uv pip install -e .`` from the repo root).

Usage:
    uv run examples/track.py CATNUM TLE_FILE [OPTIONS]

Examples:
    # ISS ground track for one orbit at 5 minute steps
    uv run examples/track.py 25544 stations.txt --duration 95 --step 5

    # Look angles from Delft
    uv run examples/track.py 25544 stations.txt --lat 52.0 --lon 4.36 --alt 0.0
"""

import logging
import sys
from pathlib import Path
from typing import Annotated, Optional

import numpy as np
import typer

from satpredict import (
    DecayedError,
    NotFoundError,
    NumericSingularityError,
    SatPredictError,
    load_satellite,
    propagate_to,
    propagate_to_jd,
)
from satpredict.tracking import ObserverLocation


def main(
    catnum: Annotated[int, typer.Argument(help="Satellite catalog number")],
    tle_file: Annotated[Path, typer.Argument(help="File holding TLE records")],
    duration: Annotated[float, typer.Option(help="Tracking duration in minutes")] = 90.0,
    step: Annotated[float, typer.Option(help="Output step in minutes")] = 1.0,
    start_jd: Annotated[
        Optional[float], typer.Option(help="Start Julian date (default: element set epoch)")
    ] = None,
    lat: Annotated[Optional[float], typer.Option(help="Observer latitude in degrees")] = None,
    lon: Annotated[Optional[float], typer.Option(help="Observer longitude in degrees")] = None,
    alt: Annotated[float, typer.Option(help="Observer altitude in km")] = 0.0,
    gravity: Annotated[str, typer.Option(help="Gravity model: wgs72old, wgs72 or wgs84")] = "wgs72",
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
) -> None:
    """Print the ground track (and look angles) of one satellite."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)

    observer = None
    if lat is not None and lon is not None:
        observer = ObserverLocation(lat=lat, lon=lon, alt=alt)

    try:
        state = load_satellite(catnum, tle_file, observer=observer, gravity=gravity)
    except NotFoundError as e:
        print(f"ERROR: {e}")
        sys.exit(1)
    except (SatPredictError, ValueError) as e:
        print(f"ERROR: Cannot load #{catnum}: {e}")
        sys.exit(1)

    elements = state.elements
    print(f"#{elements.catnum} {elements.name or '(unnamed)'}")
    print(f"  Model:   {state.model.kind} ({state.gravity.name})")
    print(f"  Orbit:   {state.otype}, period {state.period:.2f} min")
    print(f"  Perigee: {state.perigee_alt:.1f} km, apogee {state.apogee_alt:.1f} km")
    print(f"  Decay:   JD {state.decay_jd:.2f}")

    if start_jd is not None:
        propagate_to_jd(state, start_jd)
    t0 = state.tsince

    header = f"{'tsince':>10} {'lat':>8} {'lon':>9} {'alt':>9} {'orbit':>7}"
    if observer is not None:
        header += f" {'az':>7} {'el':>7} {'range':>9}"
    print()
    print(header)

    for t in np.arange(t0, t0 + duration + 0.5 * step, step):
        try:
            propagate_to(state, float(t))
        except DecayedError as e:
            print(f"Decayed: {e}")
            break
        except NumericSingularityError as e:
            print(f"Skipped: {e}")
            continue

        row = (
            f"{state.tsince:10.2f} {state.ssplat:8.3f} {state.ssplon:9.3f} "
            f"{state.alt:9.2f} {state.orbit:7d}"
        )
        if state.look is not None:
            row += f" {state.look.az:7.2f} {state.look.el:7.2f} {state.look.range:9.2f}"
        print(row)


if __name__ == "__main__":
    typer.run(main)
