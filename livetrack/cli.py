#!/usr/bin/env python3
"""
Encode a tracker export into a live track.

Usage:
    livetrack-encode fixes.csv [--indent N] [--since EPOCH_SEC]

Examples:
    livetrack-encode inreach.csv                 # Compact JSON on stdout
    livetrack-encode inreach.csv --indent 2      # Pretty printed
    livetrack-encode inreach.csv --since 1700000000
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from livetrack.schemas import LiveTrackOut
from livetrack.services.fix_loader import load_fixes_csv
from livetrack.services.track_builder import make_live_track
from livetrack.services.track_ops import remove_before


LOG_LEVEL_ENV = "LIVETRACK_LOG_LEVEL"

logger = logging.getLogger(__name__)


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Encode tracker fixes into a live track")
    parser.add_argument(
        "input",
        help="Path to a CSV file of fixes"
    )
    parser.add_argument(
        "--indent", "-i",
        type=int,
        default=None,
        help="Indent the JSON output (default: compact)"
    )
    parser.add_argument(
        "--since", "-s",
        type=int,
        default=None,
        help="Drop points older than this epoch second"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=os.getenv(LOG_LEVEL_ENV, "INFO").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        fixes = load_fixes_csv(Path(args.input))
        track = make_live_track(fixes)
    except (ValueError, FileNotFoundError) as e:
        logger.error(f"Failed to encode fixes from {args.input}: {e}")
        return 1

    if args.since is not None:
        track = remove_before(track, args.since)

    out = LiveTrackOut.from_track(track)
    print(out.model_dump_json(by_alias=True, exclude_none=True, indent=args.indent))
    return 0


if __name__ == "__main__":
    sys.exit(main())
