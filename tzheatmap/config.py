# -*- coding: utf-8 -*-

"""
Settings (env)

  export EVENTS_CSV=events.csv
  export OUTDIR=out_heatmap
  export TZ_POLICY=skip            # skip | fail
  export REFERENCE_TZ=             # e.g. UTC; empty = timestamps are local wall time
  export FACET_RANKS=3-12 GRID_RANKS=1-16 GRID_NCOLS=2
  export OUTPUT_FORMATS=svg,png
  export VERBOSE=1 TQDM_DISABLE=0
"""

import os, sys, time
from pathlib import Path

# input
EVENTS_CSV   = Path(os.environ.get("EVENTS_CSV", "events.csv"))
CSV_SEP      = os.environ.get("CSV_SEP", ",")

# input columns
TS_COL       = "timestamp"
COUNTRY_COL  = "source_country"
TZ_COL       = "tz"
REQUIRED_COLUMNS = [TS_COL, COUNTRY_COL, TZ_COL]

TS_FORMAT    = "%Y-%m-%d %H:%M:%S"

# time zone handling
TZ_POLICY    = os.environ.get("TZ_POLICY", "skip").strip().lower()
REFERENCE_TZ = os.environ.get("REFERENCE_TZ", "").strip() or None

# country selection
FACET_RANKS  = os.environ.get("FACET_RANKS", "3-12")
GRID_RANKS   = os.environ.get("GRID_RANKS", "1-16")
GRID_NCOLS   = int(os.environ.get("GRID_NCOLS", "2"))

# output
OUTDIR         = Path(os.environ.get("OUTDIR", "out_heatmap"))
OUTPUT_FORMATS = [f.strip().lower() for f in os.environ.get("OUTPUT_FORMATS", "svg,png").split(",") if f.strip()]
CMAP           = os.environ.get("CMAP", "viridis")

# progress display and logging
VERBOSE      = int(os.environ.get("VERBOSE", "1"))
TQDM_DISABLE = bool(int(os.environ.get("TQDM_DISABLE", "0")))


def log(msg: str):
    if VERBOSE:
        print(f"[{time.strftime('%H:%M:%S')}] {msg}", flush=True)


def tqdm_disabled() -> bool:
    return TQDM_DISABLE or (not sys.stdout.isatty())


def parse_rank_range(spec: str):
    """Parse "3-12" (or a single "5") into an inclusive (first, last) rank pair."""
    text = str(spec).strip()
    first, sep, last = text.partition("-")
    try:
        lo = int(first)
        hi = int(last) if sep else lo
    except ValueError:
        raise ValueError(f"Rank range must look like 'FIRST-LAST', got {spec!r}")
    if lo < 1 or hi < lo:
        raise ValueError(f"Invalid rank range {spec!r}: need 1 <= first <= last")
    return lo, hi
