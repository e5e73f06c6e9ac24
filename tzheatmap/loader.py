"""Event loader: delimited file -> list of Event, in file order."""

from pathlib import Path
from typing import List

import pandas as pd

from .config import CSV_SEP, REQUIRED_COLUMNS, log
from .errors import MalformedRowError
from .models import Event


def read_event_table(path, sep: str = CSV_SEP) -> pd.DataFrame:
    """Read the raw table as strings. Columns may come in any order; extras are ignored."""
    path = Path(path)
    log(f"[load] reading {path} ...")
    try:
        # header=None: the header row fixes the field count, so a wider row is a
        # tokenizer error instead of being taken as an index column
        raw = pd.read_csv(path, sep=sep, engine="c", dtype=str, encoding="utf-8",
                          header=None, index_col=False, keep_default_na=False,
                          skip_blank_lines=False, low_memory=False)
    except pd.errors.EmptyDataError as e:
        raise MalformedRowError(f"{path}: no header row") from e
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise MalformedRowError(f"{path}: {e}") from e

    # row i of `raw` is file line i + 1
    df = raw.iloc[1:].fillna("").astype(str)
    df.columns = [str(c).strip() for c in raw.iloc[0].fillna("")]
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise MalformedRowError(f"Missing columns {missing}. Columns: {list(df.columns)}")

    for c in df.columns:
        df[c] = df[c].str.strip()

    n0 = len(df)
    df = df[df.ne("").any(axis=1)]
    if len(df) != n0:
        log(f"[load]   dropped blank lines: {n0 - len(df)}")

    df = df[REQUIRED_COLUMNS].copy()
    for c in REQUIRED_COLUMNS:
        blank = df[c].eq("")
        if blank.any():
            line = int(df.index[blank.to_numpy()][0]) + 1
            raise MalformedRowError(f"{path}: line {line} has no value for '{c}'")

    log(f"[load]   shape={df.shape}")
    return df.reset_index(drop=True)


def load_events(path, sep: str = CSV_SEP) -> List[Event]:
    df = read_event_table(path, sep=sep)
    ts, cc, tz = REQUIRED_COLUMNS
    return [
        Event(timestamp=t, source_country=c.upper(), tz=z)
        for t, c, z in zip(df[ts].tolist(), df[cc].tolist(), df[tz].tolist())
    ]
