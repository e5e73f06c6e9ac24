from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import pytest


def _write_csv(path, header, rows):
    lines = [",".join(header)] + [",".join(r) for r in rows]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def write_csv(tmp_path):
    """write_csv(rows, header=..., name=...) -> Path of a CSV under tmp_path."""

    def _write(rows, header=("timestamp", "source_country", "tz"), name="events.csv"):
        return _write_csv(tmp_path / name, header, rows)

    return _write


@pytest.fixture
def scenario_csv(write_csv):
    return write_csv([
        ("2016-01-04 08:00:00", "US", "UTC"),
        ("2016-01-04 08:00:00", "US", "UTC"),
        ("2016-01-05 20:00:00", "CN", "UTC"),
    ])
