"""End-to-end tests for the heatmap report."""

from __future__ import annotations

import pandas as pd
import pytest

from tzheatmap.config import parse_rank_range
from tzheatmap.errors import UnknownTimeZoneError
from tzheatmap.pipeline import build_report, run


def test_three_row_scenario(scenario_csv):
    report = build_report(scenario_csv, tz_policy="skip", reference_tz=None)

    table = report.global_table
    assert len(table) == 168
    nonzero = table[table["count"] > 0]
    got = {(str(w), str(h)): int(c) for w, h, c in nonzero.itertuples(index=False)}
    assert got == {("Monday", "08"): 2, ("Tuesday", "20"): 1}

    assert [(r.code, r.rank, r.percent_label) for r in report.ranks] == [
        ("US", 1, "66.7%"), ("CN", 2, "33.3%")]
    assert len(report.country_table) == 2 * 168


def test_report_is_idempotent(scenario_csv):
    a = build_report(scenario_csv, tz_policy="skip", reference_tz=None)
    b = build_report(scenario_csv, tz_policy="skip", reference_tz=None)
    pd.testing.assert_frame_equal(a.global_table, b.global_table)
    pd.testing.assert_frame_equal(a.country_table, b.country_table)
    assert a.ranks == b.ranks


def test_densified_sums_match_raw_counts(write_csv):
    rows = ([("2016-01-04 08:00:00", "US", "America/Chicago")] * 5
            + [("2016-01-09 13:00:00", "BR", "America/Sao_Paulo")] * 3
            + [("2016-01-06 01:00:00", "RU", "Europe/Moscow")])
    report = build_report(write_csv(rows), tz_policy="skip", reference_tz=None)
    sums = report.country_table.groupby("country", observed=True)["count"].sum().to_dict()
    assert sums == {r.code: r.event_count for r in report.ranks}
    assert len(report.country_table) == 3 * 7 * 24


def test_unknown_zone_skip_vs_fail(write_csv):
    path = write_csv([
        ("2016-01-04 08:00:00", "US", "UTC"),
        ("2016-01-04 08:00:00", "CN", "Asia/Nowhere"),
    ])
    report = build_report(path, tz_policy="skip", reference_tz=None)
    assert report.resolution.n_skipped == 1
    assert report.global_table["count"].sum() == 1
    # ranking still counts every loaded row
    assert [r.event_count for r in report.ranks] == [1, 1]

    with pytest.raises(UnknownTimeZoneError):
        build_report(path, tz_policy="fail", reference_tz=None)


def test_header_only_file_is_rejected(write_csv):
    with pytest.raises(ValueError):
        build_report(write_csv([]), tz_policy="skip", reference_tz=None)


def test_run_writes_tables_and_charts(scenario_csv, tmp_path):
    outdir = tmp_path / "out"
    report = run(scenario_csv, outdir, tz_policy="skip", reference_tz=None,
                 facet_ranks="1-2", grid_ranks="1-16", ncols=2, formats=["png"])
    names = sorted(p.name for p in report.written)
    assert names == sorted([
        "global_buckets.csv", "country_buckets.csv", "country_ranks.csv",
        "heatmap_overall.png", "heatmap_countries_shared.png",
        "heatmap_countries_independent.png",
    ])
    assert all(p.exists() for p in report.written)
    ranks = pd.read_csv(outdir / "country_ranks.csv")
    assert list(ranks["code"]) == ["US", "CN"]


def test_run_skips_empty_facet_selection(scenario_csv, tmp_path):
    report = run(scenario_csv, tmp_path, tz_policy="skip", reference_tz=None,
                 facet_ranks="3-12", grid_ranks="1-16", formats=["svg"])
    names = {p.name for p in report.written}
    assert "heatmap_countries_shared.svg" not in names
    assert "heatmap_countries_independent.svg" in names


def test_parse_rank_range():
    assert parse_rank_range("3-12") == (3, 12)
    assert parse_rank_range(" 5 ") == (5, 5)
    for bad in ("0-3", "5-2", "top10", ""):
        with pytest.raises(ValueError):
            parse_rank_range(bad)
