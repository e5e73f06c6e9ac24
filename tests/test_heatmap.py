"""Tests for the three heatmap render modes."""

from __future__ import annotations

import matplotlib.pyplot as plt
import pytest

from tzheatmap.evaluation.buckets import count_by_country, count_global
from tzheatmap.evaluation.heatmap import (plot_facets_shared, plot_grid_independent, plot_heatmap,
                                         save_figure)
from tzheatmap.evaluation.ranking import rank_countries
from tzheatmap.models import HOURS, WEEKDAYS, Event, ResolvedEvent

RESOLVED = (
    [ResolvedEvent("US", "Monday", "08")] * 40
    + [ResolvedEvent("US", "Friday", "17")] * 10
    + [ResolvedEvent("CN", "Tuesday", "03")] * 6
    + [ResolvedEvent("RU", "Sunday", "22")] * 2
)


@pytest.fixture
def ranks():
    return rank_countries([Event("2016-01-04 00:00:00", r.source_country, "UTC") for r in RESOLVED])


@pytest.fixture
def country_table(ranks):
    return count_by_country(RESOLVED, countries=[r.code for r in ranks])


def _heatmap_axes(fig):
    return [ax for ax in fig.axes if ax.collections and ax.get_yticklabels()
            and ax.get_yticklabels()[0].get_text() == "Monday"]


def test_single_heatmap_axes():
    fig = plot_heatmap(count_global(RESOLVED))
    (ax,) = _heatmap_axes(fig)
    assert [t.get_text() for t in ax.get_xticklabels()] == list(HOURS)
    assert [t.get_text() for t in ax.get_yticklabels()] == list(WEEKDAYS)
    assert ax.get_aspect() in (1.0, "equal")
    mesh = ax.collections[0]
    assert mesh.norm.vmin == 0
    assert mesh.norm.vmax == 40
    plt.close(fig)


def test_shared_scale_facets(country_table, ranks):
    fig = plot_facets_shared(country_table, ranks, ncols=2)
    axes = _heatmap_axes(fig)
    assert [ax.get_title(loc="left") for ax in axes] == [
        "United States (US)", "China (CN)", "Russia (RU)"]
    norms = {(ax.collections[0].norm.vmin, ax.collections[0].norm.vmax) for ax in axes}
    assert norms == {(0.0, 40.0)}
    # 2 x 2 grid, one spare panel hidden
    assert sum(1 for ax in fig.axes if not ax.axison) == 1
    plt.close(fig)


def test_independent_scales(country_table, ranks):
    fig = plot_grid_independent(country_table, ranks, ncols=2)
    axes = _heatmap_axes(fig)
    assert [ax.collections[0].norm.vmax for ax in axes] == [40.0, 6.0, 2.0]
    assert all(ax.collections[0].norm.vmin == 0.0 for ax in axes)
    plt.close(fig)


def test_no_countries_selected(country_table):
    with pytest.raises(ValueError):
        plot_facets_shared(country_table, [])


def test_all_zero_heatmap_still_renders():
    fig = plot_heatmap(count_global([]))
    (ax,) = _heatmap_axes(fig)
    assert ax.collections[0].norm.vmax > ax.collections[0].norm.vmin
    plt.close(fig)


def test_save_figure_writes_each_format(tmp_path):
    fig = plot_heatmap(count_global(RESOLVED))
    written = save_figure(fig, tmp_path / "out", "overall", formats=["svg", "png"])
    assert [p.name for p in written] == ["overall.svg", "overall.png"]
    assert all(p.stat().st_size > 0 for p in written)
    assert not plt.fignum_exists(fig.number)
