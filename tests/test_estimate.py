# tests/test_estimate.py

import logging

import pytest

from thrill_digger import (
    ProgressReporter,
    SolverSettings,
    assess_workload,
    estimate_remaining_seconds,
    estimate_seconds,
    estimate_unknown_count,
)
from thrill_digger.solver import build_constraints, normalize_board


def test_estimated_unknowns_match_fixtures(board_fixture):
    count = estimate_unknown_count(
        board_fixture["board"], board_fixture["width"], board_fixture["height"]
    )
    assert count == board_fixture["estimated_unknowns"]


def test_estimate_counts_green_neighbors_the_solver_skips():
    grid = [[1, 0, 0], [0, 0, 0], [0, 0, 0]]
    _, searched = build_constraints(normalize_board(grid, 3, 3), 3, 3)

    assert estimate_unknown_count(grid, 3, 3) == 3
    assert searched == []


def test_estimate_ignores_hazard_markers():
    assert estimate_unknown_count([[0, -2, 0], [0, -10, 0]], 3, 2) == 0


def test_estimate_rejects_bad_grid():
    with pytest.raises(ValueError):
        estimate_unknown_count([[0, 0]], 3, 1)


@pytest.mark.parametrize(
    "count,seconds",
    [(0, 0), (20, 0), (21, 1), (25, 30), (26, 60), (30, 966)],
)
def test_estimate_seconds(count, seconds):
    assert estimate_seconds(count) == seconds


def test_light_workload():
    workload = assess_workload([[0, 0, 0], [0, 2, 0], [0, 0, 0]], 3, 3)

    assert workload.unknown_count == 8
    assert workload.combinations == 256
    assert workload.estimated_seconds == 0
    assert not workload.is_heavy
    assert not workload.requires_confirmation


def test_heavy_workload_with_custom_settings():
    settings = SolverSettings(
        heavy_computation_threshold=8,
        confirmation_required_seconds=100,
        combinations_per_second=2,
    )
    workload = assess_workload([[0, 0, 0], [0, 2, 0], [0, 0, 0]], 3, 3, settings)

    assert workload.is_heavy
    assert workload.estimated_seconds == 128
    assert workload.requires_confirmation


def test_heavy_threshold_is_inclusive_and_confirmation_strict():
    settings = SolverSettings(
        heavy_computation_threshold=9,
        confirmation_required_seconds=256,
        combinations_per_second=1,
    )
    workload = assess_workload([[0, 0, 0], [0, 2, 0], [0, 0, 0]], 3, 3, settings)

    assert not workload.is_heavy
    assert workload.estimated_seconds == 256
    assert not workload.requires_confirmation


@pytest.mark.parametrize(
    "processed,total,elapsed,eta",
    [
        (0, 100, 5.0, 0),
        (10, 100, 0.0, 0),
        (50, 100, 10.0, 10),
        (99, 100, 100.0, 2),
        (100, 100, 3.0, 1),
    ],
)
def test_estimate_remaining_seconds(processed, total, elapsed, eta):
    assert estimate_remaining_seconds(processed, total, elapsed) == eta


def test_progress_reporter_tracks_latest_call():
    reporter = ProgressReporter(interval_seconds=1000.0)
    assert reporter.fraction == 0.0

    reporter(25, 100)

    assert (reporter.processed, reporter.total) == (25, 100)
    assert reporter.fraction == 0.25
    assert reporter.elapsed_seconds >= 0.0


def test_progress_reporter_throttles_but_reports_completion(caplog):
    reporter = ProgressReporter(interval_seconds=1000.0)

    with caplog.at_level(logging.INFO, logger="thrill_digger.estimate"):
        reporter(10, 100)
        reporter(50, 100)
        reporter(100, 100)

    messages = [r.getMessage() for r in caplog.records if r.name == "thrill_digger.estimate"]
    assert len(messages) == 1
    assert "100/100" in messages[0]


def test_progress_reporter_plugs_into_solve():
    from thrill_digger import solve

    reporter = ProgressReporter(interval_seconds=0.0)
    solve([[0, 0, 0], [0, 2, 0], [0, 0, 0]], 3, 3, 2, 0, progress=reporter)

    assert reporter.processed == reporter.total == 256
    assert reporter.fraction == 1.0
