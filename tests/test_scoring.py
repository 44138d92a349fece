import pytest

from scenario_sim.core.exceptions import InsufficientData
from scenario_sim.services.scoring import final_score, progress_percent, running_score


def test_final_score_example_run():
    assert final_score([80, 60, 100, 40, 70]) == 70


@pytest.mark.parametrize(
    "scores, expected",
    [
        ([70, 71], 71),  # 70.5 rounds up
        ([0, 1], 1),  # 0.5 rounds up
        ([33, 33, 34], 33),  # 33.33...
        ([66, 67, 67], 67),  # 66.67
        ([100], 100),
        ([0, 0, 0], 0),
    ],
)
def test_final_score_rounds_half_up(scores, expected):
    assert final_score(scores) == expected


def test_final_score_is_order_independent():
    assert final_score([40, 100, 60]) == final_score([100, 60, 40])


def test_running_score_is_unrounded_mean():
    assert running_score([80, 60]) == 70.0
    assert running_score([70, 71]) == pytest.approx(70.5)
    assert running_score([33, 33, 34]) == pytest.approx(33.333, rel=1e-3)


@pytest.mark.parametrize("aggregate", [final_score, running_score])
def test_empty_scores_are_insufficient(aggregate):
    with pytest.raises(InsufficientData):
        aggregate([])


@pytest.mark.parametrize("bad", [[-1], [101], [50, 250]])
def test_out_of_range_scores_rejected(bad):
    with pytest.raises(ValueError):
        final_score(bad)


@pytest.mark.parametrize(
    "current_step, total_steps, expected",
    [(1, 5, 0.0), (3, 5, 40.0), (6, 5, 100.0), (2, 3, 33.3), (1, 0, 0.0)],
)
def test_progress_percent(current_step, total_steps, expected):
    assert progress_percent(current_step, total_steps) == expected
