from pressure.core import GameResult
from pressure.evaluation import evaluate_levels


def test_evaluate_greedy_levels_small():
    outcomes = []
    result = evaluate_levels(
        0,
        1,
        episodes=2,
        max_ply=12,
        seed=0,
        progress=lambda episode, outcome: outcomes.append(outcome),
    )

    assert result.games_played == 2
    assert result.white_wins + result.black_wins + result.draws == 2
    assert result.average_length > 0
    assert len(outcomes) == 2
    assert all(isinstance(outcome, GameResult) for outcome in outcomes)
    assert 0.0 <= result.winrate_white() <= 1.0
