import numpy as np
import pytest

from pressure.core import (
    Color,
    ConfigError,
    Direction,
    EventBus,
    GameSnapshot,
    Grid,
    MoveEngine,
    SimpleMove,
    Token,
    capture_winner,
    generate_moves,
    initialize_snapshot,
)
from pressure.core.events import AI_PROGRESS, MOVE_EXECUTED, TOKEN_CAPTURED
from pressure.search import (
    WIN_SCORE,
    RootEvaluation,
    SearchConfig,
    SearchEngine,
    evaluate_position,
    search_depth,
    terminal_score,
)
from pressure.search.heuristics import POSITIONAL_LIMIT


def snapshot_with(tokens, current=Color.WHITE) -> GameSnapshot:
    grid = Grid()
    for position, token in tokens.items():
        grid.set_token_at(position, token)
    return GameSnapshot(grid=grid, current_player=current)


def test_search_depth_follows_level_and_throttles_wide_positions():
    assert search_depth(0, 3) == 1
    assert search_depth(5, 5) == 5
    assert search_depth(9, 12) == 6
    assert search_depth(9, 20) == 4
    assert search_depth(3, 20) == 3
    assert search_depth(9, 5, max_depth=2) == 2


def test_invalid_search_config_rejected():
    with pytest.raises(ConfigError):
        SearchConfig(level=10)
    with pytest.raises(ConfigError):
        SearchConfig(tie_break="best")


def test_single_legal_move_is_returned_without_search():
    tokens = {(0, 0): Token(Color.WHITE)}
    for col in range(1, 5):
        tokens[(0, col)] = Token(Color.BLACK)
    snapshot = snapshot_with(tokens)
    searcher = SearchEngine(MoveEngine(), SearchConfig(level=0))

    result = searcher.search(snapshot)

    assert result.move == SimpleMove((0, 0), (1, 0), Direction.DOWN)
    assert result.nodes == 0


def test_no_legal_move_returns_none():
    snapshot = snapshot_with({(2, 2): Token(Color.WHITE, is_active=False)})
    result = SearchEngine(MoveEngine()).search(snapshot)
    assert result.move is None
    assert not result.cancelled


def test_search_finds_immediate_win():
    snapshot = snapshot_with(
        {
            (0, 0): Token(Color.BLACK),
            (1, 0): Token(Color.WHITE),
            (1, 1): Token(Color.WHITE),
            (4, 4): Token(Color.WHITE),
        }
    )
    searcher = SearchEngine(MoveEngine(), SearchConfig(level=2))

    result = searcher.search(snapshot)

    assert result.move == SimpleMove((1, 1), (0, 1), Direction.UP)
    assert result.score > WIN_SCORE
    assert result.depth == 2


def test_suicidal_moves_are_filtered():
    snapshot = snapshot_with(
        {
            (0, 0): Token(Color.WHITE),
            (1, 0): Token(Color.BLACK),
            (1, 1): Token(Color.WHITE),
            (4, 4): Token(Color.BLACK),
        }
    )
    suicidal = SimpleMove((1, 1), (0, 1), Direction.UP)
    assert suicidal in generate_moves(snapshot.grid, Color.WHITE)

    candidates = SearchEngine(MoveEngine(), SearchConfig(level=1)).candidate_moves(snapshot.grid, Color.WHITE)
    unfiltered = SearchEngine(MoveEngine(), SearchConfig(level=0)).candidate_moves(snapshot.grid, Color.WHITE)

    assert suicidal not in candidates
    assert suicidal in unfiltered


def test_search_leaves_live_snapshot_and_real_listeners_untouched():
    snapshot = initialize_snapshot()
    before = snapshot.copy()
    bus = EventBus()
    real = []
    simulated = []
    progress = []
    for name in (MOVE_EXECUTED, TOKEN_CAPTURED):
        bus.on_real(name, real.append)
        bus.on_simulation(name, simulated.append)
    bus.on_real(AI_PROGRESS, progress.append)
    searcher = SearchEngine(MoveEngine(bus), SearchConfig(level=2))

    result = searcher.search(snapshot)

    assert result.move in generate_moves(snapshot.grid, Color.WHITE)
    assert snapshot.grid == before.grid
    assert snapshot.current_player is before.current_player
    assert real == []
    assert simulated
    assert progress[0]["message"] == "AI is thinking..."
    assert progress[-1]["message"] == "AI move selected"
    assert any(event.get("percent") == 100 for event in progress)


def test_task_steps_one_root_move_at_a_time_and_cancels():
    snapshot = initialize_snapshot()
    searcher = SearchEngine(MoveEngine(), SearchConfig(level=1))
    task = searcher.start(snapshot)

    assert task.step()  # prepares candidates
    assert task.step()  # first root move
    assert 0.0 < task.progress < 1.0
    task.cancel()
    assert not task.step()

    result = task.result
    assert result.cancelled
    assert result.move is None
    assert len(result.evaluations) == 1


def test_tie_break_first_and_seeded_random():
    a = RootEvaluation(move=SimpleMove((4, 2), (4, 1), Direction.LEFT), score=0.5)
    b = RootEvaluation(move=SimpleMove((4, 3), (4, 4), Direction.RIGHT), score=0.5)
    c = RootEvaluation(move=SimpleMove((3, 2), (3, 1), Direction.LEFT), score=0.1)

    first = SearchEngine(MoveEngine(), SearchConfig(tie_break="first"))
    assert first.select([a, b, c]) is a

    rng = np.random.default_rng(0)
    randomised = SearchEngine(MoveEngine(), SearchConfig(tie_break="random"), rng=rng)
    picks = {randomised.select([a, b, c]).move for _ in range(50)}
    assert picks == {a.move, b.move}


def test_initial_position_is_balanced():
    snapshot = initialize_snapshot()
    assert evaluate_position(snapshot.grid, Color.WHITE) == pytest.approx(0.0)
    assert evaluate_position(snapshot.grid, Color.BLACK) == pytest.approx(0.0)
    assert terminal_score(snapshot.grid, Color.WHITE) is None


def test_capture_advantage_scores_positive_and_bounded():
    snapshot = initialize_snapshot()
    snapshot.grid.mark_captured((0, 1))
    score = evaluate_position(snapshot.grid, Color.WHITE)
    assert 0.0 < score < 1.0
    assert evaluate_position(snapshot.grid, Color.BLACK) < 0.0


def test_double_wipeout_goes_to_the_mover_in_search_and_game_alike():
    grid = Grid()
    grid.set_token_at((0, 0), Token(Color.WHITE))
    grid.set_token_at((4, 4), Token(Color.BLACK))
    grid.mark_captured((0, 0))
    grid.mark_captured((4, 4))

    assert capture_winner(grid, Color.WHITE) is Color.WHITE
    assert capture_winner(grid, Color.BLACK) is Color.BLACK
    assert terminal_score(grid, Color.WHITE, Color.WHITE) == WIN_SCORE
    assert terminal_score(grid, Color.BLACK, Color.WHITE) == -WIN_SCORE
    assert terminal_score(grid, Color.WHITE, Color.BLACK) == -WIN_SCORE


def test_side_without_moves_is_scored_positionally():
    grid = Grid()
    grid.set_token_at((2, 2), Token(Color.WHITE, is_active=False))
    grid.set_token_at((4, 4), Token(Color.BLACK))
    assert generate_moves(grid, Color.WHITE) == []

    score = evaluate_position(grid, Color.WHITE)

    assert score == pytest.approx(-0.05)
    assert score > -POSITIONAL_LIMIT
    assert evaluate_position(grid, Color.BLACK) == pytest.approx(0.05)
