from pressure.core import (
    REAL,
    SIMULATION,
    Color,
    EventBus,
    Grid,
    Token,
    check_and_transform,
    count_blocked_sides,
    initialize_grid,
)
from pressure.core.capture import CapturedToken, blocked_side_counts
from pressure.core.events import TOKEN_CAPTURE_NOTIFIED, TOKEN_CAPTURED


def fresh_grid() -> Grid:
    return Grid()


def test_token_against_edge_needs_remaining_sides_filled():
    grid = fresh_grid()
    grid.set_token_at((0, 1), Token(Color.BLACK))
    grid.set_token_at((0, 0), Token(Color.WHITE))
    grid.set_token_at((1, 1), Token(Color.WHITE))

    assert check_and_transform(grid) == []
    assert not grid.get_token_at((0, 1)).is_captured

    grid.set_token_at((0, 2), Token(Color.WHITE))
    captured = check_and_transform(grid)

    assert captured == [CapturedToken(position=(0, 1), color=Color.BLACK)]
    token = grid.get_token_at((0, 1))
    assert token.is_captured
    assert not token.is_active


def test_capture_is_idempotent():
    grid = fresh_grid()
    grid.set_token_at((0, 0), Token(Color.BLACK))
    grid.set_token_at((0, 1), Token(Color.WHITE))
    grid.set_token_at((1, 0), Token(Color.WHITE))

    assert len(check_and_transform(grid)) == 1
    assert check_and_transform(grid) == []


def test_inactive_and_same_colour_neighbours_block():
    grid = fresh_grid()
    grid.set_token_at((4, 4), Token(Color.WHITE, is_active=False))
    grid.set_token_at((3, 4), Token(Color.WHITE))
    grid.set_token_at((4, 3), Token(Color.BLACK, is_active=False, is_captured=True))

    captured = check_and_transform(grid)

    assert captured == [CapturedToken(position=(4, 4), color=Color.WHITE)]


def test_capture_events_carry_context_tags():
    grid = fresh_grid()
    grid.set_token_at((0, 0), Token(Color.BLACK))
    grid.set_token_at((0, 1), Token(Color.WHITE))
    grid.set_token_at((1, 0), Token(Color.WHITE))
    bus = EventBus()
    seen = []
    real_only = []
    bus.on(TOKEN_CAPTURED, seen.append)
    bus.on(TOKEN_CAPTURE_NOTIFIED, seen.append)
    bus.on_real(TOKEN_CAPTURED, real_only.append)

    check_and_transform(grid, SIMULATION, bus)

    assert [event.name for event in seen] == [TOKEN_CAPTURED, TOKEN_CAPTURE_NOTIFIED]
    assert seen[0]["forAISimulation"] is True
    assert seen[0]["position"] == (0, 0)
    assert real_only == []


def test_real_capture_reaches_real_listeners():
    grid = fresh_grid()
    grid.set_token_at((0, 0), Token(Color.BLACK))
    grid.set_token_at((0, 1), Token(Color.WHITE))
    grid.set_token_at((1, 0), Token(Color.WHITE))
    bus = EventBus()
    real_only = []
    bus.on_real(TOKEN_CAPTURED, real_only.append)

    check_and_transform(grid, REAL, bus)

    assert len(real_only) == 1
    assert real_only[0]["color"] is Color.BLACK
    assert real_only[0]["isActualAIMove"] is False


def test_blocked_side_counts_match_scalar_helper():
    grid = initialize_grid()
    counts = blocked_side_counts(grid)
    for r in range(grid.size):
        for c in range(grid.size):
            assert counts[r, c] == count_blocked_sides(grid, (r, c))
    assert count_blocked_sides(grid, (0, 0)) == 4
    assert count_blocked_sides(grid, (4, 0)) == 2
