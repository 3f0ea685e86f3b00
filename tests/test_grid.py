import numpy as np
import pytest

from pressure.core import Color, Grid, Token, initialize_grid
from pressure.core.rules import INITIAL_BLACK_POSITIONS, initial_white_positions


def test_initial_grid_places_six_tokens_each():
    grid = initialize_grid()

    assert grid.count_tokens(Color.WHITE) == 6
    assert grid.count_tokens(Color.BLACK) == 6
    for position in INITIAL_BLACK_POSITIONS:
        assert grid.get_token_at(position) == Token(Color.BLACK)
    assert set(initial_white_positions()) == {(4, 2), (3, 2), (4, 3), (2, 3), (3, 4), (2, 4)}
    assert grid.count_captured() == {Color.WHITE: 0, Color.BLACK: 0}


def test_out_of_bounds_reads_return_none_and_writes_are_ignored():
    grid = Grid()
    assert grid.get_token_at((-1, 0)) is None
    assert grid.get_token_at((0, 5)) is None

    grid.set_token_at((5, 5), Token(Color.WHITE))
    assert grid == Grid()
    assert not grid.is_within_bounds((5, 0))


def test_move_token_relocates_and_clears_source():
    grid = Grid()
    grid.set_token_at((1, 1), Token(Color.WHITE, is_active=False))
    grid.move_token((1, 1), (1, 2))

    assert grid.get_token_at((1, 1)) is None
    assert grid.get_token_at((1, 2)) == Token(Color.WHITE, is_active=False)


def test_move_token_from_empty_cell_raises():
    grid = Grid()
    with pytest.raises(ValueError):
        grid.move_token((0, 0), (0, 1))


def test_clone_is_independent():
    grid = initialize_grid()
    clone = grid.clone()
    clone.move_token((2, 0), (3, 0))
    clone.mark_captured((1, 0))

    assert grid.get_token_at((2, 0)) == Token(Color.BLACK)
    assert grid.get_token_at((3, 0)) is None
    assert not grid.captured.any()
    assert clone != grid


def test_captured_token_cannot_be_active():
    with pytest.raises(ValueError):
        Token(Color.BLACK, is_active=True, is_captured=True)


def test_reset_active_status_skips_captured_and_other_colour():
    grid = Grid()
    grid.set_token_at((0, 0), Token(Color.WHITE, is_active=False))
    grid.set_token_at((0, 2), Token(Color.WHITE, is_active=False, is_captured=True))
    grid.set_token_at((4, 4), Token(Color.BLACK, is_active=False))

    grid.reset_active_status(Color.WHITE)

    assert grid.get_token_at((0, 0)).is_active
    assert not grid.get_token_at((0, 2)).is_active
    assert not grid.get_token_at((4, 4)).is_active


def test_neighbours_mark_edges_with_none():
    grid = Grid()
    assert grid.neighbours((0, 0)) == [None, (1, 0), None, (0, 1)]
    assert grid.neighbours((2, 2)) == [(1, 2), (3, 2), (2, 1), (2, 3)]


def test_positions_are_row_major():
    grid = initialize_grid()
    black = list(grid.positions(Color.BLACK))
    assert black == sorted(INITIAL_BLACK_POSITIONS)
    assert len(list(grid.positions())) == 12


def test_render_and_rows():
    grid = Grid()
    grid.set_token_at((0, 0), Token(Color.WHITE))
    grid.set_token_at((0, 1), Token(Color.BLACK, is_active=False))
    grid.set_token_at((0, 2), Token(Color.BLACK, is_active=False, is_captured=True))

    assert grid.render().splitlines()[0] == "Wbx.."
    rows = grid.to_rows()
    assert rows[0][1] == {"color": "black", "isActive": False, "isCaptured": False}
    assert rows[1][1] is None


def test_all_captured_requires_tokens_on_board():
    grid = Grid()
    assert not grid.all_captured(Color.BLACK)
    grid.set_token_at((0, 0), Token(Color.BLACK, is_active=False, is_captured=True))
    assert grid.all_captured(Color.BLACK)
    assert np.count_nonzero(grid.captured) == 1
