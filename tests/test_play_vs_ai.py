import json
from pathlib import Path

from pressure import Game

from scripts.play_vs_ai import history_log, replay_logged_game


def create_sample_log(path: Path) -> Game:
    game = Game()
    game.start()
    game.play_move(game.legal_moves()[0])
    game.play_move(game.legal_moves()[-1])
    log = {"metadata": {"board_size": 5}, "moves": history_log(game)}
    path.write_text(json.dumps(log))
    return game


def test_history_log_records_committed_moves():
    game = Game()
    game.start()
    move = game.legal_moves()[0]
    game.play_move(move)

    records = history_log(game)

    assert records == [
        {
            "move_index": 0,
            "actor": "human",
            "player": "white",
            "action_index": records[0]["action_index"],
            **move.as_dict(),
        }
    ]


def test_replay_logged_game(tmp_path):
    log_path = tmp_path / "game.json"
    game = create_sample_log(log_path)

    summary = replay_logged_game(log_path, verbose=False)

    assert summary["moves"] == 2
    assert summary["result"] == "ongoing"
    assert summary["board"] == game.snapshot.grid.colors.tolist()
