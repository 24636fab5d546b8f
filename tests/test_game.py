import threading

import numpy as np

from morris.ai import DifficultyProfile, HeuristicWeights, get_profile
from morris.ai import search as search_module
from morris.core import EventKind, MillGame, Phase, Player, RuleError, legal_moves

from tests.test_rules import custom_state


def test_click_places_and_reports_queries() -> None:
    game = MillGame()
    result = game.click(4)

    assert result.ok
    assert game.board[4] == Player.ONE
    assert game.current_player == Player.TWO
    assert game.pieces_remaining == (8, 9)
    assert game.pieces_on_board == (1, 0)
    assert game.phase == Phase.PLACEMENT
    assert not game.awaiting_capture
    assert game.removable_positions == frozenset()

    rejected = game.click(4)
    assert rejected.error == RuleError.OCCUPIED_POSITION
    assert game.current_player == Player.TWO


def test_queries_are_idempotent_and_detached() -> None:
    game = MillGame()
    game.click(0)
    first = game.state
    first.board[:] = 2
    assert game.board == game.board
    assert game.board[0] == Player.ONE
    assert game.state.key() == game.state.key()


def test_click_selects_deselects_and_moves() -> None:
    game = MillGame(custom_state([0, 1, 14, 18, 21], [3, 4, 5, 23]))

    assert game.click(14).ok
    assert game.selected == 14
    assert game.click(14).ok
    assert game.selected is None

    game.click(18)
    assert game.selected == 18
    game.click(14)
    assert game.selected == 14

    result = game.click(2)
    assert result.ok
    assert game.awaiting_capture
    assert game.removable_positions == frozenset({23})

    assert game.click(4).error == RuleError.PROTECTED_PIECE
    assert game.click(23).ok
    assert game.current_player == Player.TWO


def test_listeners_receive_events() -> None:
    received = []
    game = MillGame()
    game.add_listener(received.append)
    for position in (0, 23, 1, 12, 2):
        game.click(position)
    game.capture(12)

    kinds = [event.kind for event in received]
    assert kinds == [EventKind.MILL_FORMED, EventKind.PIECE_CAPTURED]
    assert received[0].player == Player.ONE
    assert received[1].position == 12

    game.remove_listener(received.append)
    game.reset()
    assert game.board == (0,) * 24
    assert game.current_player == Player.ONE


def test_ai_move_plays_a_legal_compound_move() -> None:
    game = MillGame()
    game.click(0)

    result = game.ai_move(get_profile("hard"))

    assert result.ok
    assert game.current_player == Player.ONE
    assert game.pieces_on_board == (1, 1)
    assert game.last_search is not None
    assert game.last_search.player == Player.TWO


def test_ai_move_completes_a_capture() -> None:
    game = MillGame(custom_state([5, 13, 23], [0, 1], remaining=(0, 1), current=Player.TWO))
    received = []
    game.add_listener(received.append)

    game.ai_move(DifficultyProfile("probe", depth=1), rng=np.random.default_rng(0))

    assert game.game_over
    assert game.winner == Player.TWO
    assert [event.kind for event in received] == [
        EventKind.MILL_FORMED,
        EventKind.PIECE_CAPTURED,
        EventKind.GAME_OVER,
    ]


def test_commands_are_serialised_across_threads() -> None:
    game = MillGame()
    errors = []

    def worker() -> None:
        for _ in range(5):
            moves = legal_moves(game.state)
            if not moves:
                return
            result = game.click(moves[0].position)
            if not result.ok:
                errors.append(result.error)

    threads = [threading.Thread(target=worker) for _ in range(3)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    state = game.state
    assert int(np.count_nonzero(state.board)) == state.on_board(Player.ONE) + state.on_board(Player.TWO)
    assert all(error == RuleError.OCCUPIED_POSITION for error in errors)


def test_ai_move_on_finished_game_reports_error() -> None:
    state = custom_state([0, 1, 2], [9, 21])
    state.game_over = True
    state.winner = Player.ONE
    game = MillGame(state)
    before = game.state.key()

    result = game.ai_move(DifficultyProfile("shallow", depth=1))

    assert result.error == RuleError.GAME_ALREADY_OVER
    assert result.events == ()
    assert game.state.key() == before
    assert game.last_search is None


def test_ai_move_passes_weights_to_search(monkeypatch) -> None:
    seen = []

    class RecordingSearch(search_module.AlphaBetaSearch):
        def __init__(self, profile, *, weights=None, rng=None):
            seen.append(weights)
            super().__init__(profile, weights=weights, rng=rng)

    monkeypatch.setattr(search_module, "AlphaBetaSearch", RecordingSearch)
    weights = HeuristicWeights(material=1, mills=0, position=0, mobility=0)
    game = MillGame()

    assert game.ai_move(DifficultyProfile("shallow", depth=1), weights=weights, rng=np.random.default_rng(0)).ok
    assert seen == [weights]
    assert game.current_player == Player.TWO


def test_queries_hold_the_lock() -> None:
    game = MillGame()
    acquired = threading.Event()
    release = threading.Event()
    answers = []

    def holder() -> None:
        with game._lock:
            acquired.set()
            release.wait(timeout=5)
            game._state.current_player = Player.TWO

    def reader() -> None:
        answers.append(game.current_player)

    owner = threading.Thread(target=holder)
    owner.start()
    acquired.wait(timeout=5)
    query = threading.Thread(target=reader)
    query.start()
    query.join(timeout=0.2)
    assert query.is_alive()
    release.set()
    owner.join()
    query.join()
    assert answers == [Player.TWO]
