#!/usr/bin/env python3
"""Play Nine Men's Morris against the AI via the console, with optional logging & replay."""

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np

from morris import MillGame
from morris.ai import DEFAULT_PROFILES, Difficulty, get_profile, load_profiles, load_weights
from morris.core import (
    Capture,
    EventKind,
    GameEvent,
    Move,
    MoveTo,
    Place,
    Player,
    SkipCapture,
    apply_move,
    decode_action,
    encode_action,
    initialize_game_state,
    legal_moves,
)

MILL_POINTS = 3
CAPTURE_POINTS = 5
WIN_POINTS = 20


class ScoreTally:
    """Keeps the per-player score purely from game notifications."""

    def __init__(self) -> None:
        self.points = {Player.ONE: 0, Player.TWO: 0}

    def __call__(self, event: GameEvent) -> None:
        if event.player is None:
            return
        if event.kind == EventKind.MILL_FORMED:
            self.points[event.player] += MILL_POINTS
        elif event.kind == EventKind.PIECE_CAPTURED:
            self.points[event.player] += CAPTURE_POINTS
        elif event.kind == EventKind.GAME_OVER:
            self.points[event.player] += WIN_POINTS


def describe_move(move: Move) -> str:
    if isinstance(move, Place):
        return f"{move.position} に配置"
    if isinstance(move, MoveTo):
        return f"{move.source} -> {move.target}"
    if isinstance(move, Capture):
        return f"{move.position} を除去"
    if isinstance(move, SkipCapture):
        return "除去なし"
    return repr(move)


def format_status(game: MillGame) -> str:
    remaining = game.pieces_remaining
    on_board = game.pieces_on_board
    lines = [
        game.state.render(),
        f"手番: {game.current_player.name}  フェーズ: {game.phase.value}",
        f"手持ち: ONE={remaining[0]} TWO={remaining[1]}  盤上: ONE={on_board[0]} TWO={on_board[1]}",
    ]
    if game.awaiting_capture:
        lines.append(f"除去できる駒: {sorted(game.removable_positions)}")
    return "\n".join(lines)


def prompt_human_move(game: MillGame) -> Move:
    moves = legal_moves(game.state)
    by_index = {encode_action(move): move for move in moves}
    print("合法手:")
    for idx, move in by_index.items():
        print(f"  {idx}: {describe_move(move)}")
    while True:
        raw = input("手の index (q で終了): ").strip()
        if raw.lower() in {"q", "quit", "exit"}:
            print("ゲームを終了します。")
            sys.exit(0)
        if not raw.isdigit():
            print("数字を入力してください。")
            continue
        idx = int(raw)
        if idx in by_index:
            return by_index[idx]
        print("不正な index です。もう一度。")


def submit_human_move(game: MillGame, move: Move):
    if isinstance(move, Place):
        return game.click(move.position)
    if isinstance(move, MoveTo):
        if game.selected != move.source:
            result = game.click(move.source)
            if not result.ok:
                return result
        return game.click(move.target)
    if isinstance(move, Capture):
        return game.capture(move.position)
    return game.skip_capture()


def save_log(log: Dict, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(log, ensure_ascii=False, indent=2))
    print(f"ログを {path} に保存しました。")


def replay_logged_game(log_path: Path, *, verbose: bool = True) -> Dict[str, object]:
    data = json.loads(log_path.read_text())
    moves = data.get("moves", [])
    state = initialize_game_state()
    if verbose:
        print("ログリプレイを開始します。")
        print(state.render())
    for entry in moves:
        move = decode_action(int(entry["action_index"]))
        state = apply_move(state, move)
        if verbose:
            actor = entry.get("actor", "unknown")
            player = entry.get("player", "?")
            print(f"{actor} (Player {player}) の手: {describe_move(move)}")
            print(state.render())
    if state.game_over:
        result = state.winner.name if state.winner is not None else "draw"
    else:
        result = "ongoing"
    summary = {
        "result": result,
        "moves": len(moves),
        "board": state.board.tolist(),
        "phase": state.phase.value,
    }
    if verbose:
        print("リプレイ終了。")
        print(f"結果: {summary['result']}")
    return summary


def play_interactive(args: argparse.Namespace) -> None:
    profiles = load_profiles(args.config) if args.config else DEFAULT_PROFILES
    weights = load_weights(args.config) if args.config else None
    profile = get_profile(args.difficulty, profiles)
    rng = np.random.default_rng(args.seed)
    human = Player.ONE if args.human_player == 1 else Player.TWO

    game = MillGame()
    tally = ScoreTally()
    game.add_listener(tally)
    log_records: List[Dict] = []
    move_index = 0

    def record(actor: str, player: Player, move: Move) -> None:
        nonlocal move_index
        log_records.append(
            {
                "move_index": move_index,
                "actor": actor,
                "player": int(player),
                "action_index": encode_action(move),
                "move": describe_move(move),
            }
        )
        move_index += 1

    print(f"難易度: {profile.name} (探索深さ {profile.depth})")
    while not game.game_over and game.state.ply_count < args.max_ply:
        print("\n現在の盤面:")
        print(format_status(game))
        mover = game.current_player

        if mover == human:
            move = prompt_human_move(game)
            result = submit_human_move(game, move)
            if not result.ok:
                print(f"その手は指せません: {result.error.value}")
                continue
            record("human", mover, move)
        else:
            if args.thinking_delay:
                time.sleep(profile.thinking_ms / 1000.0)
            game.ai_move(profile, weights=weights, rng=rng)
            search = game.last_search
            for step in search.move.steps():
                record("ai", mover, step)
            print(f"AI の手: {', '.join(describe_move(step) for step in search.move.steps())}")

    print("\n最終盤面:")
    print(format_status(game))
    if game.winner is None:
        print("引き分け。")
    elif game.winner == human:
        print("あなたの勝利！")
    else:
        print("AI の勝利！")
    print(f"スコア: ONE={tally.points[Player.ONE]} TWO={tally.points[Player.TWO]}")

    if args.log_file:
        metadata = {
            "human_player": int(human),
            "difficulty": profile.name,
            "depth": profile.depth,
            "seed": args.seed,
            "result": game.winner.name if game.winner is not None else "draw",
            "score": {player.name: points for player, points in tally.points.items()},
        }
        save_log({"metadata": metadata, "moves": log_records}, Path(args.log_file))


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Play Nine Men's Morris in the console against AI.")
    parser.add_argument("--difficulty", choices=[d.value for d in Difficulty], default="medium")
    parser.add_argument("--config", type=str, default=None, help="YAML file overriding difficulty profiles")
    parser.add_argument("--human-player", type=int, choices=[1, 2], default=1)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--max-ply", type=int, default=400)
    parser.add_argument("--thinking-delay", action="store_true", help="Pause like a human opponent")
    parser.add_argument("--log-file", type=str)
    parser.add_argument("--replay-log", type=str, help="Replay a logged game and exit")
    parser.add_argument("--replay-quiet", action="store_true")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if args.replay_log:
        replay_logged_game(Path(args.replay_log), verbose=not args.replay_quiet)
        return

    play_interactive(args)


if __name__ == "__main__":
    main()
