from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Callable

from commit_reveal import Secret, ensure_commitment
from errors import ConfigurationError, FairnessViolation, GameError, RandomnessUnavailableError
from help_table import format_help_table, format_menu
from session import EXIT_TOKEN, GameSession, Resolution, finish, handle_input

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIGURATION = 1
EXIT_ENVIRONMENT = 3
EXIT_FAIRNESS = 4

OUTCOME_MESSAGES = {"Win": "You win!", "Lose": "You lose!", "Draw": "Draw"}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="rps")
    parser.add_argument("--log-level", default=_default_log_level(), help="Logging level (env: RPS_LOG_LEVEL)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    play = sub.add_parser("play", help="Play one provably fair round against the computer")
    play.add_argument("moves", nargs="*", help="Odd number (>= 3) of unique moves, e.g. rock scissors paper")

    verify = sub.add_parser("verify", help="Check a revealed key against the published HMAC")
    verify.add_argument("--key", required=True, help="HMAC key revealed at the end of the game (hex)")
    verify.add_argument("--move", required=True, help="Computer move claimed at the end of the game")
    verify.add_argument("--hmac", required=True, help="HMAC published before the move was chosen (hex)")

    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    if args.cmd == "play":
        return _play(args.moves)
    if args.cmd == "verify":
        return _verify(key=args.key, move=args.move, commitment=args.hmac)

    raise SystemExit("unhandled command")


def _play(moves: list[str], read_line: Callable[[str], str] | None = None) -> int:
    read_line = read_line or input
    try:
        session = GameSession.start(moves)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        print("Please provide an odd number (>= 3) of unique moves.", file=sys.stderr)
        print("Example: rps play rock scissors paper", file=sys.stderr)
        return EXIT_CONFIGURATION
    except RandomnessUnavailableError as exc:
        logger.critical("Cannot start a game: %s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ENVIRONMENT

    print(f"HMAC: {session.commitment}")
    print(format_menu(session.rules))

    while True:
        try:
            line = read_line("Enter your move: ")
        except EOFError:
            line = EXIT_TOKEN

        step = handle_input(session, line)
        session = step.session

        if step.kind == "exit":
            print("Exiting...")
            return EXIT_OK
        if step.kind == "help":
            print(format_help_table(session.rules))
            print(format_menu(session.rules))
            continue
        if step.kind == "invalid":
            print(f"Invalid input, please try again. ({step.error})")
            print(format_menu(session.rules))
            continue

        if step.kind != "resolved" or step.resolution is None:
            raise GameError(f"unexpected step {step.kind!r}")
        _show_resolution(step.resolution)
        finish(session)
        try:
            step.resolution.verify()
        except FairnessViolation as exc:
            print(f"Proof FAILED: {exc}")
            return EXIT_FAIRNESS
        return EXIT_OK


def _show_resolution(resolution: Resolution) -> None:
    print(f"Your move: {resolution.player_move}")
    print(f"Computer move: {resolution.opponent_move}")
    print(OUTCOME_MESSAGES[resolution.outcome])
    print(f"HMAC key: {resolution.secret_hex}")


def _verify(*, key: str, move: str, commitment: str) -> int:
    try:
        secret = Secret.from_hex(key)
    except ValueError as exc:
        print(f"Error: invalid key: {exc}", file=sys.stderr)
        return EXIT_CONFIGURATION

    try:
        ensure_commitment(expected_commitment=commitment, secret=secret, move=move)
    except FairnessViolation as exc:
        print("Proof FAILED: the revealed key and move do not match the published HMAC.")
        print(f"   Published:  {exc.expected_commitment}")
        print(f"   Recomputed: {exc.computed_commitment}")
        return EXIT_FAIRNESS

    print(f"Proof OK: HMAC-SHA256(key, {move!r}) matches the published HMAC.")
    return EXIT_OK


def _default_log_level() -> str:
    return os.environ.get("RPS_LOG_LEVEL", "WARNING")


if __name__ == "__main__":
    raise SystemExit(main())
